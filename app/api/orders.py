# app/api/orders.py
# Роуты заказов покупателя. Все требуют Bearer-токен.
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.security import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.order import OrderDetailResponse, OrderListResponse, PlaceOrderBody, PlaceOrderResponse
from app.services import orders as orders_service

router = APIRouter()


@router.post("/user/orders", status_code=status.HTTP_201_CREATED, response_model=PlaceOrderResponse)
def create_order(
    body: PlaceOrderBody,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Оформляет заказ из корзины текущего пользователя."""
    order = orders_service.place_order(db, current_user.id, body.order)
    return PlaceOrderResponse(order=order, orders=[order])


@router.get("/user/orders", response_model=OrderListResponse)
def get_orders(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return OrderListResponse(orders=orders_service.list_orders(db, current_user.id))


@router.get("/user/orders/{order_id}", response_model=OrderDetailResponse)
def get_order_by_id(
    order_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return OrderDetailResponse(order=orders_service.get_order(db, current_user.id, order_id))
