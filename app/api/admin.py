# app/api/admin.py
# Административные роуты: заказы, аналитика и управление каталогом. Только для role=admin.
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.security import require_role
from app.db.session import get_db
from app.models.user import RoleEnum
from app.schemas.admin import (
    AdminOrderListResponse,
    AnalyticsResponse,
    StatusUpdateRequest,
    StatusUpdateResponse,
)
from app.schemas.product import ProductCreate, ProductDeleteResponse, ProductDetailResponse, ProductUpdate
from app.services import admin as admin_service
from app.services import products as products_service

router = APIRouter(dependencies=[Depends(require_role(RoleEnum.admin))])


@router.get("/admin/orders", response_model=AdminOrderListResponse)
def get_all_orders(db: Session = Depends(get_db)):
    return AdminOrderListResponse(orders=admin_service.list_all_orders(db))


@router.put("/admin/orders/{order_id}/status", response_model=StatusUpdateResponse)
def update_order_status(order_id: int, body: StatusUpdateRequest, db: Session = Depends(get_db)):
    return StatusUpdateResponse(order=admin_service.update_order_status(db, order_id, body.status))


@router.get("/admin/analytics", response_model=AnalyticsResponse)
def get_dashboard_analytics(db: Session = Depends(get_db)):
    return AnalyticsResponse(analytics=admin_service.dashboard_analytics(db))


@router.post("/admin/products", status_code=status.HTTP_201_CREATED, response_model=ProductDetailResponse)
def create_product(body: ProductCreate, db: Session = Depends(get_db)):
    return ProductDetailResponse(product=products_service.create_product(db, body))


@router.put("/admin/products/{product_id}", response_model=ProductDetailResponse)
def update_product(product_id: int, body: ProductUpdate, db: Session = Depends(get_db)):
    return ProductDetailResponse(product=products_service.update_product(db, product_id, body))


@router.delete("/admin/products/{product_id}", response_model=ProductDeleteResponse)
def delete_product(product_id: int, db: Session = Depends(get_db)):
    products_service.delete_product(db, product_id)
    return ProductDeleteResponse()
