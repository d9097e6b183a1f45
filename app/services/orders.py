# app/services/orders.py
# Оформление и чтение заказов. Сессия БД передаётся снаружи (get_db или тестовая),
# поэтому модуль не знает ни про FastAPI, ни про глобальный engine.

import logging
import random
import time

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from app.core.errors import (
    OrderFetchError,
    OrderNotFoundError,
    OrderPersistenceError,
    OrderValidationError,
)
from app.models.address import Address
from app.models.cart import CartItem
from app.models.order import Order, OrderItem, OrderStatus, PaymentMethod, PaymentStatus
from app.schemas.order import DeliveryAddress, OrderItemOut, OrderOut, OrderRequest

logger = logging.getLogger(__name__)

# Оплата при получении: фронтенд присылает этот paymentId вместо идентификатора платежа
DIRECT_PAYMENT_ID = "DIRECT"


def generate_order_number() -> str:
    """Человекочитаемый номер заказа: время в мс + случайный суффикс. Уникальность держит constraint в БД."""
    return f"ORD-{int(time.time() * 1000)}-{random.randint(0, 999)}"


def classify_payment(payment_id: str) -> tuple[PaymentMethod, PaymentStatus]:
    """DIRECT → наложенный платёж (ещё не оплачен), всё остальное считается оплаченным онлайн."""
    if payment_id == DIRECT_PAYMENT_ID:
        return PaymentMethod.cod, PaymentStatus.pending
    return PaymentMethod.online, PaymentStatus.paid


def compute_total(request: OrderRequest) -> float:
    """Сумма, присланная клиентом, имеет приоритет; иначе считаем по позициям."""
    if request.totalPrice:
        return request.totalPrice
    return sum(item.price * item.qty for item in request.items)


def place_order(db: Session, user_id: int, request: OrderRequest) -> OrderOut:
    """
    Превращает корзину пользователя в заказ одной транзакцией.

    Создаёт строку orders, по строке order_items на каждую позицию и очищает
    корзину пользователя целиком. При любой ошибке транзакция откатывается,
    причина пишется в лог, а наружу уходит OrderPersistenceError.

    Args:
        db: Сессия SQLAlchemy текущего запроса
        user_id: Владелец заказа
        request: Проверенный запрос на оформление

    Returns:
        Созданный заказ; позиции и адрес доставки берутся из запроса, а не перечитываются из БД

    Raises:
        OrderValidationError: пустой список позиций или чужой/несуществующий адрес
        OrderPersistenceError: транзакция откатилась
    """
    if not request.items:
        raise OrderValidationError()

    try:
        order_number = generate_order_number()
        address_id = _own_address_id(db, user_id, request.deliveryAddress)
        total_amount = compute_total(request)
        payment_method, payment_status = classify_payment(request.paymentId)

        # Блокируем строки корзины до конца транзакции: повторная отправка из второй вкладки ждёт здесь
        db.query(CartItem).filter(CartItem.user_id == user_id).with_for_update().all()

        order = Order(
            user_id=user_id,
            address_id=address_id,
            order_number=order_number,
            total_amount=total_amount,
            status=OrderStatus.pending,
            payment_method=payment_method,
            payment_status=payment_status,
            notes=request.notes or None,
        )
        db.add(order)
        db.flush()

        for item in request.items:
            db.add(OrderItem(
                order_id=order.id,
                product_id=item.id,
                product_name=item.title,
                quantity=item.qty,
                price=item.price,
                subtotal=item.price * item.qty,
            ))
        db.flush()

        db.query(CartItem).filter(CartItem.user_id == user_id).delete(synchronize_session=False)

        # Ответ собирается до commit: после фиксации заказа обращений к БД больше нет
        result = order_to_out(
            order,
            items=_echo_items(request),
            payment_id=request.paymentId,
            delivery_address=_echo_address(request),
        )
        db.commit()
    except OrderValidationError:
        db.rollback()
        raise
    except Exception as exc:
        db.rollback()
        logger.exception(f"Create order failed for user {user_id}, transaction rolled back")
        raise OrderPersistenceError() from exc

    logger.info(
        f"Order {result.orderNumber} placed by user {user_id}: "
        f"{len(request.items)} item(s), total {result.totalAmount}, {result.paymentMethod.value}"
    )
    return result


def _own_address_id(db: Session, user_id: int, address: DeliveryAddress | None) -> int | None:
    """_id из запроса принимается, только если адрес принадлежит покупателю."""
    if address is None or address.id is None:
        return None
    owned = (
        db.query(Address.id)
        .filter(Address.id == address.id, Address.user_id == user_id)
        .first()
    )
    if owned is None:
        logger.warning(f"User {user_id} referenced address {address.id} they do not own")
        raise OrderValidationError("Delivery address not found")
    return address.id


def _echo_items(request: OrderRequest) -> list[OrderItemOut]:
    return [
        OrderItemOut(
            id=item.id,
            title=item.title,
            imageUrl=item.imageUrl,
            qty=item.qty,
            price=item.price,
            subtotal=item.price * item.qty,
        )
        for item in request.items
    ]


def _echo_address(request: OrderRequest) -> dict | None:
    if request.deliveryAddress is None:
        return None
    delivery_address = request.deliveryAddress.model_dump(by_alias=True)
    if request.deliveryAddress.id is None:
        delivery_address.pop("_id", None)
    return delivery_address


def list_orders(db: Session, user_id: int) -> list[OrderOut]:
    """Все заказы пользователя, новые первыми, с позициями."""
    try:
        orders = (
            _orders_query(db)
            .filter(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )
        return [order_to_out(order) for order in orders]
    except SQLAlchemyError as exc:
        logger.exception(f"Fetching orders failed for user {user_id}")
        raise OrderFetchError() from exc


def get_order(db: Session, user_id: int, order_id: int) -> OrderOut:
    """Один заказ пользователя. Чужой заказ неотличим от несуществующего."""
    try:
        order = (
            _orders_query(db)
            .filter(Order.id == order_id, Order.user_id == user_id)
            .first()
        )
        result = order_to_out(order) if order is not None else None
    except SQLAlchemyError as exc:
        logger.exception(f"Fetching order {order_id} failed for user {user_id}")
        raise OrderFetchError("Failed to fetch order") from exc
    if result is None:
        raise OrderNotFoundError(order_id)
    return result


def _orders_query(db: Session):
    return db.query(Order).options(
        selectinload(Order.items).joinedload(OrderItem.product),
        joinedload(Order.address),
    )


def order_item_to_out(item: OrderItem) -> OrderItemOut:
    return OrderItemOut(
        id=item.product_id,
        title=item.product_name,
        imageUrl=item.product.image_url if item.product and item.product.image_url else "",
        qty=item.quantity,
        price=item.price,
        subtotal=item.subtotal,
    )


def address_to_dict(address: Address) -> dict:
    return {
        "_id": address.id,
        "fullName": address.full_name,
        "phone": address.phone,
        "street": address.street,
        "city": address.city,
        "postalCode": address.postal_code,
    }


def order_to_out(
    order: Order,
    items: list[OrderItemOut] | None = None,
    payment_id: str | None = None,
    delivery_address: dict | None = None,
) -> OrderOut:
    """
    Приводит заказ к формату фронтенда: camelCase плюс алиасы totalPrice и orderDate.

    Без явных items/payment_id/delivery_address значения восстанавливаются из БД.
    Исходный paymentId не хранится, для наложенного платежа он однозначен.
    """
    if items is None:
        items = [order_item_to_out(item) for item in order.items]
    if payment_id is None and order.payment_method == PaymentMethod.cod:
        payment_id = DIRECT_PAYMENT_ID
    # Адрес из БД показываем только владельцу заказа
    if delivery_address is None and order.address is not None and order.address.user_id == order.user_id:
        delivery_address = address_to_dict(order.address)

    return OrderOut(
        id=order.id,
        userId=order.user_id,
        addressId=order.address_id,
        orderNumber=order.order_number,
        totalAmount=order.total_amount,
        totalPrice=order.total_amount,
        status=order.status,
        paymentMethod=order.payment_method,
        paymentStatus=order.payment_status,
        paymentId=payment_id,
        notes=order.notes,
        createdAt=order.created_at,
        updatedAt=order.updated_at,
        orderDate=order.created_at,
        deliveryAddress=delivery_address,
        items=items,
    )
