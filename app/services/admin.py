# app/services/admin.py
# Административные операции над заказами и сводка для дашборда.

import logging
from collections import defaultdict
from datetime import datetime, timedelta

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from app.core.errors import (
    InvalidOrderStatusError,
    OrderFetchError,
    OrderNotFoundError,
    OrderPersistenceError,
)
from app.models.order import Order, OrderItem, OrderStatus
from app.models.product import Product
from app.models.user import RoleEnum, User
from app.schemas.admin import AdminOrderOut, AnalyticsOut, RecentOrderOut, SalesDayOut
from app.schemas.order import OrderOut
from app.services.orders import order_item_to_out, order_to_out

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = (OrderStatus.pending, OrderStatus.processing)
LOW_STOCK_THRESHOLD = 10
RECENT_ORDERS_LIMIT = 10
SALES_CHART_DAYS = 7


def list_all_orders(db: Session) -> list[AdminOrderOut]:
    try:
        return _load_all_orders(db)
    except SQLAlchemyError as exc:
        logger.exception("Fetching all orders failed")
        raise OrderFetchError() from exc


def _load_all_orders(db: Session) -> list[AdminOrderOut]:
    orders = (
        db.query(Order)
        .options(
            joinedload(Order.user),
            selectinload(Order.items).joinedload(OrderItem.product),
        )
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
    return [
        AdminOrderOut(
            id=order.id,
            orderNumber=order.order_number,
            customerId=order.user_id,
            customerEmail=order.user.email if order.user else None,
            totalAmount=order.total_amount,
            status=order.status,
            paymentMethod=order.payment_method,
            paymentStatus=order.payment_status,
            createdAt=order.created_at,
            items=[order_item_to_out(item) for item in order.items],
        )
        for order in orders
    ]


def update_order_status(db: Session, order_id: int, status: str) -> OrderOut:
    """Единственная мутация заказа после создания: статус и updated_at."""
    try:
        new_status = OrderStatus(status)
    except ValueError:
        raise InvalidOrderStatusError(status) from None

    order = db.get(Order, order_id)
    if order is None:
        raise OrderNotFoundError(order_id)

    previous = order.status
    order.status = new_status
    order.updated_at = datetime.utcnow()
    try:
        db.commit()
        db.refresh(order)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(f"Status update of order {order_id} failed, transaction rolled back")
        raise OrderPersistenceError("Failed to update order status") from exc
    logger.info(f"Order {order.order_number}: status {previous.value} -> {new_status.value}")
    return order_to_out(order)


def dashboard_analytics(db: Session, now: datetime | None = None) -> AnalyticsOut:
    try:
        return _collect_analytics(db, now or datetime.utcnow())
    except SQLAlchemyError as exc:
        logger.exception("Building dashboard analytics failed")
        raise OrderFetchError("Failed to fetch analytics") from exc


def _collect_analytics(db: Session, now: datetime) -> AnalyticsOut:
    """
    Сводка для админ-дашборда.

    Выручка считается только по завершённым заказам; график продаж — по дням
    начиная с полуночи SALES_CHART_DAYS дней назад. Группировка по дням
    выполняется в Python, чтобы одинаково работать на Postgres и SQLite.
    """
    total_sales = (
        db.query(func.coalesce(func.sum(Order.total_amount), 0.0))
        .filter(Order.status == OrderStatus.completed)
        .scalar()
    )
    total_orders = db.query(func.count(Order.id)).scalar()
    active_orders = (
        db.query(func.count(Order.id))
        .filter(Order.status.in_(ACTIVE_STATUSES))
        .scalar()
    )
    total_customers = (
        db.query(func.count(User.id))
        .filter(User.role == RoleEnum.customer)
        .scalar()
    )
    low_stock_items = (
        db.query(func.count(Product.id))
        .filter(Product.stock < LOW_STOCK_THRESHOLD, Product.is_available.is_(True))
        .scalar()
    )

    recent = (
        db.query(Order)
        .options(joinedload(Order.user))
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(RECENT_ORDERS_LIMIT)
        .all()
    )

    since = datetime.combine(now.date() - timedelta(days=SALES_CHART_DAYS), datetime.min.time())
    daily_counts: dict = defaultdict(int)
    daily_sales: dict = defaultdict(float)
    rows = (
        db.query(Order.created_at, Order.total_amount)
        .filter(Order.created_at >= since)
        .all()
    )
    for created_at, amount in rows:
        day = created_at.date()
        daily_counts[day] += 1
        daily_sales[day] += amount

    return AnalyticsOut(
        totalSales=f"{float(total_sales):.2f}",
        totalOrders=total_orders,
        activeOrders=active_orders,
        totalCustomers=total_customers,
        lowStockItems=low_stock_items,
        recentOrders=[
            RecentOrderOut(
                id=order.id,
                orderNumber=order.order_number,
                totalAmount=order.total_amount,
                status=order.status,
                customerEmail=order.user.email if order.user else None,
                createdAt=order.created_at,
            )
            for order in recent
        ],
        salesChart=[
            SalesDayOut(date=day, orderCount=daily_counts[day], dailySales=daily_sales[day])
            for day in sorted(daily_counts)
        ],
    )
