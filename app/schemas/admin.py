# app/schemas/admin.py
# Схемы административных эндпоинтов: список заказов, смена статуса, аналитика.
import datetime

from pydantic import BaseModel

from app.models.order import OrderStatus, PaymentMethod, PaymentStatus
from app.schemas.order import OrderItemOut, OrderOut


class AdminOrderOut(BaseModel):
    id: int
    orderNumber: str
    customerId: int
    customerEmail: str | None
    totalAmount: float
    status: OrderStatus
    paymentMethod: PaymentMethod
    paymentStatus: PaymentStatus
    createdAt: datetime.datetime
    items: list[OrderItemOut]


class AdminOrderListResponse(BaseModel):
    success: bool = True
    orders: list[AdminOrderOut]


class StatusUpdateRequest(BaseModel):
    # Строка, а не OrderStatus: неизвестный статус должен давать "Invalid status", а не ошибку схемы
    status: str


class StatusUpdateResponse(BaseModel):
    success: bool = True
    order: OrderOut


class RecentOrderOut(BaseModel):
    id: int
    orderNumber: str
    totalAmount: float
    status: OrderStatus
    customerEmail: str | None
    createdAt: datetime.datetime


class SalesDayOut(BaseModel):
    date: datetime.date
    orderCount: int
    dailySales: float


class AnalyticsOut(BaseModel):
    totalSales: str
    totalOrders: int
    activeOrders: int
    totalCustomers: int
    lowStockItems: int
    recentOrders: list[RecentOrderOut]
    salesChart: list[SalesDayOut]


class AnalyticsResponse(BaseModel):
    success: bool = True
    analytics: AnalyticsOut
