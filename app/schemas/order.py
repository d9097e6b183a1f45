# app/schemas/order.py
# Pydantic-схемы запросов и ответов для заказов. Поля в camelCase — так их ждёт фронтенд.
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.models.order import OrderStatus, PaymentMethod, PaymentStatus


class CartLineSnapshot(BaseModel):
    """Строка корзины в том виде, в котором её видел клиент при оформлении."""

    id: int
    title: str = Field(..., min_length=1)
    qty: int = Field(..., ge=1)
    price: float = Field(..., ge=0)
    imageUrl: str | None = None


class DeliveryAddress(BaseModel):
    """Снимок адреса доставки. Только _id сохраняется как ссылка, остальное возвращается клиенту как есть."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: int | None = Field(default=None, alias="_id")


class OrderRequest(BaseModel):
    items: list[CartLineSnapshot] = Field(..., min_length=1)
    paymentId: str
    totalPrice: float | None = Field(default=None, ge=0)
    deliveryAddress: DeliveryAddress | None = None
    notes: str | None = None


class PlaceOrderBody(BaseModel):
    order: OrderRequest


class OrderItemOut(BaseModel):
    id: int | None
    title: str
    imageUrl: str | None = None
    qty: int
    price: float
    subtotal: float


class OrderOut(BaseModel):
    id: int
    userId: int
    addressId: int | None
    orderNumber: str
    totalAmount: float
    totalPrice: float
    status: OrderStatus
    paymentMethod: PaymentMethod
    paymentStatus: PaymentStatus
    paymentId: str | None
    notes: str | None
    createdAt: datetime
    updatedAt: datetime
    orderDate: datetime
    deliveryAddress: dict[str, Any] | None
    items: list[OrderItemOut]


class PlaceOrderResponse(BaseModel):
    success: bool = True
    order: OrderOut
    # Дублирует order: фронтенд читает список
    orders: list[OrderOut]
    message: str = "Order placed successfully"


class OrderListResponse(BaseModel):
    success: bool = True
    orders: list[OrderOut]


class OrderDetailResponse(BaseModel):
    success: bool = True
    order: OrderOut
