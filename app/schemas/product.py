# app/schemas/product.py
# Схемы каталога: товары и категории. Публичное чтение и админские create/update.
from datetime import datetime

from pydantic import BaseModel, Field


class ProductOut(BaseModel):
    id: int
    categoryId: int | None
    categoryName: str | None = None
    categorySlug: str | None = None
    title: str
    slug: str
    description: str | None
    price: float
    offerPercentage: int
    stock: int
    imageUrl: str | None
    isAvailable: bool
    createdAt: datetime | None


class CategoryOut(BaseModel):
    id: int
    name: str
    slug: str
    description: str | None
    imageUrl: str | None
    productCount: int
    createdAt: datetime


class ProductCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    price: float = Field(..., gt=0)
    categoryId: int
    description: str | None = Field(default=None, max_length=1000)
    stock: int = Field(default=0, ge=0)
    imageUrl: str | None = Field(default=None, max_length=500)
    offerPercentage: int = Field(default=0, ge=0, le=100)


class ProductUpdate(BaseModel):
    """Частичное обновление: непереданные поля не меняются."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    price: float | None = Field(default=None, gt=0)
    categoryId: int | None = None
    description: str | None = Field(default=None, max_length=1000)
    stock: int | None = Field(default=None, ge=0)
    imageUrl: str | None = Field(default=None, max_length=500)
    offerPercentage: int | None = Field(default=None, ge=0, le=100)
    isAvailable: bool | None = None


class ProductListResponse(BaseModel):
    success: bool = True
    products: list[ProductOut]


class ProductDetailResponse(BaseModel):
    success: bool = True
    product: ProductOut


class CategoryListResponse(BaseModel):
    success: bool = True
    categories: list[CategoryOut]


class ProductDeleteResponse(BaseModel):
    success: bool = True
    message: str = "Product deleted successfully"
