# app/api/products.py
# Публичный каталог: товары и категории, без авторизации.
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.product import CategoryListResponse, ProductDetailResponse, ProductListResponse
from app.services import products as products_service

router = APIRouter()


@router.get("/products", response_model=ProductListResponse)
def get_products(db: Session = Depends(get_db)):
    return ProductListResponse(products=products_service.list_products(db))


@router.get("/products/{product_ref}", response_model=ProductDetailResponse)
def get_product(product_ref: str, db: Session = Depends(get_db)):
    """Товар по id или slug."""
    return ProductDetailResponse(product=products_service.get_product(db, product_ref))


@router.get("/categories", response_model=CategoryListResponse)
def get_categories(db: Session = Depends(get_db)):
    return CategoryListResponse(categories=products_service.list_categories(db))


@router.get("/categories/{category_ref}/products", response_model=ProductListResponse)
def get_products_by_category(category_ref: str, db: Session = Depends(get_db)):
    return ProductListResponse(products=products_service.list_products_by_category(db, category_ref))
