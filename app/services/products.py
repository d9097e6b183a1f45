# app/services/products.py
# Каталог: публичное чтение товаров и категорий, админские create/update/delete.
# Товары и категории адресуются либо числовым id, либо slug.

import logging
import re

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.core.errors import (
    ProductFetchError,
    ProductNotFoundError,
    ProductPersistenceError,
    ProductValidationError,
)
from app.models.category import Category
from app.models.product import Product
from app.schemas.product import CategoryOut, ProductCreate, ProductOut, ProductUpdate

logger = logging.getLogger(__name__)

# camelCase поля схемы -> колонки модели
UPDATABLE_FIELDS = {
    "title": "title",
    "description": "description",
    "price": "price",
    "stock": "stock",
    "categoryId": "category_id",
    "imageUrl": "image_url",
    "offerPercentage": "offer_percentage",
    "isAvailable": "is_available",
}


def slugify(title: str) -> str:
    """'Chicken & Waffles' -> 'chicken-waffles'."""
    return re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")[:255]


def product_to_out(product: Product) -> ProductOut:
    return ProductOut(
        id=product.id,
        categoryId=product.category_id,
        categoryName=product.category.name if product.category else None,
        categorySlug=product.category.slug if product.category else None,
        title=product.title,
        slug=product.slug,
        description=product.description,
        price=product.price,
        offerPercentage=product.offer_percentage,
        stock=product.stock,
        imageUrl=product.image_url,
        isAvailable=product.is_available,
        createdAt=product.created_at,
    )


def _ref_filter(column_id, column_slug, ref: str):
    if ref.isdigit():
        return or_(column_id == int(ref), column_slug == ref)
    return column_slug == ref


def _available_products(db: Session):
    return (
        db.query(Product)
        .options(joinedload(Product.category))
        .filter(Product.is_available.is_(True))
        .order_by(Product.created_at.desc(), Product.id.desc())
    )


def list_products(db: Session) -> list[ProductOut]:
    """Доступные товары, новые первыми."""
    try:
        return [product_to_out(p) for p in _available_products(db).all()]
    except SQLAlchemyError as exc:
        logger.exception("Fetching products failed")
        raise ProductFetchError() from exc


def get_product(db: Session, ref: str) -> ProductOut:
    try:
        product = (
            db.query(Product)
            .options(joinedload(Product.category))
            .filter(_ref_filter(Product.id, Product.slug, ref))
            .first()
        )
        result = product_to_out(product) if product is not None else None
    except SQLAlchemyError as exc:
        logger.exception(f"Fetching product {ref!r} failed")
        raise ProductFetchError("Error fetching product") from exc
    if result is None:
        raise ProductNotFoundError(ref)
    return result


def list_categories(db: Session) -> list[CategoryOut]:
    """Категории с числом доступных товаров в каждой."""
    try:
        rows = (
            db.query(Category, func.count(Product.id))
            .outerjoin(Product, (Product.category_id == Category.id) & Product.is_available.is_(True))
            .group_by(Category.id)
            .order_by(Category.created_at.desc(), Category.id.desc())
            .all()
        )
    except SQLAlchemyError as exc:
        logger.exception("Fetching categories failed")
        raise ProductFetchError("Error fetching categories") from exc
    return [
        CategoryOut(
            id=category.id,
            name=category.name,
            slug=category.slug,
            description=category.description,
            imageUrl=category.image_url,
            productCount=count,
            createdAt=category.created_at,
        )
        for category, count in rows
    ]


def list_products_by_category(db: Session, ref: str) -> list[ProductOut]:
    """Неизвестная категория даёт пустой список, а не 404."""
    try:
        products = (
            _available_products(db)
            .join(Product.category)
            .filter(_ref_filter(Category.id, Category.slug, ref))
            .all()
        )
        return [product_to_out(p) for p in products]
    except SQLAlchemyError as exc:
        logger.exception(f"Fetching products of category {ref!r} failed")
        raise ProductFetchError() from exc


def _check_category(db: Session, category_id: int) -> None:
    if db.get(Category, category_id) is None:
        raise ProductValidationError("Category not found")


def _check_slug_free(db: Session, slug: str, product_id: int | None = None) -> None:
    if not slug:
        raise ProductValidationError("Title must contain letters or digits")
    query = db.query(Product.id).filter(Product.slug == slug)
    if product_id is not None:
        query = query.filter(Product.id != product_id)
    if query.first() is not None:
        raise ProductValidationError("Product with this title already exists")


def _save(db: Session, product: Product, action: str) -> ProductOut:
    try:
        db.commit()
        db.refresh(product)
        return product_to_out(product)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(f"Failed to {action} product {product.slug!r}, transaction rolled back")
        raise ProductPersistenceError(f"Failed to {action} product") from exc


def create_product(db: Session, data: ProductCreate) -> ProductOut:
    slug = slugify(data.title)
    _check_category(db, data.categoryId)
    _check_slug_free(db, slug)

    product = Product(
        category_id=data.categoryId,
        title=data.title,
        slug=slug,
        description=data.description or "",
        price=data.price,
        offer_percentage=data.offerPercentage,
        stock=data.stock,
        image_url=data.imageUrl or "",
        is_available=True,
    )
    db.add(product)
    result = _save(db, product, "create")
    logger.info(f"Product {result.id} ({result.slug}) created")
    return result


def update_product(db: Session, product_id: int, data: ProductUpdate) -> ProductOut:
    """Меняет только переданные поля. Новый title пересчитывает slug."""
    product = db.get(Product, product_id)
    if product is None:
        raise ProductNotFoundError(product_id)

    changes = data.model_dump(exclude_none=True)
    if "categoryId" in changes:
        _check_category(db, changes["categoryId"])
    if "title" in changes:
        slug = slugify(changes["title"])
        _check_slug_free(db, slug, product_id)
        product.slug = slug

    for field, value in changes.items():
        setattr(product, UPDATABLE_FIELDS[field], value)

    result = _save(db, product, "update")
    logger.info(f"Product {product_id} updated: {', '.join(sorted(changes)) or 'no changes'}")
    return result


def delete_product(db: Session, product_id: int) -> None:
    """Позиции прошлых заказов остаются: их product_id обнуляется, снимок названия и цены живёт дальше."""
    product = db.get(Product, product_id)
    if product is None:
        raise ProductNotFoundError(product_id)

    try:
        db.delete(product)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(f"Failed to delete product {product_id}, transaction rolled back")
        raise ProductPersistenceError("Failed to delete product") from exc
    logger.info(f"Product {product_id} deleted")
