# scripts/seed_data.py
# Наполняет БД категориями и каталогом пекарни и создаёт администратора.
# Запуск: python -m scripts.seed_data (ADMIN_EMAIL / ADMIN_PASSWORD из окружения)
import logging
import os

from app.core.config import settings
from app.core.security import get_password_hash
from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.models.category import Category
from app.models.product import Product
from app.models.user import RoleEnum, User

import app.models.address
import app.models.cart
import app.models.order

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

IMG = "https://images.unsplash.com/"

# (name, slug, description, image)
CATEGORIES = [
    ("Pancakes", "pancakes", "Fluffy and delicious pancakes", IMG + "photo-1567620905732-2d1ec7ab7445"),
    ("Waffles", "waffles", "Crispy golden waffles", IMG + "photo-1562376552-0d160a2f238d"),
    ("Savory", "savory", "Savory treats and meals", IMG + "photo-1513442542250-854d436a73f2"),
    ("Desserts", "desserts", "Sweet desserts and treats", IMG + "photo-1551024506-0bccd828d307"),
]

# (category slug, title, slug, description, price, offer %, stock, image)
PRODUCTS = [
    ("pancakes", "Classic Buttermilk Pancakes", "classic-buttermilk-pancakes", "Fluffy buttermilk pancakes served with maple syrup", 299, 10, 50, IMG + "photo-1567620905732-2d1ec7ab7445"),
    ("pancakes", "Blueberry Pancakes", "blueberry-pancakes", "Pancakes loaded with fresh blueberries", 349, 15, 45, IMG + "photo-1528207776546-365bb710ee93"),
    ("pancakes", "Banana Pancakes", "banana-pancakes", "Pancakes with fresh banana slices", 329, 20, 35, IMG + "photo-1565299624946-b28f40a0ae38"),
    ("waffles", "Belgian Waffles", "belgian-waffles", "Crispy Belgian waffles with butter and syrup", 399, 10, 30, IMG + "photo-1562376552-0d160a2f238d"),
    ("waffles", "Strawberry Waffles", "strawberry-waffles", "Waffles topped with fresh strawberries", 449, 15, 25, IMG + "photo-1612182062970-8310c4642111"),
    ("waffles", "Nutella Waffles", "nutella-waffles", "Waffles drizzled with Nutella", 479, 0, 20, IMG + "photo-1604908176997-125f25cc6f3d"),
    ("savory", "Cheese Omelette", "cheese-omelette", "Three egg omelette with cheese", 279, 0, 60, IMG + "photo-1525351484163-7529414344d8"),
    ("savory", "French Toast", "french-toast", "Golden French toast with cinnamon", 299, 15, 45, IMG + "photo-1484723091739-30a097e8f929"),
    ("desserts", "Chocolate Brownie", "chocolate-brownie", "Rich chocolate brownie with ice cream", 249, 20, 50, IMG + "photo-1607920591413-4ec007e70023"),
    ("desserts", "Cheesecake", "cheesecake", "New York style cheesecake", 349, 15, 35, IMG + "photo-1533134486753-c833f0ed4866"),
    ("desserts", "Apple Pie", "apple-pie", "Homemade apple pie with cinnamon", 299, 0, 8, IMG + "photo-1535920527002-b35e96722eb9"),
]


def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        categories = {c.slug: c for c in db.query(Category).all()}
        for name, slug, description, image_url in CATEGORIES:
            if slug not in categories:
                categories[slug] = Category(name=name, slug=slug, description=description, image_url=image_url)
                db.add(categories[slug])
        db.flush()

        existing = {slug for (slug,) in db.query(Product.slug).all()}
        added = 0
        for category_slug, title, slug, description, price, offer, stock, image_url in PRODUCTS:
            if slug in existing:
                continue
            db.add(Product(category_id=categories[category_slug].id, title=title, slug=slug,
                           description=description, price=price, offer_percentage=offer,
                           stock=stock, image_url=image_url))
            added += 1

        admin_email = os.getenv("ADMIN_EMAIL", "admin@bakery.local")
        admin_password = os.getenv("ADMIN_PASSWORD")
        if admin_password and not db.query(User).filter(User.email == admin_email).first():
            db.add(User(email=admin_email, hashed_password=get_password_hash(admin_password),
                        full_name="Administrator", role=RoleEnum.admin))
            logger.info(f"Admin {admin_email} created")
        elif not admin_password:
            logger.warning("ADMIN_PASSWORD is not set, admin user skipped")

        db.commit()
        logger.info(f"✅ Seeding done: {added} new product(s), {db.query(Product).count()} total, "
                    f"{len(categories)} categories")
    except Exception:
        db.rollback()
        logger.exception("❌ Seeding failed")
        raise
    finally:
        db.close()


if __name__ == '__main__':
    main()
