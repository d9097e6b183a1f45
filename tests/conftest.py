"""Pytest fixtures for the bakery API tests."""

import itertools
import os

# Settings are read at import time, so the environment goes first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, func
from sqlalchemy.orm import sessionmaker

from app.core.security import create_access_token
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models.cart import CartItem
from app.models.order import Order, OrderItem
from app.models.product import Product
from app.models.user import RoleEnum, User
from app.services import orders as orders_service


@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite so every session gets its own connection and real transactions."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'bakery.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    """Test client whose requests use the test database."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def sequential_order_numbers(monkeypatch):
    """Deterministic order numbers; the real generator may collide within one millisecond."""
    counter = itertools.count(1)
    monkeypatch.setattr(
        orders_service, "generate_order_number", lambda: f"ORD-TEST-{next(counter):04d}"
    )


def make_user(db, email, role=RoleEnum.customer):
    user = User(email=email, hashed_password="unused", full_name=email.split("@")[0], role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def customer(db):
    return make_user(db, "alice@example.com")


@pytest.fixture
def other_customer(db):
    return make_user(db, "bob@example.com")


@pytest.fixture
def admin(db):
    return make_user(db, "admin@example.com", role=RoleEnum.admin)


@pytest.fixture
def products(db):
    """Waffles (id 7) and pancakes (id 3), plus a low-stock pie."""
    items = [
        Product(id=3, title="Blueberry Pancakes", slug="blueberry-pancakes", price=349,
                stock=45, image_url="https://img.example/pancakes.jpg"),
        Product(id=7, title="Waffle", slug="belgian-waffles", price=399,
                stock=30, image_url="https://img.example/waffle.jpg"),
        Product(id=9, title="Apple Pie", slug="apple-pie", price=299, stock=4),
    ]
    db.add_all(items)
    db.commit()
    return {p.id: p for p in items}


def fill_cart(db, user, lines):
    """lines: iterable of (product_id, quantity)."""
    for product_id, quantity in lines:
        db.add(CartItem(user_id=user.id, product_id=product_id, quantity=quantity))
    db.commit()


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(subject=str(user.id))}"}


def count_rows(session_factory, model, **filters):
    """Counts committed rows from a fresh session."""
    session = session_factory()
    try:
        query = session.query(func.count(model.id))
        for column, value in filters.items():
            query = query.filter(getattr(model, column) == value)
        return query.scalar()
    finally:
        session.close()


def table_counts(session_factory):
    return (
        count_rows(session_factory, Order),
        count_rows(session_factory, OrderItem),
        count_rows(session_factory, CartItem),
    )
