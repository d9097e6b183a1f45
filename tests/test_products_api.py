"""Tests for the public catalogue and admin product management."""

from datetime import datetime

import pytest

from app.models.category import Category
from app.models.order import OrderItem
from app.models.product import Product
from app.services.products import slugify

from .conftest import auth_headers, count_rows


@pytest.fixture
def catalogue(db):
    """Pancakes and waffles categories; one hidden product and an empty desserts category."""
    pancakes = Category(id=1, name="Pancakes", slug="pancakes", created_at=datetime(2026, 1, 1))
    waffles = Category(id=2, name="Waffles", slug="waffles", created_at=datetime(2026, 1, 2))
    desserts = Category(id=3, name="Desserts", slug="desserts", created_at=datetime(2026, 1, 3))
    db.add_all([pancakes, waffles, desserts])
    db.flush()
    db.add_all([
        Product(id=11, category_id=1, title="Banana Pancakes", slug="banana-pancakes", price=329,
                offer_percentage=20, stock=35, created_at=datetime(2026, 2, 1)),
        Product(id=12, category_id=2, title="Belgian Waffles", slug="belgian-waffles", price=399,
                stock=30, image_url="https://img.example/waffle.jpg", created_at=datetime(2026, 2, 2)),
        Product(id=13, category_id=2, title="Chicken & Waffles", slug="chicken-waffles", price=599,
                stock=15, created_at=datetime(2026, 2, 3)),
        Product(id=14, category_id=1, title="Seasonal Pancakes", slug="seasonal-pancakes", price=379,
                stock=0, is_available=False, created_at=datetime(2026, 2, 4)),
    ])
    db.commit()


def test_slugify():
    assert slugify("Chicken & Waffles") == "chicken-waffles"
    assert slugify("  Crème Brûlée!  ") == "cr-me-br-l-e"
    assert slugify("!!!") == ""


class TestCatalogue:
    def test_lists_available_products_newest_first(self, client, catalogue):
        response = client.get("/api/products")

        assert response.status_code == 200
        products = response.json()["products"]
        assert [p["id"] for p in products] == [13, 12, 11]
        assert products[1]["categoryName"] == "Waffles"
        assert products[1]["categorySlug"] == "waffles"
        assert products[1]["imageUrl"] == "https://img.example/waffle.jpg"
        assert products[2]["offerPercentage"] == 20

    @pytest.mark.parametrize("ref", ["12", "belgian-waffles"])
    def test_get_product_by_id_or_slug(self, client, catalogue, ref):
        response = client.get(f"/api/products/{ref}")

        assert response.status_code == 200
        assert response.json()["product"]["title"] == "Belgian Waffles"

    def test_hidden_product_is_still_reachable_directly(self, client, catalogue):
        response = client.get("/api/products/seasonal-pancakes")

        assert response.status_code == 200
        assert response.json()["product"]["isAvailable"] is False

    def test_unknown_product_is_404(self, client, catalogue):
        response = client.get("/api/products/croissant")

        assert response.status_code == 404
        assert response.json() == {"error": "Product not found"}

    def test_categories_with_available_product_counts(self, client, catalogue):
        response = client.get("/api/categories")

        assert response.status_code == 200
        counts = [(c["slug"], c["productCount"]) for c in response.json()["categories"]]
        assert counts == [("desserts", 0), ("waffles", 2), ("pancakes", 1)]

    @pytest.mark.parametrize("ref", ["2", "waffles"])
    def test_products_by_category(self, client, catalogue, ref):
        response = client.get(f"/api/categories/{ref}/products")

        assert response.status_code == 200
        assert [p["id"] for p in response.json()["products"]] == [13, 12]

    def test_unknown_category_is_empty(self, client, catalogue):
        response = client.get("/api/categories/bagels/products")

        assert response.status_code == 200
        assert response.json() == {"success": True, "products": []}


class TestAdminProducts:
    def test_customer_cannot_manage_products(self, client, customer, catalogue):
        headers = auth_headers(customer)

        assert client.post("/api/admin/products", json={}, headers=headers).status_code == 403
        assert client.put("/api/admin/products/12", json={}, headers=headers).status_code == 403
        assert client.delete("/api/admin/products/12", headers=headers).status_code == 403

    def test_create_product(self, client, admin, catalogue):
        body = {"title": "Nutella Waffles", "price": 479, "categoryId": 2, "stock": 20}

        response = client.post("/api/admin/products", json=body, headers=auth_headers(admin))

        assert response.status_code == 201
        product = response.json()["product"]
        assert product["slug"] == "nutella-waffles"
        assert product["categoryName"] == "Waffles"
        assert product["isAvailable"] is True
        assert product["offerPercentage"] == 0
        assert client.get("/api/products/nutella-waffles").status_code == 200

    @pytest.mark.parametrize("body,error", [
        ({"title": "Nutella Waffles", "price": 479, "categoryId": 99}, "Category not found"),
        ({"title": "Belgian  Waffles!", "price": 479, "categoryId": 2}, "Product with this title already exists"),
        ({"title": "???", "price": 479, "categoryId": 2}, "Title must contain letters or digits"),
    ])
    def test_create_rejects_bad_reference_or_title(self, client, session_factory, admin, catalogue, body, error):
        response = client.post("/api/admin/products", json=body, headers=auth_headers(admin))

        assert response.status_code == 400
        assert response.json() == {"error": error}
        assert count_rows(session_factory, Product) == 4

    @pytest.mark.parametrize("body", [
        {"title": "Nutella Waffles", "categoryId": 2},
        {"title": "Nutella Waffles", "price": 0, "categoryId": 2},
        {"title": "x" * 256, "price": 479, "categoryId": 2},
        {"title": "Nutella Waffles", "price": 479, "categoryId": 2, "offerPercentage": 150},
    ])
    def test_create_validates_fields(self, client, admin, catalogue, body):
        response = client.post("/api/admin/products", json=body, headers=auth_headers(admin))

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"

    def test_partial_update(self, client, admin, catalogue):
        response = client.put(
            "/api/admin/products/11",
            json={"price": 299, "stock": None, "isAvailable": False},
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        product = response.json()["product"]
        assert product["price"] == 299
        assert product["stock"] == 35
        assert product["isAvailable"] is False
        assert product["title"] == "Banana Pancakes"
        assert [p["id"] for p in client.get("/api/products").json()["products"]] == [13, 12]

    def test_rename_updates_slug(self, client, admin, catalogue):
        response = client.put(
            "/api/admin/products/13", json={"title": "Fried Chicken Waffles", "categoryId": 3},
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        product = response.json()["product"]
        assert product["slug"] == "fried-chicken-waffles"
        assert product["categorySlug"] == "desserts"
        assert client.get("/api/products/chicken-waffles").status_code == 404

    def test_rename_onto_existing_slug_rejected(self, client, admin, catalogue):
        response = client.put(
            "/api/admin/products/13", json={"title": "Belgian Waffles"}, headers=auth_headers(admin)
        )

        assert response.status_code == 400
        assert client.get("/api/products/13").json()["product"]["slug"] == "chicken-waffles"

    def test_update_unknown_product_is_404(self, client, admin, catalogue):
        response = client.put("/api/admin/products/99", json={"price": 1}, headers=auth_headers(admin))

        assert response.status_code == 404
        assert response.json() == {"error": "Product not found"}

    def test_delete_keeps_order_snapshots(self, client, session_factory, admin, customer, catalogue):
        body = {"order": {
            "items": [{"id": 12, "title": "Belgian Waffles", "qty": 1, "price": 399}],
            "paymentId": "DIRECT",
        }}
        order = client.post("/api/user/orders", json=body, headers=auth_headers(customer)).json()["order"]

        response = client.delete("/api/admin/products/12", headers=auth_headers(admin))

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Product deleted successfully"}
        assert client.get("/api/products/12").status_code == 404
        assert count_rows(session_factory, OrderItem) == 1
        fetched = client.get(f"/api/user/orders/{order['id']}", headers=auth_headers(customer)).json()["order"]
        assert fetched["items"][0]["title"] == "Belgian Waffles"

    def test_delete_unknown_product_is_404(self, client, admin, catalogue):
        response = client.delete("/api/admin/products/99", headers=auth_headers(admin))

        assert response.status_code == 404
