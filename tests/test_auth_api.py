"""Tests for registration, token issuance and the bearer dependency."""

from datetime import timedelta

from app.core.security import create_access_token, get_password_hash, verify_password


def register(client, email="carol@example.com", password="s3cret-pass"):
    return client.post("/api/auth/register", json={"email": email, "password": password, "fullName": "Carol"})


def test_password_hash_roundtrip():
    hashed = get_password_hash("crumbs")
    assert hashed != "crumbs"
    assert verify_password("crumbs", hashed)
    assert not verify_password("crust", hashed)


def test_register_and_login(client):
    response = register(client)
    assert response.status_code == 201
    assert response.json()["role"] == "customer"

    token = client.post(
        "/api/auth/token", data={"username": "Carol@Example.com", "password": "s3cret-pass"}
    )
    assert token.status_code == 200
    assert token.json()["token_type"] == "bearer"

    orders = client.get(
        "/api/user/orders", headers={"Authorization": f"Bearer {token.json()['access_token']}"}
    )
    assert orders.status_code == 200
    assert orders.json()["orders"] == []


def test_register_duplicate_email(client):
    register(client)
    response = register(client, email="CAROL@example.com")
    assert response.status_code == 400


def test_login_wrong_password(client):
    register(client)
    response = client.post("/api/auth/token", data={"username": "carol@example.com", "password": "nope"})
    assert response.status_code == 400


def test_expired_token_rejected(client, customer):
    token = create_access_token(subject=str(customer.id), expires_delta=timedelta(minutes=-1))
    response = client.get("/api/user/orders", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_token_for_deleted_user_rejected(client):
    token = create_access_token(subject="4242")
    response = client.get("/api/user/orders", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
