"""
Tests for auth, subscriptions and categories API endpoints
"""
import pytest


def _create(client, name="Netflix", cost="9.99", cycle="monthly", **extra):
    payload = {"name": name, "cost": cost, "billing_cycle": cycle, "next_payment_date": "2026-03-15"}
    payload.update(extra)
    return client.post("/api/v1/subscriptions/", json=payload)


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

def test_unauthenticated_rejected(client):
    assert client.get("/api/v1/subscriptions/").status_code == 401


def test_register_duplicate_email(auth_client):
    response = auth_client.post(
        "/api/v1/auth/register",
        json={"email": "DAVE@mail.com", "password": "password123"},
    )
    assert response.status_code == 409


def test_register_short_password(client):
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "eve@mail.com", "password": "short"},
    )
    assert response.status_code == 400


def test_logout_then_login(auth_client):
    assert auth_client.post("/api/v1/auth/logout").status_code == 200
    assert auth_client.get("/api/v1/subscriptions/").status_code == 401

    bad = auth_client.post("/api/v1/auth/login", json={"email": "dave@mail.com", "password": "wrong-pass"})
    assert bad.status_code == 401

    ok = auth_client.post("/api/v1/auth/login", json={"email": "dave@mail.com", "password": "password123"})
    assert ok.status_code == 200
    assert ok.json()["email"] == "dave@mail.com"
    assert auth_client.get("/api/v1/subscriptions/").status_code == 200


# ---------------------------------------------------------------------------
# Subscriptions
# ---------------------------------------------------------------------------

def test_create_and_list(auth_client):
    response = _create(auth_client)
    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Netflix"
    assert body["cost"] == 9.99
    assert body["currency"] == "RUB"
    assert body["order_index"] == 0
    assert body["category"] is None

    listed = auth_client.get("/api/v1/subscriptions/").json()
    assert [s["id"] for s in listed] == [body["id"]]


def test_create_with_preset_category(auth_client):
    streaming = next(
        c for c in auth_client.get("/api/v1/categories/").json() if c["name"] == "Streaming"
    )
    body = _create(auth_client, category_id=streaming["id"]).json()
    assert body["category"]["name"] == "Streaming"


@pytest.mark.parametrize("payload", [
    {"cost": "0"},
    {"cost": "9.999"},
    {"cost": "abc"},
    {"cycle": "daily"},
    {"color": "blue"},
    {"currency": "RUBL"},
])
def test_create_invalid(auth_client, payload):
    assert _create(auth_client, **payload).status_code == 422


def test_free_tier_limit(auth_client):
    for i in range(5):
        assert _create(auth_client, name=f"S{i}").status_code == 201

    response = _create(auth_client, name="Sixth")
    assert response.status_code == 403
    assert "Free tier limit" in response.json()["detail"]


def test_update_partial(auth_client):
    sub_id = _create(auth_client).json()["id"]

    response = auth_client.put(f"/api/v1/subscriptions/{sub_id}", json={"cost": "12,50", "is_active": False})

    assert response.status_code == 200
    body = response.json()
    assert body["cost"] == 12.5
    assert body["is_active"] is False
    assert body["name"] == "Netflix"


def test_update_empty_body(auth_client):
    sub_id = _create(auth_client).json()["id"]
    assert auth_client.put(f"/api/v1/subscriptions/{sub_id}", json={}).status_code == 400


def test_update_missing(auth_client):
    assert auth_client.put("/api/v1/subscriptions/999", json={"name": "X"}).status_code == 404


def test_delete(auth_client):
    sub_id = _create(auth_client).json()["id"]

    assert auth_client.delete(f"/api/v1/subscriptions/{sub_id}").status_code == 200
    assert auth_client.get("/api/v1/subscriptions/").json() == []
    assert auth_client.delete(f"/api/v1/subscriptions/{sub_id}").status_code == 404


# ---------------------------------------------------------------------------
# Reorder
# ---------------------------------------------------------------------------

def test_reorder(auth_client):
    ids = [_create(auth_client, name=n).json()["id"] for n in ("A", "B", "C")]

    response = auth_client.put(f"/api/v1/subscriptions/{ids[2]}/reorder", json={"new_index": 0})

    assert response.status_code == 200
    listed = auth_client.get("/api/v1/subscriptions/").json()
    assert [(s["name"], s["order_index"]) for s in listed] == [("C", 0), ("A", 1), ("B", 2)]


def test_reorder_out_of_range(auth_client):
    sub_id = _create(auth_client).json()["id"]
    response = auth_client.put(f"/api/v1/subscriptions/{sub_id}/reorder", json={"new_index": 1})
    assert response.status_code == 400


@pytest.mark.parametrize("new_index", [-1, "1", 1.5, True, None])
def test_reorder_invalid_index(auth_client, new_index):
    sub_id = _create(auth_client).json()["id"]
    response = auth_client.put(f"/api/v1/subscriptions/{sub_id}/reorder", json={"new_index": new_index})
    assert response.status_code == 422


def test_reorder_missing(auth_client):
    _create(auth_client)
    response = auth_client.put("/api/v1/subscriptions/999/reorder", json={"new_index": 0})
    assert response.status_code == 404


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

def test_categories_crud(auth_client):
    created = auth_client.post("/api/v1/categories/", json={"name": "Hosting", "color": "#123456"})
    assert created.status_code == 201
    cat_id = created.json()["id"]
    assert created.json()["is_preset"] is False

    assert auth_client.post("/api/v1/categories/", json={"name": "Hosting"}).status_code == 409

    updated = auth_client.put(f"/api/v1/categories/{cat_id}", json={"name": "Servers"})
    assert updated.status_code == 200
    assert updated.json()["name"] == "Servers"

    assert auth_client.delete(f"/api/v1/categories/{cat_id}").status_code == 200
    assert auth_client.delete(f"/api/v1/categories/{cat_id}").status_code == 404


def test_preset_category_forbidden(auth_client):
    preset = auth_client.get("/api/v1/categories/").json()[0]
    assert preset["is_preset"] is True
    assert auth_client.put(f"/api/v1/categories/{preset['id']}", json={"name": "X"}).status_code == 403
    assert auth_client.delete(f"/api/v1/categories/{preset['id']}").status_code == 403


# ---------------------------------------------------------------------------
# System
# ---------------------------------------------------------------------------

def test_health(client):
    assert client.get("/health").text == "ok"
    assert client.get("/ready").text == "ok"
