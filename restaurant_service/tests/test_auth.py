from __future__ import annotations

from fastapi.testclient import TestClient

from restaurant_service.app import app

client = TestClient(app)


def _login_user(c):
    c.post("/auth/login", json={"username": "user", "password": "user123"})


# ── Login / Logout ───────────────────────────────────────────────────────


def test_login_success_user():
    resp = client.post("/auth/login", json={"username": "user", "password": "user123"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["user"]["username"] == "user"
    assert body["user"]["id"] == "8f14e45f-0001"
    assert "password_hash" not in body["user"]


def test_login_success_critic():
    resp = client.post("/auth/login", json={"username": "critic", "password": "critic123"})
    assert resp.status_code == 200
    assert resp.json()["user"]["given_name"] == "Alex"


def test_login_wrong_password():
    resp = client.post("/auth/login", json={"username": "user", "password": "wrong"})
    assert resp.status_code == 401


def test_login_unknown_user():
    resp = client.post("/auth/login", json={"username": "nobody", "password": "x"})
    assert resp.status_code == 401


def test_login_rejects_empty_password():
    resp = client.post("/auth/login", json={"username": "user", "password": ""})
    assert resp.status_code == 422


def test_auth_me_when_logged_in():
    _login_user(client)
    resp = client.get("/auth/me")
    assert resp.status_code == 200
    assert resp.json()["username"] == "user"


def test_auth_me_not_logged_in():
    c = TestClient(app)  # fresh client, no session
    resp = c.get("/auth/me")
    assert resp.status_code == 401


def test_logout():
    _login_user(client)
    resp = client.post("/auth/logout")
    assert resp.status_code == 200
    assert resp.json()["status"] == "logged_out"
    # Session should be cleared
    resp = client.get("/auth/me")
    assert resp.status_code == 401


# ── Route protection ─────────────────────────────────────────────────────


def test_create_restaurant_requires_login():
    c = TestClient(app)
    resp = c.post("/api/restaurants", json={})
    assert resp.status_code == 401


def test_update_restaurant_requires_login():
    c = TestClient(app)
    resp = c.put("/api/restaurants/abc", json={})
    assert resp.status_code == 401


def test_delete_restaurant_requires_login():
    c = TestClient(app)
    assert c.delete("/api/restaurants/abc").status_code == 401


def test_create_review_requires_login():
    c = TestClient(app)
    resp = c.post("/api/restaurants/abc/reviews", json={"content": "Nice", "rating": 4})
    assert resp.status_code == 401


def test_delete_review_requires_login():
    c = TestClient(app)
    assert c.delete("/api/restaurants/abc/reviews/r1").status_code == 401


# ── Public endpoints stay public ─────────────────────────────────────────


def test_health_is_public():
    c = TestClient(app)
    assert c.get("/health").status_code == 200


def test_search_is_public():
    c = TestClient(app)
    assert c.get("/api/restaurants").status_code == 200
