"""
Admin login, JWT enforcement and the login rate limiter.
"""
import pytest

from ordering.api import auth as auth_routes
from ordering.core.security import create_access_token, decode_token, hash_password, is_admin

ADMIN_EMAIL = "admin@harveyscafe.com"
ADMIN_PASSWORD = "tandoor-2026"


@pytest.fixture
def admin_credentials(monkeypatch):
    monkeypatch.setattr(auth_routes.settings, "ADMIN_EMAIL", ADMIN_EMAIL)
    monkeypatch.setattr(auth_routes.settings, "ADMIN_PASSWORD_HASH", hash_password(ADMIN_PASSWORD))


def test_token_claims():
    claims = decode_token(create_access_token({"sub": "customer-001", "role": "admin"}))
    assert claims["type"] == "access"
    assert claims["jti"]
    assert is_admin(claims)
    assert not is_admin({"sub": "customer-001"})


@pytest.mark.asyncio
async def test_admin_login_issues_admin_token(client, admin_credentials):
    resp = await client.post("/auth/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})

    assert resp.status_code == 200
    token = resp.json()["access_token"]
    assert is_admin(decode_token(token))

    listed = await client.get("/admin/orders", headers={"Authorization": f"Bearer {token}"})
    assert listed.status_code == 200


@pytest.mark.asyncio
async def test_wrong_password_is_rejected(client, admin_credentials):
    resp = await client.post("/auth/admin/login", json={"email": ADMIN_EMAIL, "password": "not-the-one"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_login_disabled_without_configured_hash(client, monkeypatch):
    monkeypatch.setattr(auth_routes.settings, "ADMIN_PASSWORD_HASH", "")
    resp = await client.post("/auth/admin/login", json={"email": ADMIN_EMAIL, "password": "anything-goes"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_fourth_attempt_within_window_is_rate_limited(client, admin_credentials):
    for _ in range(3):
        resp = await client.post("/auth/admin/login", json={"email": ADMIN_EMAIL, "password": "guessing-1"})
        assert resp.status_code == 401

    resp = await client.post("/auth/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})

    assert resp.status_code == 429
    assert resp.headers["Retry-After"] == "60"


@pytest.mark.asyncio
async def test_invalid_bearer_token(client):
    resp = await client.get("/orders/mine", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.json()["detail"].startswith("Invalid or expired JWT")
