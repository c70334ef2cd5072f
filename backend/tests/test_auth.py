# tests/test_auth.py — Registration, login and token handling
from datetime import timedelta

import pytest
from httpx import AsyncClient

from auth import AuthService
from tests.conftest import TEST_PASSWORD


@pytest.mark.asyncio
class TestRegistration:
    async def test_register_success(self, client: AsyncClient):
        res = await client.post("/api/v1/auth/register", json={
            "name": "New User",
            "email": "NewUser@Test.com",
            "password": "SecurePass123!",
        })
        assert res.status_code == 201
        data = res.json()
        assert data["email"] == "newuser@test.com"
        assert data["name"] == "New User"
        assert data["external_id"]
        assert "password_hash" not in data
        assert "id" not in data

    async def test_register_short_password(self, client: AsyncClient):
        res = await client.post("/api/v1/auth/register", json={
            "name": "Weak",
            "email": "weak@test.com",
            "password": "short",
        })
        assert res.status_code == 422

    async def test_register_blank_name(self, client: AsyncClient):
        res = await client.post("/api/v1/auth/register", json={
            "name": "   ",
            "email": "blank@test.com",
            "password": "SecurePass123!",
        })
        assert res.status_code == 422

    async def test_register_duplicate_email(self, client: AsyncClient):
        body = {"name": "Dupe", "email": "dupe@test.com", "password": "SecurePass123!"}
        first = await client.post("/api/v1/auth/register", json=body)
        assert first.status_code == 201
        res = await client.post("/api/v1/auth/register", json={**body, "email": "DUPE@test.com"})
        assert res.status_code == 409
        assert res.json()["error"] == "conflict"

    async def test_register_invalid_email(self, client: AsyncClient):
        res = await client.post("/api/v1/auth/register", json={
            "name": "Nope",
            "email": "not-an-email",
            "password": "SecurePass123!",
        })
        assert res.status_code == 422


@pytest.mark.asyncio
class TestLogin:
    async def test_login_success(self, client: AsyncClient, alice):
        res = await client.post("/api/v1/auth/login", json={
            "email": "alice@nexboard.dev",
            "password": TEST_PASSWORD,
        })
        assert res.status_code == 200
        data = res.json()
        assert data["token"]
        assert data["token_type"] == "bearer"
        assert data["user"]["external_id"] == alice.external_id

    async def test_login_token_is_usable(self, client: AsyncClient, alice):
        res = await client.post("/api/v1/auth/login", json={
            "email": "alice@nexboard.dev",
            "password": TEST_PASSWORD,
        })
        token = res.json()["token"]
        profile = await client.get(
            "/api/v1/users/profile",
            headers={"Authorization": f"Bearer {token}"},
        )
        assert profile.status_code == 200
        assert profile.json()["email"] == "alice@nexboard.dev"

    async def test_login_wrong_password(self, client: AsyncClient, alice):
        res = await client.post("/api/v1/auth/login", json={
            "email": "alice@nexboard.dev",
            "password": "WrongPassword!",
        })
        assert res.status_code == 401

    async def test_login_unknown_email(self, client: AsyncClient):
        res = await client.post("/api/v1/auth/login", json={
            "email": "ghost@nexboard.dev",
            "password": TEST_PASSWORD,
        })
        assert res.status_code == 401


@pytest.mark.asyncio
class TestTokens:
    async def test_missing_token(self, client: AsyncClient):
        res = await client.get("/api/v1/workspaces")
        assert res.status_code in (401, 403)

    async def test_garbage_token(self, client: AsyncClient):
        res = await client.get(
            "/api/v1/workspaces",
            headers={"Authorization": "Bearer not.a.jwt"},
        )
        assert res.status_code == 401

    async def test_expired_token(self, client: AsyncClient, alice):
        token = AuthService.create_access_token(
            {"sub": alice.external_id, "email": alice.email},
            expires_delta=timedelta(seconds=-10),
        )
        res = await client.get(
            "/api/v1/workspaces",
            headers={"Authorization": f"Bearer {token}"},
        )
        assert res.status_code == 401
        assert res.json()["detail"] == "Token expired"

    async def test_token_for_unknown_user_is_not_found(self, client: AsyncClient):
        token = AuthService.token_for("00000000-0000-0000-0000-000000000000", "ghost@nexboard.dev")
        res = await client.get(
            "/api/v1/workspaces",
            headers={"Authorization": f"Bearer {token}"},
        )
        assert res.status_code == 404
        assert res.json()["error"] == "not_found"


def test_password_hash_round_trip():
    hashed = AuthService.hash_password("SecurePass123!")
    assert hashed != "SecurePass123!"
    assert AuthService.verify_password("SecurePass123!", hashed)
    assert not AuthService.verify_password("other", hashed)

