"""Integration tests for authentication endpoints."""

import pytest
from httpx import AsyncClient

from infrastructure.config.settings import settings

pytestmark = pytest.mark.asyncio


class TestRegistration:

    async def test_register_success(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/v1/auth/register",
            json={"email": "NewUser@example.com", "password": "SecurePass123"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "newuser@example.com"
        assert data["role"] == "user"
        assert data["plan"] == "free"
        assert data["isAdmin"] is False
        assert "password" not in data
        assert "passwordHash" not in data

    async def test_register_duplicate_email(self, async_client: AsyncClient, test_user):
        response = await async_client.post(
            "/api/v1/auth/register",
            json={"email": "test@example.com", "password": "SecurePass123"},
        )
        assert response.status_code == 400
        assert "already exists" in response.json()["detail"].lower()

    @pytest.mark.parametrize("password", ["short1", "nodigitshere", "1234567890"])
    async def test_register_weak_password(self, async_client: AsyncClient, password):
        response = await async_client.post(
            "/api/v1/auth/register",
            json={"email": "weak@example.com", "password": password},
        )
        assert response.status_code == 422

    async def test_bootstrap_admin_email(self, async_client: AsyncClient, monkeypatch):
        monkeypatch.setattr(settings, "bootstrap_admin_emails", "boss@example.com")
        response = await async_client.post(
            "/api/v1/auth/register",
            json={"email": "boss@example.com", "password": "SecurePass123"},
        )
        assert response.json()["role"] == "admin"


class TestLoginSession:

    async def test_login_and_me(self, async_client: AsyncClient, test_user):
        response = await async_client.post(
            "/api/v1/auth/login",
            json={"email": "test@example.com", "password": "testpassword123"},
        )
        assert response.status_code == 200
        token = response.json()["access_token"]

        me = await async_client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["email"] == "test@example.com"

    async def test_wrong_password(self, async_client: AsyncClient, test_user):
        response = await async_client.post(
            "/api/v1/auth/login",
            json={"email": "test@example.com", "password": "wrongpassword1"},
        )
        assert response.status_code == 401

    async def test_unknown_email(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/v1/auth/login",
            json={"email": "ghost@example.com", "password": "whatever123"},
        )
        assert response.status_code == 401

    async def test_logout_ends_session(self, async_client: AsyncClient, auth_headers):
        assert (await async_client.get("/api/v1/auth/me", headers=auth_headers)).status_code == 200

        response = await async_client.post("/api/v1/auth/logout", headers=auth_headers)
        assert response.status_code == 200

        after = await async_client.get("/api/v1/auth/me", headers=auth_headers)
        assert after.status_code == 401

    async def test_me_requires_token(self, async_client: AsyncClient):
        assert (await async_client.get("/api/v1/auth/me")).status_code == 401

    async def test_invalid_token(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
