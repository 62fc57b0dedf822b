"""Integration tests for rate limiting middleware."""
import pytest
from httpx import AsyncClient

from api.middleware.rate_limit import RATE_LIMITS, get_rate_limit

pytestmark = pytest.mark.asyncio


class TestRateLimitingLogin:
    """Tests for rate limiting on login endpoint."""

    async def test_login_rate_limit_exceeded(self, async_client: AsyncClient, test_user):
        """Login is limited to 5 requests per minute."""
        for i in range(5):
            response = await async_client.post("/api/v1/auth/login", json={
                "email": f"nonexistent{i}@example.com",
                "password": "wrongpassword1"
            })
            # Should get 401 for wrong credentials, not 429
            assert response.status_code == 401

        response = await async_client.post("/api/v1/auth/login", json={
            "email": "another@example.com",
            "password": "wrongpassword1"
        })
        assert response.status_code == 429

    async def test_login_rate_limit_with_valid_credentials(self, async_client: AsyncClient, test_user):
        """Valid login attempts count toward the limit too."""
        profile, _ = test_user
        for _ in range(5):
            response = await async_client.post("/api/v1/auth/login", json={
                "email": profile.email,
                "password": "testpassword123"
            })
            assert response.status_code == 200

        response = await async_client.post("/api/v1/auth/login", json={
            "email": profile.email,
            "password": "testpassword123"
        })
        assert response.status_code == 429


class TestRateLimitingRegister:
    """Tests for rate limiting on register endpoint."""

    async def test_register_rate_limit_exceeded(self, async_client: AsyncClient):
        """Register is limited to 3 requests per minute."""
        for i in range(3):
            response = await async_client.post("/api/v1/auth/register", json={
                "email": f"newuser{i}@example.com",
                "password": "SecurePass123",
            })
            assert response.status_code == 201

        response = await async_client.post("/api/v1/auth/register", json={
            "email": "newuser4@example.com",
            "password": "SecurePass123",
        })
        assert response.status_code == 429


class TestRateLimitingCheckout:
    """Tests for rate limiting on the checkout endpoint."""

    async def test_checkout_rate_limit_exceeded(self, async_client: AsyncClient):
        """Checkout is limited to 10 requests per minute."""
        for _ in range(10):
            response = await async_client.post("/api/create-checkout", json={"plan": "Gold"})
            assert response.status_code in (400, 500)

        response = await async_client.post("/api/create-checkout", json={"plan": "Gold"})
        assert response.status_code == 429

    async def test_rate_limit_429_response_format(self, async_client: AsyncClient):
        """429 responses carry an error body."""
        for i in range(3):
            await async_client.post("/api/v1/auth/register", json={
                "email": f"format{i}@example.com",
                "password": "SecurePass123",
            })

        response = await async_client.post("/api/v1/auth/register", json={
            "email": "format4@example.com",
            "password": "SecurePass123",
        })
        assert response.status_code == 429

        data = response.json()
        assert "detail" in data or "error" in data


class TestRateLimitingDifferentEndpoints:
    """Tests that rate limits are independent per endpoint."""

    async def test_different_endpoints_have_independent_limits(self, async_client: AsyncClient):
        """Exhausting login does not block registration."""
        for i in range(5):
            await async_client.post("/api/v1/auth/login", json={
                "email": f"user{i}@example.com",
                "password": "wrongpass1"
            })

        response = await async_client.post("/api/v1/auth/login", json={
            "email": "user6@example.com",
            "password": "wrongpass1"
        })
        assert response.status_code == 429

        response = await async_client.post("/api/v1/auth/register", json={
            "email": "independent@example.com",
            "password": "SecurePass123",
        })
        assert response.status_code == 201


class TestRateLimitTable:
    """Route limits are read from the shared table."""

    async def test_known_endpoints(self):
        assert get_rate_limit("login") == "5/minute"
        assert get_rate_limit("register") == "3/minute"
        assert get_rate_limit("checkout") == "10/minute"
        assert get_rate_limit("generation") == "20/minute"
        assert get_rate_limit("webhook") == "100/minute"

    async def test_unknown_endpoint_falls_back_to_default(self):
        assert get_rate_limit("no-such-endpoint") == RATE_LIMITS["default"]
