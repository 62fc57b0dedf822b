"""Integration tests for shell status, route resolution and health checks."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def test_status_remote_mode(async_client: AsyncClient):
    response = await async_client.get("/api/v1/status")
    assert response.status_code == 200
    assert response.json() == {"mode": "remote", "dbError": False, "aiAvailable": False}


async def test_health(async_client: AsyncClient):
    data = (await async_client.get("/api/v1/health")).json()
    assert data["status"] == "healthy"
    assert data["mode"] == "remote"


async def test_root(async_client: AsyncClient):
    response = await async_client.get("/")
    assert response.status_code == 200


async def test_security_headers(async_client: AsyncClient):
    response = await async_client.get("/api/v1/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert "X-Request-ID" in response.headers


class TestResolve:

    async def test_home(self, async_client: AsyncClient):
        data = (await async_client.get("/api/v1/pages/resolve", params={"path": "/"})).json()
        assert data["view"] == "home"
        assert data["tools"] == []
        assert data["canonicalUrl"].endswith("/")

    async def test_hash_route(self, async_client: AsyncClient):
        data = (await async_client.get("/api/v1/pages/resolve", params={"path": "#/free-tools"})).json()
        assert data["view"] == "tool_listing"
        assert data["page"] == "free-tools"
        assert data["title"] == "Free AI Tools - VETORRE"

    async def test_news_article(self, async_client: AsyncClient, admin_headers):
        created = await async_client.post(
            "/api/v1/news",
            json={"title": "Big launch", "content": "Details"},
            headers=admin_headers,
        )
        article_id = created.json()["id"]

        data = (await async_client.get("/api/v1/pages/resolve", params={"path": f"/news/{article_id}"})).json()
        assert data["view"] == "news"
        assert data["article"]["id"] == article_id
        assert len(data["news"]) == 1

    async def test_admin_denied_for_anonymous(self, async_client: AsyncClient):
        data = (await async_client.get("/api/v1/pages/resolve", params={"path": "/admin"})).json()
        assert data["view"] == "access_denied"
        assert data["homeUrl"] == "/"

    async def test_admin_denied_for_regular_user(self, async_client: AsyncClient, auth_headers):
        data = (
            await async_client.get("/api/v1/pages/resolve", params={"path": "/admin"}, headers=auth_headers)
        ).json()
        assert data["view"] == "access_denied"

    async def test_admin_dashboard(self, async_client: AsyncClient, admin_headers):
        data = (
            await async_client.get("/api/v1/pages/resolve", params={"path": "/admin"}, headers=admin_headers)
        ).json()
        assert data["view"] == "admin_dashboard"

    async def test_pricing_shows_plan(self, async_client: AsyncClient, auth_headers):
        data = (
            await async_client.get("/api/v1/pages/resolve", params={"path": "/pricing"}, headers=auth_headers)
        ).json()
        assert data["view"] == "pricing"
        assert data["currentPlan"] == "free"

    async def test_unknown_path(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/pages/resolve", params={"path": "/nowhere"})
        assert response.status_code == 404
        assert response.json()["view"] == "not_found"
