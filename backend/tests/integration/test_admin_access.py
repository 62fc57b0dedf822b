"""Admin gating: only the exact admin role reaches dashboard routes."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

ADMIN_ENDPOINTS = [
    ("GET", "/api/v1/admin/workspace"),
    ("GET", "/api/v1/admin/analytics"),
    ("GET", "/api/v1/admin/schema"),
    ("GET", "/api/v1/admin/manage/tools"),
    ("POST", "/api/v1/admin/queues/tool/generate"),
    ("POST", "/api/v1/admin/rss/fetch"),
    ("POST", "/api/v1/tools"),
    ("DELETE", "/api/v1/news/some-id"),
]


@pytest.mark.parametrize("method,path", ADMIN_ENDPOINTS)
async def test_anonymous_gets_access_denied(async_client: AsyncClient, method, path):
    response = await async_client.request(method, path, json={})
    assert response.status_code == 403
    detail = response.json()["detail"]
    assert detail["view"] == "access_denied"
    assert detail["homeUrl"] == "/"


@pytest.mark.parametrize("method,path", ADMIN_ENDPOINTS)
async def test_regular_user_gets_access_denied(async_client: AsyncClient, auth_headers, method, path):
    response = await async_client.request(method, path, json={}, headers=auth_headers)
    assert response.status_code == 403


async def test_admin_is_admitted(async_client: AsyncClient, admin_headers):
    response = await async_client.get("/api/v1/admin/workspace", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["activeTab"] == "create"


async def test_signed_out_admin_is_denied(async_client: AsyncClient, admin_headers):
    await async_client.post("/api/v1/auth/logout", headers=admin_headers)
    response = await async_client.get("/api/v1/admin/workspace", headers=admin_headers)
    assert response.status_code == 403
