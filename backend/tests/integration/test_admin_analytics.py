"""Integration tests for catalog management, analytics and schema endpoints."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def _seed(client: AsyncClient, headers: dict) -> None:
    for name, category in [("WriterBot", "Writing"), ("Pixelco", "Image"), ("Scribe", "Writing")]:
        await client.post(
            "/api/v1/tools",
            json={"name": name, "description": f"{name} description", "category": category},
            headers=headers,
        )
    for title, category, date in [
        ("Older story", "Research", "2025-01-01T00:00:00Z"),
        ("Newer story", "Funding", "2025-06-01T00:00:00Z"),
    ]:
        await client.post(
            "/api/v1/news",
            json={"title": title, "content": "Body", "category": category, "date": date},
            headers=headers,
        )


async def test_analytics(async_client: AsyncClient, admin_headers):
    await _seed(async_client, admin_headers)

    response = await async_client.get("/api/v1/admin/analytics", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["totalTools"] == 3
    assert data["totalNews"] == 2
    assert data["categoryCount"] == 2
    assert data["toolCategories"] == {"Writing": 2, "Image": 1}
    assert data["newsCategories"] == {"Research": 1, "Funding": 1}


async def test_manage_tools_filter(async_client: AsyncClient, admin_headers):
    await _seed(async_client, admin_headers)

    response = await async_client.get(
        "/api/v1/admin/manage/tools", params={"category": "Writing"}, headers=admin_headers
    )
    data = response.json()
    assert {t["name"] for t in data["items"]} == {"WriterBot", "Scribe"}
    assert "Writing" in data["categories"]


async def test_manage_news_sort(async_client: AsyncClient, admin_headers):
    await _seed(async_client, admin_headers)

    newest = await async_client.get("/api/v1/admin/manage/news", headers=admin_headers)
    oldest = await async_client.get(
        "/api/v1/admin/manage/news", params={"sort": "oldest"}, headers=admin_headers
    )

    assert [n["title"] for n in newest.json()["items"]] == ["Newer story", "Older story"]
    assert [n["title"] for n in oldest.json()["items"]] == ["Older story", "Newer story"]


async def test_manage_news_rejects_unknown_sort(async_client: AsyncClient, admin_headers):
    response = await async_client.get(
        "/api/v1/admin/manage/news", params={"sort": "random"}, headers=admin_headers
    )
    assert response.status_code == 422


async def test_trend_report_mock(async_client: AsyncClient, admin_headers):
    await _seed(async_client, admin_headers)
    response = await async_client.post("/api/v1/admin/analytics/report", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["report"]


async def test_schema(async_client: AsyncClient, admin_headers):
    response = await async_client.get("/api/v1/admin/schema", headers=admin_headers)
    assert response.status_code == 200
    sql = response.json()["sql"].lower()
    assert "create table" in sql
    assert "tools" in sql
    assert "profiles" in sql
