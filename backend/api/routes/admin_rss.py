"""
Admin RSS import routes.

Fetch a feed into the workspace, then turn individual items into tool or
news drafts (via AI extraction, or directly for news).
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_admin_workspace, get_dashboard
from api.middleware.rate_limit import get_rate_limit, limiter
from api.schemas.admin import PreviewResponse, RssFetchRequest, WorkspaceResponse, entity_payload
from api.utils import dashboard_errors
from services.admin_dashboard import AdminDashboard
from services.admin_workspace import AdminTab, AdminWorkspace, EntityType

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/rss", tags=["Admin - RSS Import"])

Workspace = Annotated[AdminWorkspace, Depends(get_admin_workspace)]
Dashboard = Annotated[AdminDashboard, Depends(get_dashboard)]


@router.post("/fetch", response_model=WorkspaceResponse)
@limiter.limit(get_rate_limit("generation"))
async def fetch_feed(request: Request, body: RssFetchRequest, ws: Workspace, dashboard: Dashboard):
    """Fetch up to ``count`` items (1-50) from the feed URL."""
    ws.switch_tab(AdminTab.RSS)
    with dashboard_errors("Failed to fetch feed"):
        await dashboard.fetch_rss(ws, url=body.url, count=body.count)
    return WorkspaceResponse.from_workspace(ws)


@router.post("/items/{item_id}/tool", response_model=WorkspaceResponse)
@limiter.limit(get_rate_limit("generation"))
async def convert_to_tool(request: Request, item_id: str, ws: Workspace, dashboard: Dashboard):
    """Extract a tool draft with AI and open it in the tool form."""
    with dashboard_errors("Failed to extract tool info"):
        await dashboard.convert_rss_to_tool(ws, item_id)
    return WorkspaceResponse.from_workspace(ws)


@router.post("/items/{item_id}/news", response_model=WorkspaceResponse)
@limiter.limit(get_rate_limit("generation"))
async def convert_to_news(request: Request, item_id: str, ws: Workspace, dashboard: Dashboard):
    """Extract a news draft with AI and open it in the news form."""
    with dashboard_errors("Failed to extract news info"):
        await dashboard.convert_rss_to_news(ws, item_id)
    return WorkspaceResponse.from_workspace(ws)


@router.post("/items/{item_id}/news/direct", response_model=WorkspaceResponse)
async def convert_to_news_directly(item_id: str, ws: Workspace, dashboard: Dashboard):
    """Open the item in the news form as-is, without AI."""
    with dashboard_errors("Failed to load item"):
        dashboard.rss_item_to_news(ws, item_id)
    return WorkspaceResponse.from_workspace(ws)


@router.get("/items/{item_id}/preview", response_model=PreviewResponse)
@limiter.limit(get_rate_limit("generation"))
async def preview_item(request: Request, item_id: str, ws: Workspace, dashboard: Dashboard):
    with dashboard_errors("Failed to generate preview"):
        article = await dashboard.preview_rss_news(ws, item_id)
    return PreviewResponse(type=EntityType.NEWS, item=entity_payload(article))
