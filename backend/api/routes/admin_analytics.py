"""
Admin manage, analytics and database-schema routes.
"""

import logging
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies import get_admin_profile, get_admin_workspace, get_dashboard
from api.middleware.rate_limit import get_rate_limit, limiter
from api.schemas.admin import (
    AnalyticsResponse,
    ManageNewsResponse,
    ManageToolsResponse,
    SchemaResponse,
    TrendReportResponse,
)
from api.schemas.catalog import NewsResponse, ToolResponse
from api.utils import dashboard_errors
from core.domain.user import UserProfile
from services.admin_dashboard import ALL_CATEGORIES, AdminDashboard
from services.admin_workspace import AdminWorkspace

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin - Analytics"])

Dashboard = Annotated[AdminDashboard, Depends(get_dashboard)]
Admin = Annotated[UserProfile, Depends(get_admin_profile)]


@router.get("/manage/tools", response_model=ManageToolsResponse)
async def manage_tools(
    admin: Admin,
    dashboard: Dashboard,
    category: str = Query(ALL_CATEGORIES, max_length=100),
):
    with dashboard_errors("Failed to load tools"):
        result = await dashboard.manage_tools(category)
    return ManageToolsResponse(
        items=[ToolResponse.from_domain(t) for t in result["items"]],
        categories=result["categories"],
    )


@router.get("/manage/news", response_model=ManageNewsResponse)
async def manage_news(
    ws: Annotated[AdminWorkspace, Depends(get_admin_workspace)],
    dashboard: Dashboard,
    category: str = Query(ALL_CATEGORIES, max_length=100),
    sort: Literal["newest", "oldest"] = Query("newest"),
):
    with dashboard_errors("Failed to load news"):
        result = await dashboard.manage_news(ws, category, sort)
    return ManageNewsResponse(
        items=[NewsResponse.from_domain(n) for n in result["items"]],
        categories=result["categories"],
    )


@router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics(admin: Admin, dashboard: Dashboard):
    """Totals and per-category counts."""
    with dashboard_errors("Failed to load analytics"):
        return AnalyticsResponse(**await dashboard.analytics())


@router.post("/analytics/report", response_model=TrendReportResponse)
@limiter.limit(get_rate_limit("generation"))
async def generate_trend_report(request: Request, admin: Admin, dashboard: Dashboard):
    """AI market-trend report over the current catalog."""
    with dashboard_errors("Error generating report"):
        report = await dashboard.trend_report()
    return TrendReportResponse(report=report)


@router.get("/schema", response_model=SchemaResponse)
async def get_schema(admin: Admin, dashboard: Dashboard):
    """SQL reference for the hosted database tables."""
    return SchemaResponse(sql=dashboard.schema_sql())
