"""
Application shell routes: data mode status and client route resolution.

The browser client asks ``/pages/resolve`` which view to render for a path
and receives the page metadata (title, description, canonical URL) together
with the data that view needs.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from api.dependencies import ACCESS_DENIED, get_optional_user, get_shell
from api.schemas.catalog import NewsResponse, ToolResponse
from core.domain.catalog import DisplayPage
from core.domain.user import UserProfile
from core.interfaces.repositories import DirectoryStoreError
from infrastructure.config.settings import settings
from services.app_shell import AppShell

logger = logging.getLogger(__name__)

router = APIRouter(tags=["App Shell"])

DEFAULT_META = {
    "title": "VETORRE - AI Tool Directory & Studio",
    "description": "Discover next-gen AI tools, generate cinematic videos with Veo, and create instant visual courses.",
}

PAGE_META = {
    "/": DEFAULT_META,
    "/free-tools": {"title": "Free AI Tools - VETORRE", "description": "Free and freemium AI tools"},
    "/paid-tools": {"title": "Paid AI Tools - VETORRE", "description": "Premium AI tools worth paying for"},
    "/top-tools": {"title": "Top AI Tools - VETORRE", "description": "The best AI tools right now"},
    "/profile": {"title": "Profile - VETORRE", "description": "Your plan and usage"},
    "/admin": {"title": "Admin Dashboard - VETORRE", "description": "Manage AI tools and content"},
    "/pricing": {"title": "Pricing - VETORRE", "description": "Choose your plan and unlock AI features"},
    "/payment-success": {"title": "Payment Successful - VETORRE", "description": "Thank you for your purchase"},
}

NEWS_META = {"title": "News - VETORRE", "description": "The latest AI news"}
NOT_FOUND_META = {"title": "Page Not Found - VETORRE", "description": "This page does not exist"}

LISTING_PAGES = {
    "/free-tools": DisplayPage.FREE.value,
    "/paid-tools": DisplayPage.PAID.value,
    "/top-tools": DisplayPage.TOP.value,
}


def _normalize(path: str) -> str:
    path = "/" + (path or "").strip().lstrip("#").strip("/")
    return path.split("?", 1)[0]


def _descriptor(view: str, path: str, meta: dict, **extra) -> dict:
    return {
        "view": view,
        "path": path,
        "title": meta["title"],
        "description": meta["description"],
        "canonicalUrl": f"{settings.frontend_url.rstrip('/')}{path}",
        **extra,
    }


def _tools_payload(tools) -> list[dict]:
    return [ToolResponse.from_domain(t).model_dump(by_alias=True, mode="json") for t in tools]


@router.get("/status")
async def get_status(shell: Annotated[AppShell, Depends(get_shell)]):
    """Data mode, database error flag and AI availability."""
    return shell.status()


@router.get("/pages/resolve")
async def resolve_page(
    shell: Annotated[AppShell, Depends(get_shell)],
    profile: Annotated[Optional[UserProfile], Depends(get_optional_user)],
    path: str = Query("/", max_length=500),
):
    """Map a client route to the view the shell renders."""
    path = _normalize(path)

    try:
        if path == "/" or path in LISTING_PAGES:
            tools = await shell.list_tools()
            if path in LISTING_PAGES:
                tools = [t for t in tools if t.page == LISTING_PAGES[path]]
                return _descriptor("tool_listing", path, PAGE_META[path], page=LISTING_PAGES[path], tools=_tools_payload(tools))
            return _descriptor("home", path, PAGE_META[path], tools=_tools_payload(tools))

        if path == "/news" or path.startswith("/news/"):
            news = await shell.list_news()
            article_id = path[len("/news/"):] if path.startswith("/news/") else ""
            article = next((n for n in news if n.id == article_id), None) if article_id else None
            return _descriptor(
                "news",
                path,
                NEWS_META,
                news=[NewsResponse.from_domain(n).model_dump(by_alias=True, mode="json") for n in news],
                article=NewsResponse.from_domain(article).model_dump(by_alias=True, mode="json") if article else None,
            )
    except DirectoryStoreError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    if path == "/admin":
        if AppShell.can_access_admin(profile):
            return _descriptor("admin_dashboard", path, PAGE_META[path])
        return _descriptor("access_denied", path, PAGE_META[path], **{k: v for k, v in ACCESS_DENIED.items() if k != "view"})

    if path == "/profile":
        return _descriptor("profile", path, PAGE_META[path], authenticated=profile is not None)

    if path == "/pricing":
        return _descriptor("pricing", path, PAGE_META[path], currentPlan=profile.plan if profile else None)

    if path == "/payment-success":
        return _descriptor("payment_success", path, PAGE_META[path])

    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=_descriptor("not_found", path, NOT_FOUND_META, homeUrl="/"),
    )
