"""
News API routes.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_admin_profile, get_shell
from api.schemas.catalog import NewsCreate, NewsListResponse, NewsResponse
from core.domain.user import UserProfile
from core.interfaces.repositories import DirectoryStoreError
from services.app_shell import AppShell

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/news", tags=["News"])


def _store_error(action: str, e: DirectoryStoreError) -> HTTPException:
    logger.error("Failed to %s: %s", action, e)
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.get("", response_model=NewsListResponse)
async def list_news(
    shell: Annotated[AppShell, Depends(get_shell)],
    category: Optional[str] = Query(None, max_length=100),
):
    """List articles, newest first."""
    try:
        news = await shell.list_news()
    except DirectoryStoreError as e:
        raise _store_error("load news", e)
    if category:
        news = [n for n in news if n.category == category]
    return NewsListResponse(items=[NewsResponse.from_domain(n) for n in news], total=len(news))


@router.get("/{news_id}", response_model=NewsResponse)
async def get_news(news_id: str, shell: Annotated[AppShell, Depends(get_shell)]):
    try:
        article = await shell.get_news(news_id)
    except DirectoryStoreError as e:
        raise _store_error("load article", e)
    if article is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Article not found")
    return NewsResponse.from_domain(article)


@router.post("", response_model=NewsResponse, status_code=status.HTTP_201_CREATED)
async def create_news(
    payload: NewsCreate,
    shell: Annotated[AppShell, Depends(get_shell)],
    admin: Annotated[UserProfile, Depends(get_admin_profile)],
):
    try:
        saved = await shell.add_news(payload.to_domain())
    except DirectoryStoreError as e:
        raise _store_error("save article", e)
    return NewsResponse.from_domain(saved)


@router.put("/{news_id}", response_model=NewsResponse)
async def update_news(
    news_id: str,
    payload: NewsCreate,
    shell: Annotated[AppShell, Depends(get_shell)],
    admin: Annotated[UserProfile, Depends(get_admin_profile)],
):
    try:
        saved = await shell.update_news(payload.to_domain(news_id))
    except DirectoryStoreError as e:
        raise _store_error("update article", e)
    if saved is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Article not found")
    return NewsResponse.from_domain(saved)


@router.delete("/{news_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_news(
    news_id: str,
    shell: Annotated[AppShell, Depends(get_shell)],
    admin: Annotated[UserProfile, Depends(get_admin_profile)],
):
    try:
        deleted = await shell.delete_news(news_id)
    except DirectoryStoreError as e:
        raise _store_error("delete article", e)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Article not found")
