"""
SQLAlchemy implementations of the catalog and profile repositories.

Rows use snake_case storage columns; callers only ever see domain entities.
Backend failures are re-raised as DirectoryStoreError without retrying.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.domain.catalog import NewsArticle, Tool
from core.domain.user import UserProfile
from core.interfaces.repositories import (
    CatalogRepository,
    DirectoryStoreError,
    ProfileRepository,
)

from .models import News as NewsRecord
from .models import Profile as ProfileRecord
from .models import Tool as ToolRecord

logger = logging.getLogger(__name__)


def _row_dict(row: Any) -> dict[str, Any]:
    return {column.key: getattr(row, column.key) for column in row.__table__.columns}


def _tool_from_row(row: ToolRecord) -> Tool:
    return Tool.from_record(_row_dict(row))


def _news_from_row(row: NewsRecord) -> NewsArticle:
    return NewsArticle.from_record(_row_dict(row))


def _profile_from_row(row: ProfileRecord) -> UserProfile:
    return UserProfile(
        id=row.id,
        email=row.email,
        role=row.role,
        plan=row.plan,
        subscription_end=row.subscription_end,
        generations_count=row.generations_count or 0,
        created_at=row.created_at,
    )


class _SessionScope:
    """Shared unit-of-work handling for the SQL repositories."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    @asynccontextmanager
    async def _session(self, action: str) -> AsyncIterator[AsyncSession]:
        async with self._session_maker() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                reason = getattr(e, "orig", None) or e
                logger.error("Database call failed (%s): %s", action, reason)
                raise DirectoryStoreError(f"Failed to {action}: {reason}") from e


class SqlCatalogRepository(_SessionScope, CatalogRepository):
    """Tools and news backed by the relational store."""

    # --- Tools ---

    async def list_tools(self) -> list[Tool]:
        async with self._session("load tools") as session:
            result = await session.execute(
                select(ToolRecord).order_by(ToolRecord.created_at.desc())
            )
            return [_tool_from_row(row) for row in result.scalars().all()]

    async def insert_tool(self, tool: Tool) -> Tool:
        data = tool.to_record()
        data.pop("id", None)
        async with self._session("save tool") as session:
            row = ToolRecord(**data)
            session.add(row)
            await session.flush()
            saved = _tool_from_row(row)
        logger.info("Inserted tool %s (%s)", saved.id, saved.name)
        return saved

    async def update_tool(self, tool: Tool) -> Tool | None:
        data = tool.to_record()
        data.pop("id", None)
        async with self._session("update tool") as session:
            row = await session.get(ToolRecord, tool.id)
            if row is None:
                return None
            for key, value in data.items():
                setattr(row, key, value)
            await session.flush()
            return _tool_from_row(row)

    async def delete_tool(self, tool_id: str) -> bool:
        async with self._session("delete tool") as session:
            result = await session.execute(delete(ToolRecord).where(ToolRecord.id == tool_id))
            return result.rowcount > 0

    # --- News ---

    async def list_news(self) -> list[NewsArticle]:
        async with self._session("load news") as session:
            result = await session.execute(
                select(NewsRecord).order_by(NewsRecord.date.desc(), NewsRecord.created_at.desc())
            )
            return [_news_from_row(row) for row in result.scalars().all()]

    async def insert_news(self, article: NewsArticle) -> NewsArticle:
        data = article.to_record()
        data.pop("id", None)
        if data.get("date") is None:
            data.pop("date", None)
        async with self._session("save news") as session:
            row = NewsRecord(**data)
            session.add(row)
            await session.flush()
            saved = _news_from_row(row)
        logger.info("Inserted news %s", saved.id)
        return saved

    async def update_news(self, article: NewsArticle) -> NewsArticle | None:
        data = article.to_record()
        data.pop("id", None)
        if data.get("date") is None:
            data.pop("date", None)
        async with self._session("update news") as session:
            row = await session.get(NewsRecord, article.id)
            if row is None:
                return None
            for key, value in data.items():
                setattr(row, key, value)
            await session.flush()
            return _news_from_row(row)

    async def delete_news(self, news_id: str) -> bool:
        async with self._session("delete news") as session:
            result = await session.execute(delete(NewsRecord).where(NewsRecord.id == news_id))
            return result.rowcount > 0


class SqlProfileRepository(_SessionScope, ProfileRepository):
    """Profiles backed by the relational store."""

    async def create(self, email: str, password_hash: str, role: str) -> UserProfile:
        async with self._session("create profile") as session:
            row = ProfileRecord(email=email.lower(), password_hash=password_hash, role=role)
            session.add(row)
            await session.flush()
            return _profile_from_row(row)

    async def get_by_id(self, profile_id: str) -> UserProfile | None:
        async with self._session("load profile") as session:
            row = await session.get(ProfileRecord, profile_id)
            return _profile_from_row(row) if row else None

    async def get_credentials(self, email: str) -> tuple[UserProfile, str] | None:
        async with self._session("load profile") as session:
            result = await session.execute(
                select(ProfileRecord).where(ProfileRecord.email == email.lower())
            )
            row = result.scalar_one_or_none()
            return (_profile_from_row(row), row.password_hash) if row else None

    async def set_plan(self, profile_id: str, plan: str) -> UserProfile | None:
        async with self._session("update plan") as session:
            row = await session.get(ProfileRecord, profile_id)
            if row is None:
                return None
            row.plan = plan
            row.subscription_end = None
            await session.flush()
            return _profile_from_row(row)

    async def increment_generations(self, profile_id: str) -> int:
        async with self._session("record generation") as session:
            result = await session.execute(
                update(ProfileRecord)
                .where(ProfileRecord.id == profile_id)
                .values(generations_count=ProfileRecord.generations_count + 1)
                .returning(ProfileRecord.generations_count)
            )
            return result.scalar_one_or_none() or 0
