"""
Directory data access: one interface, two variants chosen at startup.

``RemoteDirectoryStore`` reads through the query cache and writes to the
relational store, invalidating the cached list afterwards. Deletes remove the
entity from the cached list optimistically and roll back if the call fails.

``LocalDirectoryStore`` keeps tools and news in process memory for the
lifetime of the process. New records go to the head of their list and nothing
is ever sent over the network.
"""

import logging
from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.domain.catalog import NewsArticle, Tool
from core.domain.user import Plan, UserProfile
from core.interfaces.repositories import (
    CatalogRepository,
    DirectoryStore,
    DirectoryStoreError,
    ProfileRepository,
)
from infrastructure.config.settings import Settings
from infrastructure.database.repositories import SqlCatalogRepository, SqlProfileRepository
from services.query_cache import QueryCache

logger = logging.getLogger(__name__)

TOOLS_KEY = "tools"
NEWS_KEY = "news"


# ── Remote variant ────────────────────────────────────────────────────────────


class RemoteDirectoryStore(DirectoryStore):
    """Database-backed store with cached reads."""

    mode = "remote"

    def __init__(self, repository: CatalogRepository, cache: QueryCache) -> None:
        self._repository = repository
        self._cache = cache

    @property
    def cache(self) -> QueryCache:
        return self._cache

    async def list_tools(self) -> list[Tool]:
        return await self._cache.fetch(TOOLS_KEY, self._repository.list_tools)

    async def add_tool(self, tool: Tool) -> Tool:
        saved = await self._repository.insert_tool(tool)
        self._cache.invalidate(TOOLS_KEY)
        return saved

    async def update_tool(self, tool: Tool) -> Tool | None:
        saved = await self._repository.update_tool(tool)
        self._cache.invalidate(TOOLS_KEY)
        return saved

    async def delete_tool(self, tool_id: str) -> bool:
        return await self._cache.optimistic_remove(
            TOOLS_KEY,
            lambda tool: tool.id == tool_id,
            lambda: self._repository.delete_tool(tool_id),
        )

    async def list_news(self) -> list[NewsArticle]:
        return await self._cache.fetch(NEWS_KEY, self._repository.list_news)

    async def add_news(self, article: NewsArticle) -> NewsArticle:
        saved = await self._repository.insert_news(article)
        self._cache.invalidate(NEWS_KEY)
        return saved

    async def update_news(self, article: NewsArticle) -> NewsArticle | None:
        saved = await self._repository.update_news(article)
        self._cache.invalidate(NEWS_KEY)
        return saved

    async def delete_news(self, news_id: str) -> bool:
        return await self._cache.optimistic_remove(
            NEWS_KEY,
            lambda article: article.id == news_id,
            lambda: self._repository.delete_news(news_id),
        )


# ── Local variant ─────────────────────────────────────────────────────────────


class LocalDirectoryStore(DirectoryStore):
    """Transient in-memory store used when no database is configured."""

    mode = "local"

    def __init__(
        self,
        tools: list[Tool] | None = None,
        news: list[NewsArticle] | None = None,
    ) -> None:
        self._tools: list[Tool] = list(tools or [])
        self._news: list[NewsArticle] = list(news or [])

    def seed_tools(self, tools: list[Tool]) -> bool:
        """Install an initial tool list unless tools already exist."""
        if self._tools:
            logger.info("Local store already holds %d tools, skipping seed", len(self._tools))
            return False
        self._tools = [tool.with_changes(id=tool.id or str(uuid4())) for tool in tools]
        return True

    async def list_tools(self) -> list[Tool]:
        return list(self._tools)

    async def add_tool(self, tool: Tool) -> Tool:
        saved = tool.with_changes(id=str(uuid4()), created_at=datetime.now(UTC))
        self._tools.insert(0, saved)
        return saved

    async def update_tool(self, tool: Tool) -> Tool | None:
        for index, existing in enumerate(self._tools):
            if existing.id == tool.id:
                saved = tool.with_changes(created_at=existing.created_at)
                self._tools[index] = saved
                return saved
        return None

    async def delete_tool(self, tool_id: str) -> bool:
        before = len(self._tools)
        self._tools = [tool for tool in self._tools if tool.id != tool_id]
        return len(self._tools) < before

    async def list_news(self) -> list[NewsArticle]:
        return list(self._news)

    async def add_news(self, article: NewsArticle) -> NewsArticle:
        saved = article.with_changes(id=str(uuid4()), date=article.date or datetime.now(UTC))
        self._news.insert(0, saved)
        return saved

    async def update_news(self, article: NewsArticle) -> NewsArticle | None:
        for index, existing in enumerate(self._news):
            if existing.id == article.id:
                saved = article.with_changes(date=article.date or existing.date)
                self._news[index] = saved
                return saved
        return None

    async def delete_news(self, news_id: str) -> bool:
        before = len(self._news)
        self._news = [article for article in self._news if article.id != news_id]
        return len(self._news) < before


class InMemoryProfileRepository(ProfileRepository):
    """Profiles for local fallback mode; lost on restart."""

    def __init__(self) -> None:
        self._profiles: dict[str, UserProfile] = {}
        self._password_hashes: dict[str, str] = {}

    async def create(self, email: str, password_hash: str, role: str) -> UserProfile:
        email = email.lower()
        if any(p.email == email for p in self._profiles.values()):
            raise DirectoryStoreError("Failed to create profile: email already registered")
        profile = UserProfile(
            id=str(uuid4()),
            email=email,
            role=role,
            plan=Plan.FREE.value,
            created_at=datetime.now(UTC),
        )
        self._profiles[profile.id] = profile
        self._password_hashes[profile.id] = password_hash
        return profile

    async def get_by_id(self, profile_id: str) -> UserProfile | None:
        return self._profiles.get(profile_id)

    async def get_credentials(self, email: str) -> tuple[UserProfile, str] | None:
        email = email.lower()
        for profile in self._profiles.values():
            if profile.email == email:
                return profile, self._password_hashes[profile.id]
        return None

    async def set_plan(self, profile_id: str, plan: str) -> UserProfile | None:
        profile = self._profiles.get(profile_id)
        if profile is None:
            return None
        profile.plan = plan
        profile.subscription_end = None
        return profile

    async def increment_generations(self, profile_id: str) -> int:
        profile = self._profiles.get(profile_id)
        if profile is None:
            return 0
        profile.generations_count += 1
        return profile.generations_count


# ── Selection ─────────────────────────────────────────────────────────────────


def create_stores(
    settings: Settings,
    session_maker: async_sessionmaker[AsyncSession] | None,
) -> tuple[DirectoryStore, ProfileRepository]:
    """Pick the remote or local variant once, based on database configuration."""
    if settings.is_database_configured and session_maker is not None:
        cache = QueryCache(
            stale_time=settings.cache_stale_seconds,
            gc_time=settings.cache_retention_seconds,
        )
        logger.info("Directory store: remote database")
        return (
            RemoteDirectoryStore(SqlCatalogRepository(session_maker), cache),
            SqlProfileRepository(session_maker),
        )

    logger.warning("DATABASE_URL not set; running in local fallback mode")
    return LocalDirectoryStore(), InMemoryProfileRepository()
