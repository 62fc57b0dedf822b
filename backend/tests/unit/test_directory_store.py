"""
Unit tests for the remote and local directory store variants.
"""

import pytest

from core.domain.catalog import NewsArticle, Tool
from core.interfaces.repositories import DirectoryStoreError
from infrastructure.config.settings import Settings
from services.directory_store import (
    InMemoryProfileRepository,
    LocalDirectoryStore,
    RemoteDirectoryStore,
    create_stores,
)
from services.query_cache import QueryCache



class FakeCatalogRepository:
    """Records calls; delete can be made to fail."""

    def __init__(self, tools=None, news=None):
        self.tools = list(tools or [])
        self.news = list(news or [])
        self.list_calls = 0
        self.fail_delete = False
        self.cache_during_delete = None

    async def list_tools(self):
        self.list_calls += 1
        return list(self.tools)

    async def insert_tool(self, tool):
        saved = tool.with_changes(id=f"db-{len(self.tools) + 1}")
        self.tools.insert(0, saved)
        return saved

    async def update_tool(self, tool):
        return tool

    async def delete_tool(self, tool_id):
        if self.fail_delete:
            raise DirectoryStoreError("Failed to delete tool: connection reset")
        self.tools = [t for t in self.tools if t.id != tool_id]
        return True

    async def list_news(self):
        return list(self.news)

    async def insert_news(self, article):
        return article.with_changes(id="db-news")

    async def update_news(self, article):
        return article

    async def delete_news(self, news_id):
        return True


def _tool(tool_id: str, name: str = "Tool") -> Tool:
    return Tool(id=tool_id, name=name, description="desc")


# ---------------------------------------------------------------------------
# Remote variant
# ---------------------------------------------------------------------------

class TestRemoteDirectoryStore:

    async def test_reads_go_through_cache(self):
        repo = FakeCatalogRepository(tools=[_tool("t1")])
        store = RemoteDirectoryStore(repo, QueryCache())

        await store.list_tools()
        await store.list_tools()
        assert repo.list_calls == 1
        assert store.is_remote

    async def test_add_invalidates_list(self):
        repo = FakeCatalogRepository(tools=[_tool("t1")])
        store = RemoteDirectoryStore(repo, QueryCache())
        await store.list_tools()

        saved = await store.add_tool(_tool("", "New"))
        tools = await store.list_tools()

        assert saved.id == "db-2"
        assert [t.id for t in tools] == ["db-2", "t1"]
        assert repo.list_calls == 2

    async def test_delete_removes_optimistically(self):
        repo = FakeCatalogRepository(tools=[_tool("t1"), _tool("t2")])
        cache = QueryCache()
        store = RemoteDirectoryStore(repo, cache)
        await store.list_tools()

        original_delete = repo.delete_tool

        async def observing_delete(tool_id):
            repo.cache_during_delete = [t.id for t in cache.get_data("tools")]
            return await original_delete(tool_id)

        repo.delete_tool = observing_delete

        assert await store.delete_tool("t1") is True
        assert repo.cache_during_delete == ["t2"]
        assert [t.id for t in await store.list_tools()] == ["t2"]

    async def test_failed_delete_restores_list_and_refetches(self):
        repo = FakeCatalogRepository(tools=[_tool("t1"), _tool("t2")])
        cache = QueryCache()
        store = RemoteDirectoryStore(repo, cache)
        await store.list_tools()
        repo.fail_delete = True

        with pytest.raises(DirectoryStoreError):
            await store.delete_tool("t1")

        assert [t.id for t in cache.get_data("tools")] == ["t1", "t2"]
        # Invalidated on settle, so the next read goes to the backend
        await store.list_tools()
        assert repo.list_calls == 2

    async def test_get_tool_searches_cached_list(self):
        repo = FakeCatalogRepository(tools=[_tool("t1", "Alpha")])
        store = RemoteDirectoryStore(repo, QueryCache())
        assert (await store.get_tool("t1")).name == "Alpha"
        assert await store.get_tool("missing") is None


# ---------------------------------------------------------------------------
# Local variant
# ---------------------------------------------------------------------------

class TestLocalDirectoryStore:

    async def test_new_records_go_to_head(self):
        store = LocalDirectoryStore(tools=[_tool("old")])
        saved = await store.add_tool(_tool("", "Fresh"))

        tools = await store.list_tools()
        assert tools[0].id == saved.id
        assert saved.id and saved.id != "old"
        assert saved.created_at is not None
        assert not store.is_remote

    async def test_news_gets_a_date(self):
        store = LocalDirectoryStore()
        saved = await store.add_news(NewsArticle(title="Hello", content="Body"))
        assert saved.date is not None
        assert (await store.list_news())[0].id == saved.id

    async def test_update_keeps_created_at(self):
        store = LocalDirectoryStore()
        saved = await store.add_tool(_tool("", "Before"))
        updated = await store.update_tool(saved.with_changes(name="After", created_at=None))

        assert updated.name == "After"
        assert updated.created_at == saved.created_at
        assert await store.update_tool(_tool("missing")) is None

    async def test_delete(self):
        store = LocalDirectoryStore(tools=[_tool("a"), _tool("b")])
        assert await store.delete_tool("a") is True
        assert await store.delete_tool("a") is False
        assert [t.id for t in await store.list_tools()] == ["b"]

    async def test_seed_only_when_empty(self):
        store = LocalDirectoryStore()
        assert store.seed_tools([_tool(""), _tool("")]) is True
        assert all(t.id for t in await store.list_tools())
        assert store.seed_tools([_tool("x")]) is False
        assert len(await store.list_tools()) == 2


class TestInMemoryProfileRepository:

    async def test_create_defaults_to_free(self):
        repo = InMemoryProfileRepository()
        profile = await repo.create("User@Example.com", "hash", "user")

        assert profile.email == "user@example.com"
        assert profile.plan == "free"
        assert (await repo.get_credentials("user@example.com"))[1] == "hash"

    async def test_duplicate_email_rejected(self):
        repo = InMemoryProfileRepository()
        await repo.create("a@example.com", "hash", "user")
        with pytest.raises(DirectoryStoreError):
            await repo.create("A@example.com", "hash", "user")

    async def test_increment_generations(self):
        repo = InMemoryProfileRepository()
        profile = await repo.create("a@example.com", "hash", "user")
        assert await repo.increment_generations(profile.id) == 1
        assert await repo.increment_generations(profile.id) == 2
        assert await repo.increment_generations("missing") == 0


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

def test_create_stores_without_database_is_local():
    store, profiles = create_stores(Settings(database_url=None), None)
    assert isinstance(store, LocalDirectoryStore)
    assert isinstance(profiles, InMemoryProfileRepository)


def test_create_stores_with_database_is_remote(session_maker):
    store, _ = create_stores(Settings(database_url="sqlite+aiosqlite:///:memory:"), session_maker)
    assert isinstance(store, RemoteDirectoryStore)
    assert store.cache.stale_time == 300
    assert store.cache.gc_time == 600
