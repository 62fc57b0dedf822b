"""
In-memory stale-while-revalidate cache for list queries.

Behaviour per key:
- Fresh data (younger than ``stale_time``) is returned as-is.
- Stale data is returned immediately and refreshed in the background.
- Missing or invalidated data is fetched before returning; concurrent
  callers share one in-flight fetch.
- Entries not read for ``gc_time`` are dropped by ``collect_garbage()``.
- A disabled query never fetches and yields an empty list.

Writes go through the owner of the cache, which calls ``invalidate()`` when a
mutation completes. ``optimistic_remove()`` implements the delete path:
cancel, snapshot, filter, mutate, roll back on failure, invalidate on settle.

Usage::

    cache = QueryCache(stale_time=300, gc_time=600)

    tools = await cache.fetch("tools", repository.list_tools)
    await cache.optimistic_remove(
        "tools",
        lambda tool: tool.id == tool_id,
        lambda: repository.delete_tool(tool_id),
    )
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[list[Any]]]


# ── Internal record stored per key ───────────────────────────────────────────


class _CacheEntry:
    __slots__ = (
        "data",
        "has_data",
        "updated_at",
        "accessed_at",
        "invalidated",
        "version",
        "fetch_version",
        "fetch_task",
        "refresh_task",
    )

    def __init__(self, now: float) -> None:
        self.data: list[Any] = []
        self.has_data: bool = False
        self.updated_at: float = now
        self.accessed_at: float = now
        self.invalidated: bool = False
        # Bumped by invalidate()/cancel(); fetches started under an older
        # version must not write their result back.
        self.version: int = 0
        self.fetch_version: int = 0
        self.fetch_task: asyncio.Task | None = None
        self.refresh_task: asyncio.Task | None = None

    @property
    def busy(self) -> bool:
        return any(t is not None and not t.done() for t in (self.fetch_task, self.refresh_task))


# ── QueryCache class ──────────────────────────────────────────────────────────


class QueryCache:
    """Per-key list cache with freshness and retention windows (seconds)."""

    def __init__(
        self,
        stale_time: float = 5 * 60,
        gc_time: float = 10 * 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.stale_time = stale_time
        self.gc_time = gc_time
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}

    # ── Reads ─────────────────────────────────────────────────────────────────

    async def fetch(self, key: str, fetcher: Fetcher, *, enabled: bool = True) -> list[Any]:
        """Return the cached list for *key*, fetching or revalidating as needed."""
        if not enabled:
            return []

        now = self._clock()
        entry = self._entries.get(key)
        if entry is not None and entry.has_data and not entry.invalidated:
            entry.accessed_at = now
            if now - entry.updated_at >= self.stale_time:
                self._revalidate(key, entry, fetcher)
            return list(entry.data)

        return await self._load(key, fetcher)

    def get_data(self, key: str) -> list[Any] | None:
        """Current cached list without fetching, or None if nothing is cached."""
        entry = self._entries.get(key)
        if entry is None or not entry.has_data:
            return None
        return list(entry.data)

    def set_data(self, key: str, data: list[Any]) -> None:
        """Overwrite the cached list (used for optimistic updates and rollback)."""
        now = self._clock()
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = _CacheEntry(now)
        entry.data = list(data)
        entry.has_data = True
        entry.updated_at = now
        entry.accessed_at = now
        entry.invalidated = False

    def is_fresh(self, key: str) -> bool:
        entry = self._entries.get(key)
        if entry is None or not entry.has_data or entry.invalidated:
            return False
        return self._clock() - entry.updated_at < self.stale_time

    # ── Invalidation ──────────────────────────────────────────────────────────

    def invalidate(self, key: str) -> None:
        """Force the next read of *key* to refetch before returning."""
        entry = self._entries.get(key)
        if entry is None:
            return
        entry.invalidated = True
        entry.version += 1
        logger.debug("query_cache: invalidated %s", key)

    async def cancel(self, key: str) -> None:
        """Stop in-flight refreshes of *key* from overwriting the cached list."""
        entry = self._entries.get(key)
        if entry is None:
            return
        entry.version += 1
        task = entry.refresh_task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception:
                logger.debug("query_cache: cancelled refresh of %s had already failed", key)
        entry.refresh_task = None

    async def optimistic_remove(
        self,
        key: str,
        predicate: Callable[[Any], bool],
        mutation: Callable[[], Awaitable[Any]],
    ) -> Any:
        """
        Remove matching items from the cached list before *mutation* resolves.

        On failure the previous list is restored and the error re-raised. The
        key is invalidated once the mutation settles, whatever the outcome.
        """
        await self.cancel(key)
        previous = self.get_data(key)
        if previous is not None:
            self.set_data(key, [item for item in previous if not predicate(item)])

        try:
            return await mutation()
        except Exception:
            if previous is not None:
                self.set_data(key, previous)
                logger.info("query_cache: rolled back optimistic removal on %s", key)
            raise
        finally:
            self.invalidate(key)

    # ── Housekeeping ──────────────────────────────────────────────────────────

    def collect_garbage(self) -> int:
        """
        Drop idle entries not read within ``gc_time``.

        Returns the number of entries removed.
        """
        now = self._clock()
        expired = [
            key
            for key, entry in self._entries.items()
            if not entry.busy and now - entry.accessed_at >= self.gc_time
        ]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("query_cache: collected %d idle entries", len(expired))
        return len(expired)

    def clear(self) -> None:
        for entry in self._entries.values():
            for task in (entry.fetch_task, entry.refresh_task):
                if task is not None and not task.done():
                    task.cancel()
        self._entries.clear()

    def keys(self) -> list[str]:
        return list(self._entries)

    # ── Internal helpers ──────────────────────────────────────────────────────

    async def _load(self, key: str, fetcher: Fetcher) -> list[Any]:
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = _CacheEntry(self._clock())

        stale_fetch = entry.fetch_version != entry.version
        if entry.fetch_task is None or entry.fetch_task.done() or stale_fetch:
            entry.fetch_version = entry.version
            entry.fetch_task = asyncio.create_task(
                self._run_fetch(key, entry, fetcher), name=f"qc-fetch-{key}"
            )
        # Shielded so one cancelled caller does not abort the shared fetch
        data = await asyncio.shield(entry.fetch_task)
        return list(data)

    def _revalidate(self, key: str, entry: _CacheEntry, fetcher: Fetcher) -> None:
        if entry.busy:
            return
        task = asyncio.create_task(self._run_fetch(key, entry, fetcher), name=f"qc-refresh-{key}")
        task.add_done_callback(lambda t: self._log_refresh_failure(key, t))
        entry.refresh_task = task

    async def _run_fetch(self, key: str, entry: _CacheEntry, fetcher: Fetcher) -> list[Any]:
        version = entry.version
        data = list(await fetcher())
        if entry.version == version and self._entries.get(key) is entry:
            now = self._clock()
            entry.data = data
            entry.has_data = True
            entry.invalidated = False
            entry.updated_at = now
            entry.accessed_at = now
        return data

    @staticmethod
    def _log_refresh_failure(key: str, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("query_cache: background refresh of %s failed: %s", key, exc)
