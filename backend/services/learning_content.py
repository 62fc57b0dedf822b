"""
Lazily generated learning content for tools.

Slides, tutorials and courses are generated the first time a premium user
opens them and persisted back onto the tool, so later views are served from
the store. Generation for a given tool and kind is serialized so two
simultaneous first views do not both call the model.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from enum import StrEnum

from adapters.ai.anthropic_adapter import ContentGenerationError
from core.domain.catalog import Tool
from core.domain.user import UserProfile
from services.app_shell import AppShell

logger = logging.getLogger(__name__)


class ContentKind(StrEnum):
    SLIDES = "slides"
    TUTORIAL = "tutorial"
    COURSE = "course"


class ToolNotFoundError(LookupError):
    pass


class LearningContentService:
    """Serves stored learning content, generating and saving it when missing."""

    def __init__(self, shell: AppShell) -> None:
        self.shell = shell
        self._locks: dict[tuple[str, ContentKind], asyncio.Lock] = {}
        self._lock_users: dict[tuple[str, ContentKind], int] = {}

    @asynccontextmanager
    async def _locked(self, tool_id: str, kind: ContentKind) -> AsyncIterator[None]:
        """Serialize generation per (tool, kind); the lock is dropped once nobody holds or awaits it."""
        key = (tool_id, kind)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
                del self._locks[key]

    @property
    def pending_locks(self) -> int:
        return len(self._locks)

    @staticmethod
    def _has(tool: Tool, kind: ContentKind) -> bool:
        return bool(getattr(tool, kind.value))

    async def _load(self, tool_id: str) -> Tool:
        tool = await self.shell.get_tool(tool_id)
        if tool is None:
            raise ToolNotFoundError(f"Tool {tool_id} not found")
        return tool

    async def get_or_generate(self, tool_id: str, kind: ContentKind, profile: UserProfile) -> tuple[Tool, bool]:
        """
        Return the tool with *kind* populated and whether it was generated now.

        Raises:
            ToolNotFoundError: unknown tool
            ContentGenerationError: the model failed or returned nothing
            DirectoryStoreError: saving the generated content failed
        """
        tool = await self._load(tool_id)
        if self._has(tool, kind):
            return tool, False

        async with self._locked(tool_id, kind):
            # Another request may have finished generating while we waited
            tool = await self._load(tool_id)
            if self._has(tool, kind):
                return tool, False

            if kind == ContentKind.SLIDES:
                content = await self.shell.content.generate_tool_slides(tool)
                if not content:
                    raise ContentGenerationError("No slides were generated")
            elif kind == ContentKind.TUTORIAL:
                content = await self.shell.content.generate_tool_tutorial(tool)
                if not content:
                    raise ContentGenerationError("No tutorial was generated")
            else:
                content = await self.shell.content.generate_full_course(tool)
                if not content.modules:
                    raise ContentGenerationError("No course was generated")

            updated = await self.shell.update_tool(tool.with_changes(**{kind.value: content}))
            if updated is None:
                raise ToolNotFoundError(f"Tool {tool_id} not found")

        await self.shell.record_generation(profile)
        logger.info("Generated %s for tool %s", kind.value, tool_id)
        return updated, True
