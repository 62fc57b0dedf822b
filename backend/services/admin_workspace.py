"""
Per-admin dashboard state.

Each admin gets one ``AdminWorkspace`` holding the active tab, the tool and
news form drafts, the review queues of generated candidates, the RSS import
state, the pending delete target and the last success banner. Workspaces live
in a ``WorkspaceRegistry`` owned by the application shell and are lost on
restart, just like unsaved form state.
"""

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Optional, Union
from uuid import uuid4

from core.domain.catalog import NEWS_CATEGORIES, DisplayPage, NewsArticle, Tool, ToolCategory
from infrastructure.config.settings import settings

logger = logging.getLogger(__name__)

DEFAULT_RSS_COUNT = 5
DEFAULT_CANDIDATE_COUNT = 3

Entity = Union[Tool, NewsArticle]


class WorkspaceError(Exception):
    """Base exception for dashboard state errors."""

    pass


class QueueItemNotFoundError(WorkspaceError):
    """Raised when a review queue or RSS item id is unknown."""

    pass


class DraftValidationError(WorkspaceError):
    """Raised when a draft is missing the fields an operation needs."""

    pass


class AdminTab(StrEnum):
    CREATE = "create"
    NEWS = "news"
    RSS = "rss"
    MANAGE = "manage"
    ANALYZE = "analyze"
    DATABASE = "database"


class ImageMode(StrEnum):
    URL = "url"
    UPLOAD = "upload"
    GENERATE = "generate"


class EntityType(StrEnum):
    TOOL = "tool"
    NEWS = "news"


def default_tool_draft() -> Tool:
    return Tool(
        category=ToolCategory.WRITING.value,
        price="Freemium",
        website="https://",
        page=DisplayPage.FREE.value,
        how_to_use="",
        slides=[],
        tutorial=[],
    )


def default_news_draft() -> NewsArticle:
    return NewsArticle(category=NEWS_CATEGORIES[0])


@dataclass
class DeleteTarget:
    id: str
    name: str
    type: EntityType


@dataclass
class SuccessNotice:
    """Banner shown after a publish, offering preview or re-edit."""

    type: EntityType
    item: Entity


@dataclass
class RssState:
    url: str = field(default_factory=lambda: settings.rss_default_url)
    count: int = DEFAULT_RSS_COUNT
    items: list = field(default_factory=list)
    error: str = ""
    processing_id: Optional[str] = None


@dataclass
class AdminWorkspace:
    """Form and queue state for one admin."""

    admin_id: str
    active_tab: AdminTab = AdminTab.CREATE
    tool_draft: Tool = field(default_factory=default_tool_draft)
    news_draft: NewsArticle = field(default_factory=default_news_draft)
    tool_image_mode: ImageMode = ImageMode.URL
    news_image_mode: ImageMode = ImageMode.URL
    editing_id: Optional[str] = None
    tool_queue: list[Tool] = field(default_factory=list)
    news_queue: list[NewsArticle] = field(default_factory=list)
    rss: RssState = field(default_factory=RssState)
    custom_news_categories: list[str] = field(default_factory=list)
    delete_target: Optional[DeleteTarget] = None
    last_success: Optional[SuccessNotice] = None

    # ── Tabs ──────────────────────────────────────────────────────────────────

    def switch_tab(self, tab: AdminTab) -> None:
        self.active_tab = AdminTab(tab)
        if self.active_tab in (AdminTab.CREATE, AdminTab.NEWS):
            self.editing_id = None
            self.last_success = None

    @property
    def news_categories(self) -> list[str]:
        return NEWS_CATEGORIES + [c for c in self.custom_news_categories if c not in NEWS_CATEGORIES]

    def add_news_category(self, name: str) -> bool:
        """Register a custom category and select it on the news draft."""
        name = (name or "").strip()
        if not name or name in self.news_categories:
            return False
        self.custom_news_categories.append(name)
        self.news_draft = self.news_draft.with_changes(category=name)
        return True

    # ── Drafts ────────────────────────────────────────────────────────────────

    def draft_for(self, entity: EntityType) -> Entity:
        return self.tool_draft if entity == EntityType.TOOL else self.news_draft

    def replace_draft(self, entity: EntityType, draft: Entity) -> None:
        if entity == EntityType.TOOL:
            self.tool_draft = draft
        else:
            self.news_draft = draft

    def update_draft(self, entity: EntityType, **changes) -> Entity:
        draft = self.draft_for(entity).with_changes(**changes)
        self.replace_draft(entity, draft)
        return draft

    def set_image_mode(self, entity: EntityType, mode: ImageMode) -> None:
        """Switch how the image is supplied; the current image URL is kept."""
        if entity == EntityType.TOOL:
            self.tool_image_mode = ImageMode(mode)
        else:
            self.news_image_mode = ImageMode(mode)

    def add_tool_tag(self, tag: str) -> list[str]:
        tag = (tag or "").strip()
        if tag and tag not in self.tool_draft.tags:
            self.tool_draft = self.tool_draft.with_changes(tags=[*self.tool_draft.tags, tag])
        return self.tool_draft.tags

    def reset_tool_form(self) -> None:
        self.tool_draft = default_tool_draft()
        self.editing_id = None

    def reset_news_form(self) -> None:
        self.news_draft = default_news_draft()
        self.news_image_mode = ImageMode.URL
        self.editing_id = None

    def load_tool(self, tool: Tool) -> None:
        self.tool_draft = tool
        self.editing_id = tool.id or None
        self.active_tab = AdminTab.CREATE
        self.last_success = None

    def load_news(self, article: NewsArticle) -> None:
        self.news_draft = article
        self.editing_id = article.id or None
        self.active_tab = AdminTab.NEWS
        self.last_success = None

    # ── Review queues ─────────────────────────────────────────────────────────

    def queue_for(self, entity: EntityType) -> list:
        return self.tool_queue if entity == EntityType.TOOL else self.news_queue

    def enqueue(self, entity: EntityType, items: list[Entity]) -> list:
        """Prepend generated candidates, giving each a queue id if it has none."""
        prepared = [item if item.id else item.with_changes(id=f"queue-{uuid4().hex[:12]}") for item in items]
        queue = prepared + self.queue_for(entity)
        if entity == EntityType.TOOL:
            self.tool_queue = queue
        else:
            self.news_queue = queue
        return queue

    def find_queued(self, entity: EntityType, item_id: str) -> Entity:
        for item in self.queue_for(entity):
            if item.id == item_id:
                return item
        raise QueueItemNotFoundError(f"No queued {entity.value} with id {item_id}")

    def remove_queued(self, entity: EntityType, item_id: str) -> Entity:
        item = self.find_queued(entity, item_id)
        remaining = [queued for queued in self.queue_for(entity) if queued.id != item_id]
        if entity == EntityType.TOOL:
            self.tool_queue = remaining
        else:
            self.news_queue = remaining
        return item

    def drain_queue(self, entity: EntityType) -> list:
        items = list(self.queue_for(entity))
        if entity == EntityType.TOOL:
            self.tool_queue = []
        else:
            self.news_queue = []
        return items

    # ── RSS ───────────────────────────────────────────────────────────────────

    def find_rss_item(self, item_id: str):
        for item in self.rss.items:
            if item.id == item_id:
                return item
        raise QueueItemNotFoundError(f"No RSS item with id {item_id}")


class WorkspaceRegistry:
    """Workspaces keyed by admin profile id."""

    def __init__(self) -> None:
        self._workspaces: dict[str, AdminWorkspace] = {}

    def get(self, admin_id: str) -> AdminWorkspace:
        workspace = self._workspaces.get(admin_id)
        if workspace is None:
            workspace = AdminWorkspace(admin_id=admin_id)
            self._workspaces[admin_id] = workspace
            logger.debug("Created admin workspace for %s", admin_id)
        return workspace

    def discard(self, admin_id: str) -> None:
        self._workspaces.pop(admin_id, None)

    def __len__(self) -> int:
        return len(self._workspaces)

    def __contains__(self, admin_id: str) -> bool:
        return admin_id in self._workspaces
