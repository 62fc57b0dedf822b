"""
Admin dashboard operations.

Each operation acts on one admin's ``AdminWorkspace`` and, for publishing,
editing and deleting, on the application shell's directory store. Generation
results are merged into whatever the draft holds once the call returns, so
independent pipelines (image, slides, tutorial, course) do not clobber each
other's output.

Errors:
    DraftValidationError: required draft fields are missing (no call made)
    QueueItemNotFoundError: unknown queue / RSS item id
    ContentGenerationError, ImageGenerationError, FeedError: upstream failure
    DirectoryStoreError: persistence failure in remote mode
"""

import base64
import logging
from datetime import UTC, datetime
from typing import Optional

from adapters.ai.anthropic_adapter import MAX_BATCH, placeholder_image
from adapters.feeds.rss_adapter import RssFeedReader, RssItem
from core.domain.catalog import TOOL_CATEGORIES, NewsArticle, Tool
from infrastructure.database.schema import render_schema_sql
from services.admin_workspace import (
    AdminTab,
    AdminWorkspace,
    DeleteTarget,
    DraftValidationError,
    Entity,
    EntityType,
    QueueItemNotFoundError,
    SuccessNotice,
)
from services.app_shell import AppShell

logger = logging.getLogger(__name__)

IMAGE_ASPECT_RATIO = "16:9"
IMAGE_RESOLUTION = "1K"
ALL_CATEGORIES = "All"
RSS_SOURCE = "RSS Feed"
RSS_NEWS_CATEGORY = "Tech News"


def image_prompt(title: str, description: str) -> str:
    return f'Editorial illustration for "{title}". {description or ""}. High quality, modern style.'


def to_data_url(content: bytes, content_type: str) -> str:
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{content_type or 'application/octet-stream'};base64,{encoded}"


def _clean_tags(tags: list[str]) -> list[str]:
    seen: list[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


def _clamp_candidates(count: int) -> int:
    return max(1, min(MAX_BATCH, int(count)))


def _news_sort_key(article: NewsArticle) -> float:
    return article.date.timestamp() if article.date else 0.0


class AdminDashboard:
    """Dashboard operations over a shell and a feed reader."""

    def __init__(self, shell: AppShell, feed_reader: Optional[RssFeedReader] = None) -> None:
        self.shell = shell
        self.feed_reader = feed_reader or RssFeedReader()

    def workspace(self, admin_id: str) -> AdminWorkspace:
        return self.shell.workspaces.get(admin_id)

    # --- Images ---

    def upload_image(self, ws: AdminWorkspace, entity: EntityType, content: bytes, content_type: str) -> str:
        if not content:
            raise DraftValidationError("Uploaded file is empty")
        data_url = to_data_url(content, content_type)
        ws.update_draft(entity, image_url=data_url)
        return data_url

    async def generate_image(self, ws: AdminWorkspace, entity: EntityType) -> str:
        draft = ws.draft_for(entity)
        if entity == EntityType.TOOL:
            title, description = draft.name, draft.description
            if not title:
                raise DraftValidationError("Please enter a tool name first.")
        else:
            title, description = draft.title, draft.description
            if not title:
                raise DraftValidationError("Please enter a title first.")

        result = await self.shell.images.generate_image(
            image_prompt(title, description), IMAGE_ASPECT_RATIO, IMAGE_RESOLUTION
        )
        ws.update_draft(entity, image_url=result.url)
        return result.url

    # --- Tool form ---

    async def generate_tool_details(self, ws: AdminWorkspace, name: str) -> Tool:
        name = (name or "").strip()
        if not name:
            raise DraftValidationError("Enter a tool name to generate details")
        generated = await self.shell.content.generate_tool_details(name)
        changes = {k: v for k, v in generated.to_record().items() if k != "id" and v not in (None, "", [])}
        return ws.update_draft(EntityType.TOOL, **changes)

    async def generate_draft_slides(self, ws: AdminWorkspace) -> Tool:
        draft = ws.tool_draft
        if not draft.name or not draft.description:
            raise DraftValidationError("Please enter a name and description first.")
        slides = await self.shell.content.generate_tool_slides(draft)
        return ws.update_draft(EntityType.TOOL, slides=slides)

    async def generate_draft_tutorial(self, ws: AdminWorkspace) -> Tool:
        draft = ws.tool_draft
        if not draft.name or not draft.description:
            raise DraftValidationError("Please enter a name and description first.")
        tutorial = await self.shell.content.generate_tool_tutorial(draft)
        return ws.update_draft(EntityType.TOOL, tutorial=tutorial)

    async def generate_draft_course(self, ws: AdminWorkspace) -> Tool:
        if not ws.tool_draft.name:
            raise DraftValidationError("Please enter a tool name first.")
        course = await self.shell.content.generate_full_course(ws.tool_draft)
        return ws.update_draft(EntityType.TOOL, course=course)

    async def submit_tool(self, ws: AdminWorkspace) -> Tool:
        """Add the draft, or update the record being edited, then reset the form."""
        draft = ws.tool_draft
        if not draft.name or not draft.description:
            raise DraftValidationError("Name and description are required")

        tool = draft.with_changes(
            id=ws.editing_id or draft.id,
            category=draft.category or "Uncategorized",
            price=draft.price or "Free",
            tags=_clean_tags(draft.tags),
            website=draft.website or "#",
            image_url=draft.image_url or placeholder_image(draft.name),
            how_to_use=draft.how_to_use or "",
            page=draft.page or "free-tools",
        )
        if ws.editing_id:
            saved = await self.shell.update_tool(tool)
            if saved is None:
                raise QueueItemNotFoundError(f"Tool {ws.editing_id} no longer exists")
        else:
            saved = await self.shell.add_tool(tool)

        ws.reset_tool_form()
        ws.last_success = SuccessNotice(EntityType.TOOL, saved)
        return saved

    # --- News form ---

    async def generate_news_details(self, ws: AdminWorkspace, topic: str) -> NewsArticle:
        topic = (topic or "").strip()
        if not topic:
            raise DraftValidationError("Enter a topic to generate an article")
        generated = await self.shell.content.generate_news_details(topic)
        changes = {k: v for k, v in generated.to_record().items() if k != "id" and v not in (None, "")}
        return ws.update_draft(EntityType.NEWS, **changes)

    async def submit_news(self, ws: AdminWorkspace) -> NewsArticle:
        draft = ws.news_draft
        if not draft.title or not draft.content:
            raise DraftValidationError("Title and content are required")

        article = draft.with_changes(
            id=ws.editing_id or draft.id,
            source=draft.source or "VETORRE Blog",
            category=draft.category or "General",
            image_url=draft.image_url or placeholder_image(draft.title, 800, 400),
            date=datetime.now(UTC),
        )
        if ws.editing_id:
            saved = await self.shell.update_news(article)
            if saved is None:
                raise QueueItemNotFoundError(f"Article {ws.editing_id} no longer exists")
        else:
            saved = await self.shell.add_news(article)

        ws.reset_news_form()
        ws.last_success = SuccessNotice(EntityType.NEWS, saved)
        return saved

    # --- Review queues ---

    async def generate_candidates(self, ws: AdminWorkspace, entity: EntityType, count: int) -> list:
        count = _clamp_candidates(count)
        if entity == EntityType.TOOL:
            generated = await self.shell.content.generate_directory_tools(count)
        else:
            generated = await self.shell.content.generate_directory_news(count)
        ws.last_success = None
        return ws.enqueue(entity, generated)

    async def _persist(self, entity: EntityType, item: Entity) -> Entity:
        if entity == EntityType.TOOL:
            return await self.shell.add_tool(item)
        return await self.shell.add_news(item)

    async def publish_queued(self, ws: AdminWorkspace, entity: EntityType, item_id: str) -> Entity:
        """Take the candidate off the queue, then save it; a failed save puts it back in front."""
        item = ws.remove_queued(entity, item_id)
        try:
            saved = await self._persist(entity, item)
        except Exception:
            ws.enqueue(entity, [item])
            raise
        ws.last_success = SuccessNotice(entity, saved)
        return saved

    def edit_queued(self, ws: AdminWorkspace, entity: EntityType, item_id: str) -> Entity:
        """Move a candidate into the form; it is published like a new record."""
        item = ws.remove_queued(entity, item_id)
        ws.replace_draft(entity, item.with_changes(id=""))
        ws.editing_id = None
        return ws.draft_for(entity)

    def discard_queued(self, ws: AdminWorkspace, entity: EntityType, item_id: str) -> None:
        ws.remove_queued(entity, item_id)

    async def publish_all(self, ws: AdminWorkspace, entity: EntityType) -> list:
        """
        Persist every queued candidate exactly once and empty the queue.

        If a save fails, the unsaved remainder goes back to the queue before
        the error propagates.
        """
        pending = ws.drain_queue(entity)
        published = []
        for index, item in enumerate(pending):
            try:
                published.append(await self._persist(entity, item))
            except Exception:
                ws.enqueue(entity, pending[index:])
                logger.warning("Publish-all stopped after %d of %d items", index, len(pending))
                raise
        logger.info("Published %d queued %s items", len(published), entity.value)
        return published

    # --- RSS import ---

    async def fetch_rss(self, ws: AdminWorkspace, url: Optional[str] = None, count: Optional[int] = None) -> list[RssItem]:
        ws.rss.url = url or ws.rss.url
        if count is not None:
            ws.rss.count = count
        ws.rss.items = []
        ws.rss.error = ""
        try:
            ws.rss.items = await self.feed_reader.fetch(ws.rss.url, ws.rss.count)
        except Exception as e:
            ws.rss.error = str(e)
            raise
        return ws.rss.items

    async def convert_rss_to_tool(self, ws: AdminWorkspace, item_id: str) -> Tool:
        item = ws.find_rss_item(item_id)
        ws.rss.processing_id = item.id
        try:
            extracted = await self.shell.content.extract_tool_from_rss(item.title, item.description)
        finally:
            ws.rss.processing_id = None
        name = extracted.name or item.title
        draft = Tool(
            name=name,
            description=extracted.description or item.description,
            category=extracted.category or "News",
            price=extracted.price or "Unknown",
            tags=extracted.tags or ["RSS"],
            website="#",
            image_url=placeholder_image(name),
            page="free-tools",
        )
        ws.load_tool(draft)
        return draft

    async def convert_rss_to_news(self, ws: AdminWorkspace, item_id: str) -> NewsArticle:
        item = ws.find_rss_item(item_id)
        ws.rss.processing_id = item.id
        try:
            extracted = await self.shell.content.extract_news_from_rss(item.title, item.description)
        finally:
            ws.rss.processing_id = None
        draft = self._rss_news(item, extracted)
        ws.load_news(draft)
        return draft

    def rss_item_to_news(self, ws: AdminWorkspace, item_id: str) -> NewsArticle:
        """Load an RSS item into the news form as-is, without AI extraction."""
        draft = self._rss_news(ws.find_rss_item(item_id), NewsArticle())
        ws.load_news(draft)
        return draft

    async def preview_rss_news(self, ws: AdminWorkspace, item_id: str) -> NewsArticle:
        item = ws.find_rss_item(item_id)
        extracted = await self.shell.content.extract_news_from_rss(item.title, item.description)
        return self._rss_news(item, extracted).with_changes(
            id=f"preview-{item.id}",
            category=extracted.category or RSS_NEWS_CATEGORY,
            date=datetime.now(UTC),
        )

    @staticmethod
    def _rss_news(item: RssItem, extracted: NewsArticle) -> NewsArticle:
        title = extracted.title or item.title
        return NewsArticle(
            title=title,
            description=extracted.description or item.description,
            content=extracted.content or item.description,
            source=RSS_SOURCE,
            category=RSS_NEWS_CATEGORY,
            image_url=extracted.image_url or placeholder_image(title, 800, 400),
        )

    # --- Manage ---

    async def manage_tools(self, category: str = ALL_CATEGORIES) -> dict:
        tools = await self.shell.list_tools()
        categories = sorted(set(TOOL_CATEGORIES) | {t.category for t in tools if t.category})
        if category != ALL_CATEGORIES:
            tools = [t for t in tools if t.category == category]
        return {"items": tools, "categories": categories}

    async def manage_news(self, ws: AdminWorkspace, category: str = ALL_CATEGORIES, sort: str = "newest") -> dict:
        news = await self.shell.list_news()
        categories = sorted(set(ws.news_categories) | {n.category for n in news if n.category})
        if category != ALL_CATEGORIES:
            news = [n for n in news if n.category == category]
        news = sorted(news, key=_news_sort_key, reverse=(sort != "oldest"))
        return {"items": news, "categories": categories}

    async def start_edit_tool(self, ws: AdminWorkspace, tool_id: str) -> Tool:
        tool = await self.shell.get_tool(tool_id)
        if tool is None:
            raise QueueItemNotFoundError(f"Tool {tool_id} not found")
        ws.load_tool(tool)
        return tool

    async def start_edit_news(self, ws: AdminWorkspace, news_id: str) -> NewsArticle:
        article = await self.shell.get_news(news_id)
        if article is None:
            raise QueueItemNotFoundError(f"Article {news_id} not found")
        ws.load_news(article)
        return article

    # --- Analytics & schema ---

    async def analytics(self) -> dict:
        tools = await self.shell.list_tools()
        news = await self.shell.list_news()
        tool_categories: dict[str, int] = {}
        for tool in tools:
            key = tool.category or "Uncategorized"
            tool_categories[key] = tool_categories.get(key, 0) + 1
        news_categories: dict[str, int] = {}
        for article in news:
            key = article.category or "General"
            news_categories[key] = news_categories.get(key, 0) + 1
        return {
            "totalTools": len(tools),
            "totalNews": len(news),
            "categoryCount": len(tool_categories),
            "toolCategories": tool_categories,
            "newsCategories": news_categories,
        }

    async def trend_report(self) -> str:
        tools = await self.shell.list_tools()
        return await self.shell.content.analyze_tool_trends(tools)

    @staticmethod
    def schema_sql() -> str:
        return render_schema_sql()

    # --- Preview ---

    def preview(
        self,
        ws: AdminWorkspace,
        entity: EntityType,
        queue_item_id: Optional[str] = None,
        last_success: bool = False,
    ) -> Entity:
        """Draft (or queued item, or last published record) in public shape."""
        if last_success:
            if ws.last_success is None:
                raise QueueItemNotFoundError("Nothing has been published yet")
            return ws.last_success.item
        if queue_item_id:
            return ws.find_queued(entity, queue_item_id)

        draft = ws.draft_for(entity)
        if entity == EntityType.TOOL:
            return draft.with_changes(
                id="preview",
                image_url=draft.image_url or placeholder_image(draft.name or "preview"),
            )
        return draft.with_changes(
            id="preview",
            image_url=draft.image_url or placeholder_image(draft.title or "preview", 800, 400),
            date=datetime.now(UTC),
        )

    # --- Delete confirmation ---

    async def request_delete(self, ws: AdminWorkspace, entity: EntityType, item_id: str) -> DeleteTarget:
        if entity == EntityType.TOOL:
            record = await self.shell.get_tool(item_id)
            name = record.name if record else ""
        else:
            record = await self.shell.get_news(item_id)
            name = record.title if record else ""
        if record is None:
            raise QueueItemNotFoundError(f"No {entity.value} with id {item_id}")
        ws.delete_target = DeleteTarget(id=item_id, name=name, type=entity)
        return ws.delete_target

    async def confirm_delete(self, ws: AdminWorkspace) -> bool:
        target = ws.delete_target
        if target is None:
            raise DraftValidationError("No delete is pending")
        ws.delete_target = None
        if target.type == EntityType.TOOL:
            return await self.shell.delete_tool(target.id)
        return await self.shell.delete_news(target.id)

    def cancel_delete(self, ws: AdminWorkspace) -> None:
        ws.delete_target = None

    def switch_tab(self, ws: AdminWorkspace, tab: AdminTab) -> AdminWorkspace:
        ws.switch_tab(tab)
        return ws
