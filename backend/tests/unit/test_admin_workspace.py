"""Unit tests for per-admin dashboard state."""

import pytest

from core.domain.catalog import NEWS_CATEGORIES, NewsArticle, Tool
from services.admin_workspace import (
    AdminTab,
    AdminWorkspace,
    EntityType,
    ImageMode,
    QueueItemNotFoundError,
    SuccessNotice,
    WorkspaceRegistry,
)


@pytest.fixture
def ws():
    return AdminWorkspace(admin_id="admin-1")


def test_defaults(ws):
    assert ws.active_tab == AdminTab.CREATE
    assert ws.tool_draft.category == "Writing"
    assert ws.tool_draft.price == "Freemium"
    assert ws.tool_draft.website == "https://"
    assert ws.tool_draft.page == "free-tools"
    assert ws.news_draft.category == NEWS_CATEGORIES[0]
    assert ws.rss.count == 5


def test_image_mode_switch_keeps_image_url(ws):
    ws.update_draft(EntityType.TOOL, image_url="https://img.example.com/a.png")
    ws.set_image_mode(EntityType.TOOL, ImageMode.UPLOAD)
    ws.set_image_mode(EntityType.TOOL, ImageMode.GENERATE)

    assert ws.tool_image_mode == ImageMode.GENERATE
    assert ws.tool_draft.image_url == "https://img.example.com/a.png"


def test_switching_to_create_tab_leaves_edit_mode(ws):
    ws.load_tool(Tool(id="t1", name="Existing"))
    ws.last_success = SuccessNotice(EntityType.TOOL, Tool(id="t0"))
    assert ws.editing_id == "t1"

    ws.switch_tab(AdminTab.NEWS)
    assert ws.editing_id is None
    assert ws.last_success is None


def test_switching_to_other_tabs_keeps_edit_mode(ws):
    ws.load_tool(Tool(id="t1", name="Existing"))
    ws.switch_tab(AdminTab.ANALYZE)
    assert ws.editing_id == "t1"


def test_custom_news_category_is_selected(ws):
    assert ws.add_news_category("  Robotics ")
    assert "Robotics" in ws.news_categories
    assert ws.news_draft.category == "Robotics"
    assert not ws.add_news_category("Robotics")
    assert not ws.add_news_category("Technology")


def test_add_tool_tag_skips_duplicates_and_blanks(ws):
    ws.add_tool_tag("writing")
    ws.add_tool_tag("writing")
    ws.add_tool_tag("   ")
    assert ws.tool_draft.tags == ["writing"]


def test_enqueue_prepends_and_assigns_ids(ws):
    ws.enqueue(EntityType.TOOL, [Tool(name="First")])
    ws.enqueue(EntityType.TOOL, [Tool(id="gen-2", name="Second")])

    assert [t.name for t in ws.tool_queue] == ["Second", "First"]
    assert ws.tool_queue[1].id.startswith("queue-")


def test_remove_queued(ws):
    ws.enqueue(EntityType.NEWS, [NewsArticle(id="n1", title="A"), NewsArticle(id="n2", title="B")])
    removed = ws.remove_queued(EntityType.NEWS, "n1")

    assert removed.title == "A"
    assert [n.id for n in ws.news_queue] == ["n2"]
    with pytest.raises(QueueItemNotFoundError):
        ws.remove_queued(EntityType.NEWS, "n1")


def test_drain_queue_empties_it(ws):
    ws.enqueue(EntityType.TOOL, [Tool(id="a"), Tool(id="b")])
    assert [t.id for t in ws.drain_queue(EntityType.TOOL)] == ["a", "b"]
    assert ws.tool_queue == []


def test_reset_news_form_restores_url_mode(ws):
    ws.update_draft(EntityType.NEWS, title="Draft")
    ws.set_image_mode(EntityType.NEWS, ImageMode.GENERATE)
    ws.reset_news_form()
    assert ws.news_draft.title == ""
    assert ws.news_image_mode == ImageMode.URL


def test_registry_creates_one_workspace_per_admin():
    registry = WorkspaceRegistry()
    first = registry.get("a")
    assert registry.get("a") is first
    assert registry.get("b") is not first
    assert len(registry) == 2

    registry.discard("a")
    assert "a" not in registry
