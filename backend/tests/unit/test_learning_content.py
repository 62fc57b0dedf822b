"""Unit tests for lazily generated learning content."""

import asyncio

import pytest

from adapters.ai.anthropic_adapter import ContentGenerationError
from core.domain.catalog import Slide, Tool
from services.learning_content import ContentKind, LearningContentService, ToolNotFoundError

pytestmark = pytest.mark.asyncio


@pytest.fixture
async def profile(shell):
    return await shell.profiles.create(email="buyer@example.com", password_hash="x", role="user")


@pytest.fixture
async def tool(shell):
    return await shell.add_tool(Tool(name="Draftwise", description="Writes drafts", features=["Rewrite"]))


async def test_generates_and_persists_slides(shell, tool, profile):
    service = LearningContentService(shell)

    updated, generated = await service.get_or_generate(tool.id, ContentKind.SLIDES, profile)

    assert generated is True
    assert updated.slides
    stored = await shell.get_tool(tool.id)
    assert [s.title for s in stored.slides] == [s.title for s in updated.slides]
    assert (await shell.profiles.get_by_id(profile.id)).generations_count == 1


async def test_stored_content_is_not_regenerated(shell, tool, profile, monkeypatch):
    service = LearningContentService(shell)
    await service.get_or_generate(tool.id, ContentKind.TUTORIAL, profile)

    async def forbidden(t):
        raise AssertionError("should use stored tutorial")

    monkeypatch.setattr(shell.content, "generate_tool_tutorial", forbidden)
    _, generated = await service.get_or_generate(tool.id, ContentKind.TUTORIAL, profile)
    assert generated is False


async def test_concurrent_first_views_generate_once(shell, tool, profile, monkeypatch):
    service = LearningContentService(shell)
    calls = 0

    async def slow_slides(t):
        nonlocal calls
        calls += 1
        await asyncio.sleep(0.01)
        return [Slide(title="Intro", bullets=["a"])]

    monkeypatch.setattr(shell.content, "generate_tool_slides", slow_slides)
    results = await asyncio.gather(
        service.get_or_generate(tool.id, ContentKind.SLIDES, profile),
        service.get_or_generate(tool.id, ContentKind.SLIDES, profile),
    )

    assert calls == 1
    assert sorted(generated for _, generated in results) == [False, True]
    assert service.pending_locks == 0


async def test_generation_locks_are_released_per_tool(shell, tool, profile):
    service = LearningContentService(shell)
    await service.get_or_generate(tool.id, ContentKind.SLIDES, profile)
    await service.get_or_generate(tool.id, ContentKind.COURSE, profile)

    assert service.pending_locks == 0


async def test_course(shell, tool, profile):
    updated, _ = await LearningContentService(shell).get_or_generate(tool.id, ContentKind.COURSE, profile)
    assert updated.course.title == "Mastering Draftwise"
    assert len(updated.course.modules) == 3


async def test_empty_generation_is_an_error(shell, tool, profile, monkeypatch):
    async def nothing(t):
        return []

    monkeypatch.setattr(shell.content, "generate_tool_slides", nothing)
    with pytest.raises(ContentGenerationError, match="No slides"):
        await LearningContentService(shell).get_or_generate(tool.id, ContentKind.SLIDES, profile)
    assert (await shell.get_tool(tool.id)).slides is None


async def test_unknown_tool(shell, profile):
    with pytest.raises(ToolNotFoundError):
        await LearningContentService(shell).get_or_generate("missing", ContentKind.SLIDES, profile)
