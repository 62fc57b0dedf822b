"""
Unit tests for the Anthropic and Replicate adapters.

API clients are mocked; mock mode is exercised without keys.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from adapters.ai.anthropic_adapter import (
    MAX_BATCH,
    AnthropicContentService,
    ContentGenerationError,
    placeholder_image,
)
from adapters.ai.replicate_adapter import ReplicateImageService, image_dimensions
from core.domain.catalog import Tool


def _message(text: str):
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])


@pytest.fixture
def live_service():
    """Service with a mocked Anthropic client."""
    service = AnthropicContentService(api_key="sk-ant-test", web_search=False)
    service._client = MagicMock()
    service._client.messages.create = AsyncMock()
    return service


# ---------------------------------------------------------------------------
# JSON extraction
# ---------------------------------------------------------------------------

class TestParseJson:

    def test_plain(self):
        assert AnthropicContentService._parse_json('{"a": 1}') == {"a": 1}

    def test_fenced(self):
        assert AnthropicContentService._parse_json('Here:\n```json\n[1, 2]\n```') == [1, 2]

    def test_surrounding_prose(self):
        assert AnthropicContentService._parse_json('Sure! {"name": "X"} Hope that helps.') == {"name": "X"}

    def test_malformed(self):
        with pytest.raises(ContentGenerationError, match="malformed"):
            AnthropicContentService._parse_json("no json here")


# ---------------------------------------------------------------------------
# Live calls (mocked client)
# ---------------------------------------------------------------------------

class TestLiveCalls:

    @pytest.mark.asyncio
    async def test_tool_details_fill_defaults(self, live_service):
        live_service._client.messages.create.return_value = _message(
            '{"name": "Pixelforge", "description": "Images", "category": "Image", "page": "weird-page"}'
        )
        tool = await live_service.generate_tool_details("Pixelforge")

        assert tool.name == "Pixelforge"
        assert tool.page == "free-tools"
        assert tool.image_url == placeholder_image("Pixelforge")

    @pytest.mark.asyncio
    async def test_batch_is_capped_and_ids_assigned(self, live_service):
        items = ",".join(f'{{"name": "Tool {i}"}}' for i in range(15))
        live_service._client.messages.create.return_value = _message(f"[{items}]")

        tools = await live_service.generate_directory_tools(50)
        assert len(tools) == MAX_BATCH
        assert all(t.id.startswith("gen-") for t in tools)

    @pytest.mark.asyncio
    async def test_empty_response(self, live_service):
        live_service._client.messages.create.return_value = _message("   ")
        with pytest.raises(ContentGenerationError, match="empty"):
            await live_service.generate_news_details("Chips")

    @pytest.mark.asyncio
    async def test_slides_accept_wrapped_list(self, live_service):
        live_service._client.messages.create.return_value = _message(
            '{"slides": [{"title": "Intro", "bullets": ["a", "b"]}]}'
        )
        slides = await live_service.generate_tool_slides(Tool(name="X", description="d"))
        assert slides[0].bullets == ["a", "b"]

    @pytest.mark.asyncio
    async def test_tutorial_sections_get_images(self, live_service):
        live_service._client.messages.create.return_value = _message('[{"title": "Step", "content": "Do"}]')
        sections = await live_service.generate_tool_tutorial(Tool(name="X"))
        assert sections[0].image_url == placeholder_image("X-step-1", 800, 450)

    @pytest.mark.asyncio
    async def test_blank_name_rejected_without_call(self, live_service):
        with pytest.raises(ContentGenerationError):
            await live_service.generate_tool_details("\n\t")
        live_service._client.messages.create.assert_not_called()


# ---------------------------------------------------------------------------
# Mock mode
# ---------------------------------------------------------------------------

class TestMockMode:

    @pytest.mark.asyncio
    async def test_unavailable_without_key(self, content_service):
        assert not content_service.is_available
        tools = await content_service.generate_directory_tools(3)
        assert len(tools) == 3
        assert len({t.id for t in tools}) == 3

    @pytest.mark.asyncio
    async def test_trend_report(self, content_service):
        report = await content_service.analyze_tool_trends([Tool(name="A", category="Video")])
        assert "**Video**: 1" in report


def test_placeholder_image_slug():
    assert placeholder_image("My Tool!") == "https://picsum.photos/seed/my-tool/400/250"


# ---------------------------------------------------------------------------
# Replicate
# ---------------------------------------------------------------------------

class TestImageDimensions:

    @pytest.mark.parametrize(
        "ratio,resolution,expected",
        [
            ("16:9", "1K", (1024, 576)),
            ("1:1", "2K", (2048, 2048)),
            ("9:16", "1K", (576, 1024)),
            ("4:3", "4K", (4096, 3072)),
        ],
    )
    def test_sizes(self, ratio, resolution, expected):
        assert image_dimensions(ratio, resolution) == expected

    def test_unsupported_ratio(self):
        with pytest.raises(ValueError, match="aspect ratio"):
            image_dimensions("21:9", "1K")

    def test_unsupported_resolution(self):
        with pytest.raises(ValueError, match="resolution"):
            image_dimensions("1:1", "8K")


class TestReplicateImageService:

    @pytest.mark.asyncio
    async def test_mock_mode(self, image_service):
        result = await image_service.generate_image("A robot", "1:1", "1K")
        assert result.url == "https://picsum.photos/1024/1024"

    @pytest.mark.asyncio
    async def test_live_call_uses_first_output(self):
        service = ReplicateImageService(api_token="r8_test")
        service._client = MagicMock()
        service._client.run.return_value = ["https://replicate.delivery/out.png"]

        result = await service.generate_image("A robot")

        assert result.url == "https://replicate.delivery/out.png"
        assert (result.width, result.height) == (1024, 576)
        _, kwargs = service._client.run.call_args
        assert kwargs["input"] == {"prompt": "A robot", "aspect_ratio": "16:9", "resolution": "1K"}

    @pytest.mark.asyncio
    async def test_empty_prompt(self, image_service):
        with pytest.raises(ValueError):
            await image_service.generate_image("   ")
