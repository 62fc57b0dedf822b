"""
Anthropic Claude adapter for generative catalog content.

Every public method is a single request/response round trip. Failures raise
ContentGenerationError with a message that can be shown to an admin as-is;
nothing is retried. Without an API key the service runs in mock mode and
returns deterministic placeholder drafts so the rest of the app stays usable.
"""

import json
import logging
import re
from typing import Any, Optional
from uuid import uuid4

import anthropic

from core.domain.catalog import (
    Course,
    CourseModule,
    DisplayPage,
    Lesson,
    NewsArticle,
    Slide,
    Tool,
    TutorialSection,
)
from core.interfaces.services import ContentService
from infrastructure.config.settings import settings

logger = logging.getLogger(__name__)

MAX_BATCH = 10

TOOL_JSON_SHAPE = """{
    "name": "Tool name",
    "description": "Two or three sentence summary",
    "category": "Writing | Image | Video | Audio | Coding | Business",
    "price": "Short pricing label, e.g. Freemium or $20/mo",
    "website": "https://...",
    "tags": ["tag"],
    "features": ["feature"],
    "useCases": ["use case"],
    "pros": ["pro"],
    "cons": ["con"],
    "howToUse": "Short paragraph on getting started",
    "page": "free-tools | paid-tools | top-tools"
}"""

NEWS_JSON_SHAPE = """{
    "title": "Headline",
    "description": "One sentence summary",
    "content": "Full article body, several paragraphs",
    "source": "Publication or author",
    "category": "Technology | Business | Innovation | Startup | Research | AI Model"
}"""

SYSTEM_PROMPT = (
    "You are the editor of a curated directory of AI tools and AI industry news. "
    "Write accurate, neutral, concise copy. When asked for JSON, respond with JSON only."
)

_MOCK_TOOLS = [
    ("Draftwise", "Writing", "Freemium", "AI writing assistant for long-form drafts and rewrites."),
    ("Pixelforge", "Image", "Paid", "Text-to-image studio with style presets and upscaling."),
    ("ClipSmith", "Video", "Free Trial", "Turns scripts into short narrated video clips."),
    ("Voxly", "Audio", "Freemium", "Voice cloning and podcast clean-up in the browser."),
    ("Stackpilot", "Coding", "Free", "Code completion and refactoring inside your editor."),
    ("Ledgerly", "Business", "Paid", "Automates bookkeeping, invoices and cash-flow reports."),
]


class ContentGenerationError(Exception):
    """A generation call failed; str(error) is shown to the admin."""


def placeholder_image(seed: str, width: int = 400, height: int = 250) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", seed.lower()).strip("-") or "tool"
    return f"https://picsum.photos/seed/{slug}/{width}/{height}"


class AnthropicContentService(ContentService):
    """Generative content service using Anthropic Claude."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        web_search: Optional[bool] = None,
    ):
        api_key = api_key if api_key is not None else settings.anthropic_api_key
        if api_key:
            self._client = anthropic.AsyncAnthropic(
                api_key=api_key,
                timeout=float(settings.anthropic_timeout),
                max_retries=0,
            )
        else:
            self._client = None
        self._model = model or settings.anthropic_model
        self._max_tokens = max_tokens or settings.anthropic_max_tokens
        self._web_search = settings.anthropic_web_search if web_search is None else web_search

    @property
    def is_available(self) -> bool:
        return self._client is not None

    @staticmethod
    def _sanitize_prompt_input(text: Optional[str], max_length: int) -> str:
        """Strip control characters and limit length to prevent prompt injection."""
        if not text:
            return ""
        text = re.sub(r"[\r\n\t\x00-\x1f\x7f]", " ", text)
        text = re.sub(r" +", " ", text).strip()
        return text[:max_length]

    # --- Transport ---

    async def _complete(self, prompt: str, *, search: bool = False, max_tokens: Optional[int] = None) -> str:
        kwargs: dict[str, Any] = {
            "model": self._model,
            "max_tokens": max_tokens or self._max_tokens,
            "system": SYSTEM_PROMPT,
            "messages": [{"role": "user", "content": prompt}],
        }
        if search and self._web_search:
            kwargs["tools"] = [{"type": "web_search_20250305", "name": "web_search", "max_uses": 5}]

        try:
            message = await self._client.messages.create(**kwargs)
        except anthropic.APIError as e:
            logger.error("Anthropic request failed: %s", e)
            raise ContentGenerationError(f"AI request failed: {e}") from e

        # Web search interleaves tool blocks with text; keep the text only
        text = "".join(
            getattr(block, "text", "") for block in message.content if getattr(block, "type", "") == "text"
        )
        if not text.strip():
            raise ContentGenerationError("AI returned an empty response")
        return text

    @staticmethod
    def _parse_json(response_text: str) -> Any:
        """Extract JSON from a response, handling markdown code fences and surrounding prose."""
        if "```json" in response_text:
            response_text = response_text.split("```json")[1].split("```")[0]
        elif "```" in response_text:
            response_text = response_text.split("```")[1].split("```")[0]

        text = response_text.strip()
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            pass

        starts = [i for i in (text.find("["), text.find("{")) if i >= 0]
        if starts:
            start = min(starts)
            end = max(text.rfind("]"), text.rfind("}"))
            if end > start:
                try:
                    return json.loads(text[start : end + 1])
                except json.JSONDecodeError:
                    pass
        raise ContentGenerationError("AI returned malformed JSON")

    async def _complete_json(self, prompt: str, *, search: bool = False) -> Any:
        return self._parse_json(await self._complete(prompt, search=search))

    @staticmethod
    def _as_list(data: Any, *keys: str) -> list[Any]:
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            for key in keys:
                if isinstance(data.get(key), list):
                    return data[key]
        raise ContentGenerationError("AI response did not contain a list")

    @staticmethod
    def _tool_draft(data: Any) -> Tool:
        if not isinstance(data, dict):
            raise ContentGenerationError("AI response was not a tool object")
        tool = Tool.from_record(data)
        if tool.page not in {p.value for p in DisplayPage}:
            tool.page = DisplayPage.FREE.value
        if not tool.image_url and tool.name:
            tool.image_url = placeholder_image(tool.name)
        return tool

    @staticmethod
    def _news_draft(data: Any) -> NewsArticle:
        if not isinstance(data, dict):
            raise ContentGenerationError("AI response was not a news object")
        article = NewsArticle.from_record(data)
        if not article.image_url and article.title:
            article.image_url = placeholder_image(article.title, 800, 400)
        return article

    # --- RSS extraction ---

    async def extract_tool_from_rss(self, title: str, description: str) -> Tool:
        """Turn an RSS item about a product into a tool draft."""
        title = self._sanitize_prompt_input(title, 300)
        description = self._sanitize_prompt_input(description, 2000)
        if not self._client:
            return self._mock_tool(title or "RSS Tool", description=description, tags=["RSS"])

        prompt = f"""An RSS item describes an AI product. Extract a directory entry for it.

Title: {title}
Summary: {description}

Fill unknown fields with sensible values. Respond in JSON format:
{TOOL_JSON_SHAPE}"""
        return self._tool_draft(await self._complete_json(prompt))

    async def extract_news_from_rss(self, title: str, description: str) -> NewsArticle:
        """Rewrite an RSS item as a full news article draft."""
        title = self._sanitize_prompt_input(title, 300)
        description = self._sanitize_prompt_input(description, 2000)
        if not self._client:
            return self._mock_news(title or "RSS story", description=description)

        prompt = f"""Rewrite this RSS item as an original news article for an AI news section.

Title: {title}
Summary: {description}

Respond in JSON format:
{NEWS_JSON_SHAPE}"""
        return self._news_draft(await self._complete_json(prompt))

    # --- Batch candidates ---

    async def generate_directory_tools(self, count: int) -> list[Tool]:
        """Propose *count* trending AI tools for the review queue."""
        count = max(1, min(count, MAX_BATCH))
        if not self._client:
            return [self._mock_tool(*_MOCK_TOOLS[i % len(_MOCK_TOOLS)][:1], index=i) for i in range(count)]

        prompt = f"""Search for AI tools that are trending right now and pick {count} distinct ones
worth adding to the directory. Respond with a JSON array of {count} objects shaped like:
{TOOL_JSON_SHAPE}"""
        items = self._as_list(await self._complete_json(prompt, search=True), "tools", "items")
        tools = [self._tool_draft(item) for item in items[:count]]
        return [tool.with_changes(id=f"gen-{uuid4().hex[:12]}") for tool in tools]

    async def generate_directory_news(self, count: int) -> list[NewsArticle]:
        """Propose *count* news articles on current AI events for the review queue."""
        count = max(1, min(count, MAX_BATCH))
        if not self._client:
            return [self._mock_news(f"AI industry update #{i + 1}") for i in range(count)]

        prompt = f"""Search for the most important AI news of the past few days and write {count}
distinct articles about them. Respond with a JSON array of {count} objects shaped like:
{NEWS_JSON_SHAPE}"""
        items = self._as_list(await self._complete_json(prompt, search=True), "news", "articles", "items")
        articles = [self._news_draft(item) for item in items[:count]]
        return [article.with_changes(id=f"gen-{uuid4().hex[:12]}") for article in articles]

    # --- Single-entity details ---

    async def generate_tool_details(self, name: str) -> Tool:
        """Research a named tool and fill in every directory field."""
        name = self._sanitize_prompt_input(name, 200)
        if not name:
            raise ContentGenerationError("Tool name is required")
        if not self._client:
            return self._mock_tool(name)

        prompt = f"""Research the AI tool "{name}" and write its directory entry.
Use the real website and current pricing where known. Respond in JSON format:
{TOOL_JSON_SHAPE}"""
        tool = self._tool_draft(await self._complete_json(prompt, search=True))
        return tool.with_changes(name=tool.name or name)

    async def generate_news_details(self, topic: str) -> NewsArticle:
        """Write a complete article about *topic*."""
        topic = self._sanitize_prompt_input(topic, 300)
        if not topic:
            raise ContentGenerationError("Topic is required")
        if not self._client:
            return self._mock_news(topic)

        prompt = f"""Write a news article about: {topic}
Respond in JSON format:
{NEWS_JSON_SHAPE}"""
        article = self._news_draft(await self._complete_json(prompt, search=True))
        return article.with_changes(title=article.title or topic)

    # --- Learning content ---

    def _tool_context(self, tool: Tool) -> str:
        features = ", ".join(tool.features[:10])
        return (
            f"Tool: {self._sanitize_prompt_input(tool.name, 200)}\n"
            f"Category: {self._sanitize_prompt_input(tool.category, 100)}\n"
            f"Description: {self._sanitize_prompt_input(tool.description, 1500)}\n"
            f"Features: {self._sanitize_prompt_input(features, 1000)}"
        )

    async def generate_tool_slides(self, tool: Tool) -> list[Slide]:
        """Create a short presentation deck introducing the tool."""
        if not self._client:
            return self._mock_slides(tool)

        prompt = f"""Create a 6 slide presentation introducing this AI tool to a new user.

{self._tool_context(tool)}

Respond with a JSON array:
[{{"title": "Slide title", "bullets": ["Point one", "Point two", "Point three"]}}]"""
        items = self._as_list(await self._complete_json(prompt), "slides")
        return [Slide.from_dict(item) for item in items if isinstance(item, dict)]

    async def generate_tool_tutorial(self, tool: Tool) -> list[TutorialSection]:
        """Write a step-by-step getting-started tutorial."""
        if not self._client:
            return self._mock_tutorial(tool)

        prompt = f"""Write a step-by-step tutorial (4 to 6 steps) for getting started with this AI tool.

{self._tool_context(tool)}

Respond with a JSON array:
[{{"title": "Step title", "content": "What to do and why, one paragraph"}}]"""
        items = self._as_list(await self._complete_json(prompt), "sections", "tutorial", "steps")
        sections = [TutorialSection.from_dict(item) for item in items if isinstance(item, dict)]
        for index, section in enumerate(sections):
            if not section.image_url:
                section.image_url = placeholder_image(f"{tool.name}-step-{index + 1}", 800, 450)
        return sections

    async def generate_full_course(self, tool: Tool) -> Course:
        """Design a multi-module course for mastering the tool."""
        if not self._client:
            return self._mock_course(tool)

        prompt = f"""Design a complete online course for mastering this AI tool: 4 to 6 modules,
each with 3 to 5 lessons that build on each other.

{self._tool_context(tool)}

Respond in JSON format:
{{
    "title": "Course title",
    "totalDurationHours": 6,
    "modules": [
        {{"title": "Module title", "lessons": [{{"title": "Lesson title", "content": "Lesson body", "duration": "15 min"}}]}}
    ]
}}"""
        data = await self._complete_json(prompt)
        if not isinstance(data, dict):
            raise ContentGenerationError("AI response was not a course object")
        return Course.from_dict(data)

    # --- Analytics ---

    async def analyze_tool_trends(self, tools: list[Tool]) -> str:
        """Markdown report on category balance, pricing patterns and gaps in the catalog."""
        if not tools:
            return "No tools in the directory yet."
        if not self._client:
            return self._mock_trend_report(tools)

        catalog = "\n".join(
            f"- {self._sanitize_prompt_input(t.name, 100)} | {t.category} | "
            f"{self._sanitize_prompt_input(t.price, 60)} | {', '.join(t.tags[:5])}"
            for t in tools[:200]
        )
        prompt = f"""Here is the current AI tool directory (name | category | price | tags):

{catalog}

Write a short markdown report covering the category mix, pricing patterns, notable gaps
the directory should fill next, and three concrete recommendations."""
        return (await self._complete(prompt, max_tokens=2048)).strip()

    # --- Mock mode ---

    def _mock_tool(
        self,
        name: str,
        description: str = "",
        tags: Optional[list[str]] = None,
        index: int = 0,
    ) -> Tool:
        preset = next((m for m in _MOCK_TOOLS if m[0] == name), None)
        category, price, blurb = (preset[1], preset[2], preset[3]) if preset else ("Writing", "Freemium", "")
        return Tool(
            id=f"gen-{uuid4().hex[:12]}" if index or preset else "",
            name=name,
            description=description or blurb or f"{name} is an AI tool. Configure ANTHROPIC_API_KEY for real details.",
            category=category,
            price=price,
            tags=tags or [category, "AI"],
            website="#",
            image_url=placeholder_image(name),
            features=[f"{category} automation", "Web app", "Team sharing"],
            use_cases=[f"Speed up {category.lower()} work"],
            pros=["Easy to start"],
            cons=["Placeholder content"],
            how_to_use=f"Sign up on the {name} website and follow the onboarding guide.",
            page=DisplayPage.FREE.value if "Free" in price else DisplayPage.PAID.value,
        )

    def _mock_news(self, title: str, description: str = "") -> NewsArticle:
        return NewsArticle(
            id=f"gen-{uuid4().hex[:12]}",
            title=title,
            description=description or f"A short summary of {title}.",
            content=(
                f"{description or title}\n\n"
                "This is placeholder copy. Configure ANTHROPIC_API_KEY to generate real articles."
            ),
            source="VETORRE Blog",
            category="Technology",
            image_url=placeholder_image(title, 800, 400),
        )

    def _mock_slides(self, tool: Tool) -> list[Slide]:
        return [
            Slide(title=f"What is {tool.name}?", bullets=[tool.description or f"{tool.name} overview"]),
            Slide(title="Key features", bullets=tool.features[:5] or ["Core feature"]),
            Slide(title="Who it is for", bullets=tool.use_cases[:5] or ["Teams and creators"]),
            Slide(title="Getting started", bullets=["Create an account", "Try a first project"]),
        ]

    def _mock_tutorial(self, tool: Tool) -> list[TutorialSection]:
        steps = ["Create your account", "Set up your first project", "Review and export results"]
        return [
            TutorialSection(
                title=step,
                content=f"{step} in {tool.name}.",
                image_url=placeholder_image(f"{tool.name}-step-{i + 1}", 800, 450),
            )
            for i, step in enumerate(steps)
        ]

    def _mock_course(self, tool: Tool) -> Course:
        modules = [
            CourseModule(
                title=title,
                lessons=[
                    Lesson(title=f"{title}: lesson {n + 1}", content=f"Working with {tool.name}.", duration="15 min")
                    for n in range(3)
                ],
            )
            for title in ("Foundations", "Everyday workflows", "Advanced techniques")
        ]
        return Course(title=f"Mastering {tool.name}", total_duration_hours=2.25, modules=modules)

    def _mock_trend_report(self, tools: list[Tool]) -> str:
        counts: dict[str, int] = {}
        for tool in tools:
            counts[tool.category or "Uncategorized"] = counts.get(tool.category or "Uncategorized", 0) + 1
        lines = [f"- **{name}**: {count}" for name, count in sorted(counts.items(), key=lambda kv: -kv[1])]
        return "## Directory overview\n\n" + "\n".join(lines) + "\n\n_Placeholder report: AI is not configured._"


# Singleton instance
content_ai_service = AnthropicContentService()
