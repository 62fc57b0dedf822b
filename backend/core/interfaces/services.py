"""Service interfaces for external integrations."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..domain.catalog import Course, NewsArticle, Slide, Tool, TutorialSection


@dataclass
class ImageResult:
    """Result of image generation."""

    url: str
    width: int
    height: int
    prompt: str
    aspect_ratio: str
    resolution: str


class ContentService(ABC):
    """Abstract service for generative catalog content.

    Every call is a single request/response round trip. Failures raise with a
    message suitable for showing to an admin.
    """

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """False when running with placeholder output."""
        ...

    @abstractmethod
    async def extract_tool_from_rss(self, title: str, description: str) -> Tool:
        ...

    @abstractmethod
    async def extract_news_from_rss(self, title: str, description: str) -> NewsArticle:
        ...

    @abstractmethod
    async def generate_directory_tools(self, count: int) -> list[Tool]:
        ...

    @abstractmethod
    async def generate_directory_news(self, count: int) -> list[NewsArticle]:
        ...

    @abstractmethod
    async def generate_tool_details(self, name: str) -> Tool:
        ...

    @abstractmethod
    async def generate_news_details(self, topic: str) -> NewsArticle:
        ...

    @abstractmethod
    async def generate_tool_slides(self, tool: Tool) -> list[Slide]:
        ...

    @abstractmethod
    async def generate_tool_tutorial(self, tool: Tool) -> list[TutorialSection]:
        ...

    @abstractmethod
    async def generate_full_course(self, tool: Tool) -> Course:
        ...

    @abstractmethod
    async def analyze_tool_trends(self, tools: list[Tool]) -> str:
        ...


class ImageService(ABC):
    """Abstract service for image generation."""

    @abstractmethod
    async def generate_image(
        self,
        prompt: str,
        aspect_ratio: str = "16:9",
        resolution: str = "1K",
    ) -> ImageResult:
        ...
