"""Repository interfaces for data access."""

from abc import ABC, abstractmethod

from ..domain.catalog import NewsArticle, Tool
from ..domain.user import UserProfile


class CatalogRepository(ABC):
    """Remote data client contract for tools and news.

    Implementations translate between storage rows and domain entities and
    propagate backend failures unchanged; none of them retry.
    """

    @abstractmethod
    async def list_tools(self) -> list[Tool]:
        """All tools, newest first."""
        ...

    @abstractmethod
    async def insert_tool(self, tool: Tool) -> Tool:
        """Persist a new tool; the store assigns its identity."""
        ...

    @abstractmethod
    async def update_tool(self, tool: Tool) -> Tool | None:
        """Replace the tool with the same id. None if it does not exist."""
        ...

    @abstractmethod
    async def delete_tool(self, tool_id: str) -> bool:
        ...

    @abstractmethod
    async def list_news(self) -> list[NewsArticle]:
        """All news, most recent publication date first."""
        ...

    @abstractmethod
    async def insert_news(self, article: NewsArticle) -> NewsArticle:
        ...

    @abstractmethod
    async def update_news(self, article: NewsArticle) -> NewsArticle | None:
        ...

    @abstractmethod
    async def delete_news(self, news_id: str) -> bool:
        ...


class ProfileRepository(ABC):
    """Abstract repository for user profiles."""

    @abstractmethod
    async def create(self, email: str, password_hash: str, role: str) -> UserProfile:
        """Provision a profile for a new sign-up (plan free, no usage)."""
        ...

    @abstractmethod
    async def get_by_id(self, profile_id: str) -> UserProfile | None:
        ...

    @abstractmethod
    async def get_credentials(self, email: str) -> tuple[UserProfile, str] | None:
        """Profile and password hash for a login attempt."""
        ...

    @abstractmethod
    async def set_plan(self, profile_id: str, plan: str) -> UserProfile | None:
        """Grant a lifetime plan (clears any subscription end date)."""
        ...

    @abstractmethod
    async def increment_generations(self, profile_id: str) -> int:
        """Atomically bump the usage counter and return the new value."""
        ...


class DirectoryStore(ABC):
    """Data access used by the application, selected once at startup.

    ``RemoteDirectoryStore`` goes through the query cache to the database;
    ``LocalDirectoryStore`` keeps records in process memory.
    """

    mode: str

    @property
    def is_remote(self) -> bool:
        return self.mode == "remote"

    @abstractmethod
    async def list_tools(self) -> list[Tool]:
        ...

    @abstractmethod
    async def add_tool(self, tool: Tool) -> Tool:
        ...

    @abstractmethod
    async def update_tool(self, tool: Tool) -> Tool | None:
        ...

    @abstractmethod
    async def delete_tool(self, tool_id: str) -> bool:
        ...

    @abstractmethod
    async def list_news(self) -> list[NewsArticle]:
        ...

    @abstractmethod
    async def add_news(self, article: NewsArticle) -> NewsArticle:
        ...

    @abstractmethod
    async def update_news(self, article: NewsArticle) -> NewsArticle | None:
        ...

    @abstractmethod
    async def delete_news(self, news_id: str) -> bool:
        ...

    async def get_tool(self, tool_id: str) -> Tool | None:
        for tool in await self.list_tools():
            if tool.id == tool_id:
                return tool
        return None

    async def get_news(self, news_id: str) -> NewsArticle | None:
        for article in await self.list_news():
            if article.id == news_id:
                return article
        return None


class DirectoryStoreError(Exception):
    """A remote data call failed; the message is safe to show to an admin."""
