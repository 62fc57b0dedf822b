"""
Application shell: data mode, sessions and catalog mutations.

One AppShell is built at startup and stored on ``app.state.shell``. It owns
the directory store variant chosen for this process (remote or local), the
profile repository, the generative services, the auth event bus and the
session registry that maps session ids to resolved profiles.

Lifecycle::

    shell = AppShell(store, profiles, content_service, image_service)
    await shell.start()   # subscribe to auth events, seed local data
    ...
    await shell.stop()    # unsubscribe
"""

import logging
from typing import Optional

from adapters.ai.anthropic_adapter import ContentGenerationError
from core.domain.catalog import NewsArticle, Tool
from core.domain.user import Plan, UserProfile, UserRole
from core.interfaces.repositories import DirectoryStore, DirectoryStoreError, ProfileRepository
from core.interfaces.services import ContentService, ImageService
from core.security.tokens import TokenService
from services.admin_workspace import WorkspaceRegistry
from services.auth_events import AuthChange, AuthEvent, AuthEventBus, Subscription
from services.directory_store import LocalDirectoryStore, RemoteDirectoryStore

logger = logging.getLogger(__name__)

LOCAL_SEED_COUNT = 6

PLAN_RANK = {Plan.FREE.value: 0, Plan.STARTER.value: 1, Plan.PRO.value: 2}


class AppShell:
    """Process-wide application state shared by all routes."""

    def __init__(
        self,
        store: DirectoryStore,
        profiles: ProfileRepository,
        content_service: ContentService,
        image_service: ImageService,
        auth_events: Optional[AuthEventBus] = None,
    ) -> None:
        self.store = store
        self.profiles = profiles
        self.content = content_service
        self.images = image_service
        self.auth_events = auth_events or AuthEventBus()
        self.workspaces = WorkspaceRegistry()
        self.db_error = not store.is_remote
        self._sessions: dict[str, UserProfile] = {}
        self._subscription: Optional[Subscription] = None

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    @property
    def mode(self) -> str:
        return self.store.mode

    @property
    def started(self) -> bool:
        return self._subscription is not None and self._subscription.active

    async def start(self) -> None:
        """Subscribe to auth changes; in local mode synthesize an initial catalog."""
        if not self.started:
            self._subscription = self.auth_events.subscribe(self._on_auth_change)
        logger.info("App shell started in %s mode", self.mode)
        if isinstance(self.store, LocalDirectoryStore):
            await self.load_local_tools()

    async def stop(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        if isinstance(self.store, RemoteDirectoryStore):
            self.store.cache.clear()
        self._sessions.clear()
        logger.info("App shell stopped")

    async def load_local_tools(self) -> None:
        """Generate a starter catalog for local mode unless tools already exist."""
        if not isinstance(self.store, LocalDirectoryStore):
            return
        if await self.store.list_tools():
            return
        try:
            generated = await self.content.generate_directory_tools(LOCAL_SEED_COUNT)
        except ContentGenerationError as e:
            logger.error("Failed to generate local tools: %s", e)
            return
        if self.store.seed_tools(generated):
            logger.info("Seeded local store with %d generated tools", len(generated))

    def status(self) -> dict:
        return {
            "mode": self.mode,
            "dbError": self.db_error,
            "aiAvailable": self.content.is_available,
        }

    # ── Sessions ──────────────────────────────────────────────────────────────

    async def sign_in(self, profile: UserProfile) -> str:
        session_id = TokenService.new_session_id()
        await self.auth_events.publish(AuthChange(AuthEvent.SIGNED_IN, profile.id, session_id))
        return session_id

    async def sign_out(self, user_id: str, session_id: str) -> None:
        await self.auth_events.publish(AuthChange(AuthEvent.SIGNED_OUT, user_id, session_id))

    async def notify_user_updated(self, user_id: str) -> None:
        await self.auth_events.publish(AuthChange(AuthEvent.USER_UPDATED, user_id))

    def resolve_session(self, session_id: str, user_id: str) -> Optional[UserProfile]:
        profile = self._sessions.get(session_id)
        if profile is None or profile.id != user_id:
            return None
        return profile

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    async def _on_auth_change(self, change: AuthChange) -> None:
        if change.event == AuthEvent.SIGNED_OUT:
            if change.session_id:
                self._sessions.pop(change.session_id, None)
            return

        profile = await self.profiles.get_by_id(change.user_id)
        if change.event == AuthEvent.SIGNED_IN and change.session_id:
            if profile is not None:
                self._sessions[change.session_id] = profile
            return

        # USER_UPDATED refreshes every session of that user
        for session_id, current in list(self._sessions.items()):
            if current.id != change.user_id:
                continue
            if profile is None:
                del self._sessions[session_id]
            else:
                self._sessions[session_id] = profile

    @staticmethod
    def can_access_admin(profile: Optional[UserProfile]) -> bool:
        return profile is not None and profile.role == UserRole.ADMIN.value

    async def upgrade_plan(self, user_id: str, plan: str) -> Optional[UserProfile]:
        """
        Grant a purchased plan and refresh the user's sessions.

        Plans never go down: buying Starter while holding Pro keeps Pro.
        """
        profile = await self.profiles.get_by_id(user_id)
        if profile is None:
            logger.warning("Cannot upgrade unknown profile %s", user_id)
            return None
        if PLAN_RANK.get(plan, 0) <= PLAN_RANK.get(profile.plan, 0):
            return profile
        updated = await self.profiles.set_plan(user_id, plan)
        logger.info("Upgraded profile %s to %s", user_id, plan)
        await self.notify_user_updated(user_id)
        return updated

    async def record_generation(self, profile: UserProfile) -> int:
        count = await self.profiles.increment_generations(profile.id)
        profile.generations_count = count
        return count

    # ── Catalog ───────────────────────────────────────────────────────────────

    async def list_tools(self) -> list[Tool]:
        try:
            tools = await self.store.list_tools()
        except DirectoryStoreError:
            self.db_error = True
            raise
        if self.store.is_remote:
            self.db_error = False
        return tools

    async def list_news(self) -> list[NewsArticle]:
        try:
            news = await self.store.list_news()
        except DirectoryStoreError:
            self.db_error = True
            raise
        if self.store.is_remote:
            self.db_error = False
        return news

    async def get_tool(self, tool_id: str) -> Optional[Tool]:
        return await self.store.get_tool(tool_id)

    async def get_news(self, news_id: str) -> Optional[NewsArticle]:
        return await self.store.get_news(news_id)

    async def add_tool(self, tool: Tool) -> Tool:
        saved = await self.store.add_tool(tool)
        logger.info("Added tool %s (%s mode)", saved.id, self.mode)
        return saved

    async def update_tool(self, tool: Tool) -> Optional[Tool]:
        return await self.store.update_tool(tool)

    async def delete_tool(self, tool_id: str) -> bool:
        deleted = await self.store.delete_tool(tool_id)
        logger.info("Deleted tool %s: %s", tool_id, deleted)
        return deleted

    async def add_news(self, article: NewsArticle) -> NewsArticle:
        saved = await self.store.add_news(article)
        logger.info("Added news %s (%s mode)", saved.id, self.mode)
        return saved

    async def update_news(self, article: NewsArticle) -> Optional[NewsArticle]:
        return await self.store.update_news(article)

    async def delete_news(self, news_id: str) -> bool:
        deleted = await self.store.delete_news(news_id)
        logger.info("Deleted news %s: %s", news_id, deleted)
        return deleted
