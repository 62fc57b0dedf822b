"""
Pytest configuration and shared fixtures for backend tests.
"""

import sys
from pathlib import Path

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

import pytest
from typing import AsyncGenerator

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

# Import after path is set
from adapters.ai.anthropic_adapter import AnthropicContentService
from adapters.ai.replicate_adapter import ReplicateImageService
from api.dependencies import token_service
from core.domain.user import UserProfile, UserRole
from core.security import password_hasher
from infrastructure.database.connection import build_session_maker
from infrastructure.database.models import Base
from infrastructure.database.repositories import SqlCatalogRepository, SqlProfileRepository
from services.admin_dashboard import AdminDashboard
from services.app_shell import AppShell
from services.directory_store import (
    InMemoryProfileRepository,
    LocalDirectoryStore,
    RemoteDirectoryStore,
)
from services.learning_content import LearningContentService
from services.query_cache import QueryCache

TEST_PASSWORD = "testpassword123"

# Database URL for testing (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def db_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_maker(db_engine):
    return build_session_maker(db_engine)


@pytest.fixture
def content_service() -> AnthropicContentService:
    """Content service in mock mode (no API key)."""
    return AnthropicContentService(api_key="")


@pytest.fixture
def image_service() -> ReplicateImageService:
    """Image service in mock mode (no API token)."""
    return ReplicateImageService(api_token="")


@pytest.fixture
async def shell(session_maker, content_service, image_service) -> AsyncGenerator[AppShell, None]:
    """Remote-mode shell backed by the SQLite test database."""
    store = RemoteDirectoryStore(SqlCatalogRepository(session_maker), QueryCache())
    app_shell = AppShell(store, SqlProfileRepository(session_maker), content_service, image_service)
    await app_shell.start()
    yield app_shell
    await app_shell.stop()


@pytest.fixture
async def local_shell(content_service, image_service) -> AsyncGenerator[AppShell, None]:
    """Local fallback shell; start() seeds generated tools."""
    app_shell = AppShell(LocalDirectoryStore(), InMemoryProfileRepository(), content_service, image_service)
    await app_shell.start()
    yield app_shell
    await app_shell.stop()


@pytest.fixture
def dashboard(shell: AppShell) -> AdminDashboard:
    return AdminDashboard(shell)


async def _signed_in(app_shell: AppShell, email: str, role: str) -> tuple[UserProfile, dict]:
    profile = await app_shell.profiles.create(
        email=email,
        password_hash=password_hasher.hash(TEST_PASSWORD),
        role=role,
    )
    session_id = await app_shell.sign_in(profile)
    token = token_service.create_access_token(
        user_id=profile.id,
        session_id=session_id,
        role=profile.role,
    )
    return profile, {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def test_user(shell: AppShell) -> tuple[UserProfile, dict]:
    """A signed-in free user and their auth headers."""
    return await _signed_in(shell, "test@example.com", UserRole.USER.value)


@pytest.fixture
async def admin_user(shell: AppShell) -> tuple[UserProfile, dict]:
    """A signed-in admin and their auth headers."""
    return await _signed_in(shell, "admin@example.com", UserRole.ADMIN.value)


@pytest.fixture
def auth_headers(test_user) -> dict:
    return test_user[1]


@pytest.fixture
def admin_headers(admin_user) -> dict:
    return admin_user[1]


@pytest.fixture
async def premium_headers(shell: AppShell, test_user) -> dict:
    """Auth headers for a user who bought the Pro plan."""
    profile, headers = test_user
    await shell.upgrade_plan(profile.id, "pro")
    return headers


@pytest.fixture
async def async_client(shell: AppShell, dashboard: AdminDashboard) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing."""
    # Import app here to avoid circular imports
    from main import app

    # ASGITransport does not run the lifespan, so wire state directly
    app.state.shell = shell
    app.state.dashboard = dashboard
    app.state.learning = LearningContentService(shell)

    # Reset rate limiter state between tests to prevent cross-test 429s
    if hasattr(app.state, "limiter"):
        app.state.limiter.reset()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
