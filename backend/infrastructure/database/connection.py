"""Database connection and session management.

The engine only exists when DATABASE_URL is set; without it the application
runs against in-memory stores and nothing in this module touches the network.
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..config import get_settings
from .models import Base

settings = get_settings()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine, applying pool options only where the driver supports them."""
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=echo)

    connect_args = {"ssl": "require"} if settings.environment == "production" else {}
    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=10,
        pool_recycle=3600,
        connect_args=connect_args,
    )


def build_session_maker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


engine: Optional[AsyncEngine] = (
    build_engine(settings.database_url, echo=settings.database_echo)
    if settings.database_url
    else None
)

async_session_maker: Optional[async_sessionmaker[AsyncSession]] = (
    build_session_maker(engine) if engine is not None else None
)


@asynccontextmanager
async def get_db_context() -> AsyncGenerator[AsyncSession, None]:
    """Context manager for database sessions."""
    if async_session_maker is None:
        raise RuntimeError("Database is not configured")
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db(bind: Optional[AsyncEngine] = None) -> None:
    """Initialize database tables."""
    target = bind or engine
    if target is None:
        return
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections."""
    if engine is not None:
        await engine.dispose()
