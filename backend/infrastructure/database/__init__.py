from .connection import (
    async_session_maker,
    build_engine,
    build_session_maker,
    close_db,
    engine,
    get_db_context,
    init_db,
)
from .models import Base

__all__ = [
    "Base",
    "engine",
    "async_session_maker",
    "build_engine",
    "build_session_maker",
    "get_db_context",
    "init_db",
    "close_db",
]
