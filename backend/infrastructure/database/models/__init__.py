"""
SQLAlchemy database models.
"""

from .base import Base, TimestampMixin
from .catalog import News, Tool
from .profile import Profile

__all__ = [
    "Base",
    "TimestampMixin",
    "Tool",
    "News",
    "Profile",
]
