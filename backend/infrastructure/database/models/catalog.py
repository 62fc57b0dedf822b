"""
Directory catalog models: tools and news.
"""

from datetime import datetime
from typing import Any, Optional
from uuid import uuid4

from sqlalchemy import JSON, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, utcnow


class Tool(Base, TimestampMixin):
    """Cataloged AI tool."""

    __tablename__ = "tools"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="Uncategorized")
    price: Mapped[str] = mapped_column(String(255), nullable=False, default="Free")
    website: Mapped[str] = mapped_column(String(1000), nullable=False, default="#")
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # List columns
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    features: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    use_cases: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    pros: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    cons: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    how_to_use: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Generated learning content, filled lazily on first view
    slides: Mapped[Optional[list[dict[str, Any]]]] = mapped_column(JSON, nullable=True)
    tutorial: Mapped[Optional[list[dict[str, Any]]]] = mapped_column(JSON, nullable=True)
    course: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)

    page: Mapped[str] = mapped_column(String(50), nullable=False, default="free-tools", index=True)

    __table_args__ = (Index("ix_tools_category", "category"),)

    def __repr__(self) -> str:
        return f"<Tool(id={self.id}, name={self.name[:30]}, page={self.page})>"


class News(Base, TimestampMixin):
    """News article."""

    __tablename__ = "news"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    source: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="General")
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<News(id={self.id}, title={self.title[:30]})>"
