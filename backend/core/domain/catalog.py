"""Catalog domain entities: tools, news and their generated learning content."""
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class ToolCategory(str, Enum):
    """Tool categories offered by the create form."""
    WRITING = "Writing"
    IMAGE = "Image"
    VIDEO = "Video"
    AUDIO = "Audio"
    CODING = "Coding"
    BUSINESS = "Business"


class NewsCategory(str, Enum):
    """Default news categories; admins may add more."""
    TECHNOLOGY = "Technology"
    BUSINESS = "Business"
    INNOVATION = "Innovation"
    STARTUP = "Startup"
    RESEARCH = "Research"
    AI_MODEL = "AI Model"


class DisplayPage(str, Enum):
    """Public listing a tool is assigned to."""
    FREE = "free-tools"
    PAID = "paid-tools"
    TOP = "top-tools"


TOOL_CATEGORIES = [c.value for c in ToolCategory]
NEWS_CATEGORIES = [c.value for c in NewsCategory]

PRICE_LABEL_MAX_LENGTH = 15


def _pick(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present, non-null value among storage and application key spellings."""
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return default


def _str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    return [str(item) for item in value if item is not None and str(item).strip()]


def _as_hours(value: Any) -> float:
    try:
        return max(float(value), 0.0)
    except (TypeError, ValueError):
        return 0.0


def display_price(price: str) -> str:
    """Shorten a free-text price label for card display."""
    if not price:
        return "Check Site"
    if len(price) <= PRICE_LABEL_MAX_LENGTH:
        return price
    lower = price.lower()
    if "freemium" in lower:
        return "Freemium"
    if "free trial" in lower:
        return "Free Trial"
    if "free" in lower:
        return "Free"
    if "paid" in lower or "$" in lower:
        return "Paid"
    return "Check Site"


@dataclass
class Slide:
    """One slide of a generated deck."""

    title: str = ""
    bullets: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Slide":
        return cls(
            title=str(data.get("title") or ""),
            bullets=_str_list(_pick(data, "bullets", "points", "content", default=[])),
        )


@dataclass
class TutorialSection:
    """A step of a generated tutorial."""

    title: str = ""
    content: str = ""
    image_url: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TutorialSection":
        return cls(
            title=str(data.get("title") or ""),
            content=str(_pick(data, "content", "body", default="")),
            image_url=str(_pick(data, "image_url", "imageUrl", default="")),
        )


@dataclass
class Lesson:
    title: str = ""
    content: str = ""
    duration: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Lesson":
        return cls(
            title=str(data.get("title") or ""),
            content=str(_pick(data, "content", "body", default="")),
            duration=str(data.get("duration") or ""),
        )


@dataclass
class CourseModule:
    title: str = ""
    lessons: list[Lesson] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CourseModule":
        return cls(
            title=str(data.get("title") or ""),
            lessons=[Lesson.from_dict(item) for item in data.get("lessons") or []],
        )


@dataclass
class Course:
    """Multi-module course generated for a tool."""

    title: str = ""
    total_duration_hours: float = 0.0
    modules: list[CourseModule] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Course":
        return cls(
            title=str(data.get("title") or ""),
            total_duration_hours=_as_hours(
                _pick(data, "total_duration_hours", "totalDurationHours", default=0)
            ),
            modules=[CourseModule.from_dict(item) for item in data.get("modules") or []],
        )


@dataclass
class Tool:
    """Cataloged AI tool - core business object."""

    id: str = ""
    name: str = ""
    description: str = ""
    category: str = ""
    price: str = ""
    tags: list[str] = field(default_factory=list)
    website: str = ""
    image_url: str = ""
    features: list[str] = field(default_factory=list)
    use_cases: list[str] = field(default_factory=list)
    pros: list[str] = field(default_factory=list)
    cons: list[str] = field(default_factory=list)
    how_to_use: Optional[str] = None
    slides: Optional[list[Slide]] = None
    tutorial: Optional[list[TutorialSection]] = None
    course: Optional[Course] = None
    page: str = DisplayPage.FREE.value
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if isinstance(self.page, DisplayPage):
            self.page = self.page.value
        if self.slides is not None:
            self.slides = [s if isinstance(s, Slide) else Slide.from_dict(s) for s in self.slides]
        if self.tutorial is not None:
            self.tutorial = [
                s if isinstance(s, TutorialSection) else TutorialSection.from_dict(s)
                for s in self.tutorial
            ]
        if isinstance(self.course, dict):
            self.course = Course.from_dict(self.course)

    @property
    def display_price(self) -> str:
        return display_price(self.price)

    def with_changes(self, **changes: Any) -> "Tool":
        return replace(self, **changes)

    def to_record(self) -> dict[str, Any]:
        """Storage shape: snake_case keys, nested content as plain JSON."""
        record = asdict(self)
        record.pop("created_at", None)
        return record

    @classmethod
    def from_record(cls, data: dict[str, Any]) -> "Tool":
        """Build from a storage row or API payload, accepting either key convention."""
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            description=str(data.get("description") or ""),
            category=str(data.get("category") or ""),
            price=str(data.get("price") or ""),
            tags=_str_list(data.get("tags")),
            website=str(data.get("website") or ""),
            image_url=str(_pick(data, "image_url", "imageUrl", default="")),
            features=_str_list(data.get("features")),
            use_cases=_str_list(_pick(data, "use_cases", "useCases")),
            pros=_str_list(data.get("pros")),
            cons=_str_list(data.get("cons")),
            how_to_use=_pick(data, "how_to_use", "howToUse"),
            slides=data.get("slides"),
            tutorial=data.get("tutorial"),
            course=data.get("course"),
            page=str(data.get("page") or DisplayPage.FREE.value),
            created_at=_pick(data, "created_at", "createdAt"),
        )


@dataclass
class NewsArticle:
    """News article entity."""

    id: str = ""
    title: str = ""
    description: str = ""
    content: str = ""
    source: str = ""
    category: str = ""
    image_url: str = ""
    date: Optional[datetime] = None

    def with_changes(self, **changes: Any) -> "NewsArticle":
        return replace(self, **changes)

    def to_record(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_record(cls, data: dict[str, Any]) -> "NewsArticle":
        date = data.get("date")
        if isinstance(date, str):
            try:
                date = datetime.fromisoformat(date.replace("Z", "+00:00"))
            except ValueError:
                date = None
        return cls(
            id=str(data.get("id") or ""),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            content=str(data.get("content") or ""),
            source=str(_pick(data, "source", "author", default="")),
            category=str(data.get("category") or ""),
            image_url=str(_pick(data, "image_url", "imageUrl", default="")),
            date=date,
        )
