"""
Tool and news request/response schemas.

Payloads use the application's camelCase field names (``imageUrl``,
``useCases``, ``howToUse``); snake_case names are accepted on input too.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from core.domain.catalog import DisplayPage, NewsArticle, Tool


class CamelModel(BaseModel):
    """Base schema serialized with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SlideSchema(CamelModel):
    title: str = ""
    bullets: list[str] = Field(default_factory=list)


class TutorialSectionSchema(CamelModel):
    title: str = ""
    content: str = ""
    image_url: str = ""


class LessonSchema(CamelModel):
    title: str = ""
    content: str = ""
    duration: str = ""


class CourseModuleSchema(CamelModel):
    title: str = ""
    lessons: list[LessonSchema] = Field(default_factory=list)


class CourseSchema(CamelModel):
    title: str = ""
    total_duration_hours: float = 0.0
    modules: list[CourseModuleSchema] = Field(default_factory=list)


class ToolFields(CamelModel):
    """Fields shared by tool payloads."""

    name: str = ""
    description: str = ""
    category: str = ""
    price: str = ""
    tags: list[str] = Field(default_factory=list)
    website: str = ""
    image_url: str = ""
    features: list[str] = Field(default_factory=list)
    use_cases: list[str] = Field(default_factory=list)
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)
    how_to_use: Optional[str] = None
    slides: Optional[list[SlideSchema]] = None
    tutorial: Optional[list[TutorialSectionSchema]] = None
    course: Optional[CourseSchema] = None
    page: DisplayPage = DisplayPage.FREE

    def to_domain(self, tool_id: str = "") -> Tool:
        return Tool.from_record({**self.model_dump(), "id": tool_id, "page": self.page.value})


class ToolCreate(ToolFields):
    """Create or replace a tool."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)


class ToolResponse(ToolFields):
    """Tool as shown publicly, with the shortened price label."""

    id: str
    display_price: str = ""
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, tool: Tool) -> "ToolResponse":
        return cls.model_validate(tool)


class ToolDraftPatch(CamelModel):
    """Partial update of the admin tool form; unset fields are left alone."""

    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[str] = None
    tags: Optional[list[str]] = None
    website: Optional[str] = None
    image_url: Optional[str] = None
    features: Optional[list[str]] = None
    use_cases: Optional[list[str]] = None
    pros: Optional[list[str]] = None
    cons: Optional[list[str]] = None
    how_to_use: Optional[str] = None
    slides: Optional[list[SlideSchema]] = None
    tutorial: Optional[list[TutorialSectionSchema]] = None
    course: Optional[CourseSchema] = None
    page: Optional[DisplayPage] = None

    def changes(self) -> dict:
        data = self.model_dump(exclude_unset=True)
        if self.page is not None:
            data["page"] = self.page.value
        return data


class NewsFields(CamelModel):
    title: str = ""
    description: str = ""
    content: str = ""
    source: str = ""
    category: str = ""
    image_url: str = ""
    date: Optional[datetime] = None

    def to_domain(self, news_id: str = "") -> NewsArticle:
        return NewsArticle(id=news_id, **self.model_dump())


class NewsCreate(NewsFields):
    title: str = Field(..., min_length=1, max_length=500)
    content: str = Field(..., min_length=1)


class NewsResponse(NewsFields):
    id: str

    @classmethod
    def from_domain(cls, article: NewsArticle) -> "NewsResponse":
        return cls.model_validate(article)


class NewsDraftPatch(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None
    source: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    date: Optional[datetime] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class ToolListResponse(CamelModel):
    items: list[ToolResponse]
    total: int


class NewsListResponse(CamelModel):
    items: list[NewsResponse]
    total: int
