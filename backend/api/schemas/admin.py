"""
Admin dashboard request/response schemas.
"""

from typing import Any, Optional

from pydantic import Field

from api.schemas.catalog import CamelModel, NewsResponse, ToolResponse
from core.domain.catalog import Tool
from services.admin_workspace import AdminTab, AdminWorkspace, EntityType, ImageMode


class TabRequest(CamelModel):
    tab: AdminTab


class ImageModeRequest(CamelModel):
    mode: ImageMode


class TagRequest(CamelModel):
    tag: str = Field(..., min_length=1, max_length=100)


class ToolDetailsRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)


class NewsTopicRequest(CamelModel):
    topic: str = Field(..., min_length=1, max_length=500)


class CandidatesRequest(CamelModel):
    count: int = Field(default=3, ge=1, le=10)


class CategoryRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=50)


class RssFetchRequest(CamelModel):
    url: Optional[str] = None
    count: Optional[int] = None


class DeleteRequest(CamelModel):
    type: EntityType
    id: str = Field(..., min_length=1)


def entity_payload(item: Any) -> dict:
    """Public (camelCase) shape of a tool or article."""
    if isinstance(item, Tool):
        return ToolResponse.from_domain(item).model_dump(by_alias=True, mode="json")
    return NewsResponse.from_domain(item).model_dump(by_alias=True, mode="json")


class RssItemResponse(CamelModel):
    id: str
    title: str
    description: str


class RssStateResponse(CamelModel):
    url: str
    count: int
    items: list[RssItemResponse]
    error: str = ""
    processing_id: Optional[str] = None


class DeleteTargetResponse(CamelModel):
    id: str
    name: str
    type: EntityType


class SuccessResponse(CamelModel):
    type: EntityType
    item: dict


class WorkspaceResponse(CamelModel):
    """Full dashboard state for the signed-in admin."""

    active_tab: AdminTab
    tool_draft: dict
    news_draft: dict
    tool_image_mode: ImageMode
    news_image_mode: ImageMode
    editing_id: Optional[str] = None
    tool_queue: list[dict]
    news_queue: list[dict]
    rss: RssStateResponse
    news_categories: list[str]
    delete_target: Optional[DeleteTargetResponse] = None
    last_success: Optional[SuccessResponse] = None

    @classmethod
    def from_workspace(cls, ws: AdminWorkspace) -> "WorkspaceResponse":
        return cls(
            active_tab=ws.active_tab,
            tool_draft=entity_payload(ws.tool_draft),
            news_draft=entity_payload(ws.news_draft),
            tool_image_mode=ws.tool_image_mode,
            news_image_mode=ws.news_image_mode,
            editing_id=ws.editing_id,
            tool_queue=[entity_payload(t) for t in ws.tool_queue],
            news_queue=[entity_payload(n) for n in ws.news_queue],
            rss=RssStateResponse(
                url=ws.rss.url,
                count=ws.rss.count,
                items=[RssItemResponse(**item.to_dict()) for item in ws.rss.items],
                error=ws.rss.error,
                processing_id=ws.rss.processing_id,
            ),
            news_categories=ws.news_categories,
            delete_target=(
                DeleteTargetResponse(id=ws.delete_target.id, name=ws.delete_target.name, type=ws.delete_target.type)
                if ws.delete_target
                else None
            ),
            last_success=(
                SuccessResponse(type=ws.last_success.type, item=entity_payload(ws.last_success.item))
                if ws.last_success
                else None
            ),
        )


class PreviewResponse(CamelModel):
    type: EntityType
    item: dict


class ManageToolsResponse(CamelModel):
    items: list[ToolResponse]
    categories: list[str]


class ManageNewsResponse(CamelModel):
    items: list[NewsResponse]
    categories: list[str]


class AnalyticsResponse(CamelModel):
    total_tools: int
    total_news: int
    category_count: int
    tool_categories: dict[str, int]
    news_categories: dict[str, int]


class TrendReportResponse(CamelModel):
    report: str


class SchemaResponse(CamelModel):
    sql: str


class PublishedResponse(CamelModel):
    published: int
    items: list[dict]


class DeleteResultResponse(CamelModel):
    deleted: bool
