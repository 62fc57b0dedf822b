"""
Admin dashboard routes: workspace state, tool/news forms, review queues,
preview and delete confirmation.

Every endpoint requires the admin role and operates on the caller's own
workspace. Most endpoints return the full workspace so the client can
re-render from a single payload.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile, status

from api.dependencies import get_admin_workspace, get_dashboard
from api.middleware.rate_limit import get_rate_limit, limiter
from api.schemas.admin import (
    CandidatesRequest,
    CategoryRequest,
    DeleteRequest,
    DeleteResultResponse,
    ImageModeRequest,
    NewsTopicRequest,
    PreviewResponse,
    PublishedResponse,
    TabRequest,
    TagRequest,
    ToolDetailsRequest,
    WorkspaceResponse,
    entity_payload,
)
from api.schemas.catalog import NewsDraftPatch, ToolDraftPatch
from api.utils import dashboard_errors
from services.admin_dashboard import AdminDashboard
from services.admin_workspace import AdminWorkspace, EntityType

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin - Dashboard"])

MAX_UPLOAD_BYTES = 5 * 1024 * 1024

Workspace = Annotated[AdminWorkspace, Depends(get_admin_workspace)]
Dashboard = Annotated[AdminDashboard, Depends(get_dashboard)]


def _state(ws: AdminWorkspace) -> WorkspaceResponse:
    return WorkspaceResponse.from_workspace(ws)


# --- Workspace ---


@router.get("/workspace", response_model=WorkspaceResponse)
async def get_workspace(ws: Workspace):
    return _state(ws)


@router.post("/workspace/tab", response_model=WorkspaceResponse)
async def switch_tab(body: TabRequest, ws: Workspace, dashboard: Dashboard):
    """Switching to a create tab leaves edit mode and clears the success banner."""
    dashboard.switch_tab(ws, body.tab)
    return _state(ws)


# --- Drafts ---


@router.patch("/drafts/tool", response_model=WorkspaceResponse)
async def update_tool_draft(body: ToolDraftPatch, ws: Workspace):
    with dashboard_errors("Failed to update draft"):
        ws.update_draft(EntityType.TOOL, **body.changes())
    return _state(ws)


@router.patch("/drafts/news", response_model=WorkspaceResponse)
async def update_news_draft(body: NewsDraftPatch, ws: Workspace):
    with dashboard_errors("Failed to update draft"):
        ws.update_draft(EntityType.NEWS, **body.changes())
    return _state(ws)


@router.post("/drafts/{entity}/reset", response_model=WorkspaceResponse)
async def reset_draft(entity: EntityType, ws: Workspace):
    if entity == EntityType.TOOL:
        ws.reset_tool_form()
    else:
        ws.reset_news_form()
    ws.last_success = None
    return _state(ws)


@router.post("/drafts/tool/tags", response_model=WorkspaceResponse)
async def add_tool_tag(body: TagRequest, ws: Workspace):
    ws.add_tool_tag(body.tag)
    return _state(ws)


@router.post("/drafts/{entity}/image-mode", response_model=WorkspaceResponse)
async def set_image_mode(entity: EntityType, body: ImageModeRequest, ws: Workspace):
    """Change how the image is supplied; the current image URL is kept."""
    ws.set_image_mode(entity, body.mode)
    return _state(ws)


@router.post("/drafts/{entity}/image", response_model=WorkspaceResponse)
async def upload_image(
    entity: EntityType,
    ws: Workspace,
    dashboard: Dashboard,
    file: UploadFile = File(...),
):
    """Store an uploaded image on the draft as a base64 data URL."""
    content = await file.read()
    if len(content) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Image must be 5 MB or smaller",
        )
    if file.content_type and not file.content_type.startswith("image/"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File must be an image")
    with dashboard_errors("Error reading file"):
        dashboard.upload_image(ws, entity, content, file.content_type or "image/png")
    return _state(ws)


@router.post("/drafts/{entity}/image/generate", response_model=WorkspaceResponse)
@limiter.limit(get_rate_limit("generation"))
async def generate_image(request: Request, entity: EntityType, ws: Workspace, dashboard: Dashboard):
    with dashboard_errors("Error generating image"):
        await dashboard.generate_image(ws, entity)
    return _state(ws)


@router.post("/drafts/tool/generate", response_model=WorkspaceResponse)
@limiter.limit(get_rate_limit("generation"))
async def generate_tool_details(request: Request, body: ToolDetailsRequest, ws: Workspace, dashboard: Dashboard):
    with dashboard_errors("Generation failed"):
        await dashboard.generate_tool_details(ws, body.name)
    return _state(ws)


@router.post("/drafts/news/generate", response_model=WorkspaceResponse)
@limiter.limit(get_rate_limit("generation"))
async def generate_news_details(request: Request, body: NewsTopicRequest, ws: Workspace, dashboard: Dashboard):
    with dashboard_errors("News generation failed"):
        await dashboard.generate_news_details(ws, body.topic)
    return _state(ws)


@router.post("/drafts/tool/slides", response_model=WorkspaceResponse)
@limiter.limit(get_rate_limit("generation"))
async def generate_draft_slides(request: Request, ws: Workspace, dashboard: Dashboard):
    with dashboard_errors("Failed to generate slides"):
        await dashboard.generate_draft_slides(ws)
    return _state(ws)


@router.post("/drafts/tool/tutorial", response_model=WorkspaceResponse)
@limiter.limit(get_rate_limit("generation"))
async def generate_draft_tutorial(request: Request, ws: Workspace, dashboard: Dashboard):
    with dashboard_errors("Failed to generate tutorial"):
        await dashboard.generate_draft_tutorial(ws)
    return _state(ws)


@router.post("/drafts/tool/course", response_model=WorkspaceResponse)
@limiter.limit(get_rate_limit("generation"))
async def generate_draft_course(request: Request, ws: Workspace, dashboard: Dashboard):
    with dashboard_errors("Failed to generate course"):
        await dashboard.generate_draft_course(ws)
    return _state(ws)


@router.post("/drafts/tool/submit", response_model=WorkspaceResponse)
async def submit_tool(ws: Workspace, dashboard: Dashboard):
    """Publish the tool form (add, or update when editing)."""
    with dashboard_errors("Failed to save tool"):
        await dashboard.submit_tool(ws)
    return _state(ws)


@router.post("/drafts/news/submit", response_model=WorkspaceResponse)
async def submit_news(ws: Workspace, dashboard: Dashboard):
    with dashboard_errors("Failed to save article"):
        await dashboard.submit_news(ws)
    return _state(ws)


@router.post("/news-categories", response_model=WorkspaceResponse)
async def add_news_category(body: CategoryRequest, ws: Workspace):
    ws.add_news_category(body.name)
    return _state(ws)


# --- Review queues ---


@router.post("/queues/{entity}/generate", response_model=WorkspaceResponse)
@limiter.limit(get_rate_limit("generation"))
async def generate_candidates(
    request: Request, entity: EntityType, body: CandidatesRequest, ws: Workspace, dashboard: Dashboard
):
    """Generate candidates from trending topics and prepend them to the queue."""
    action = "Batch generation failed" if entity == EntityType.TOOL else "Batch news generation failed"
    with dashboard_errors(action):
        await dashboard.generate_candidates(ws, entity, body.count)
    return _state(ws)


@router.post("/queues/{entity}/publish-all", response_model=PublishedResponse)
async def publish_all(entity: EntityType, ws: Workspace, dashboard: Dashboard):
    with dashboard_errors("Failed to publish"):
        published = await dashboard.publish_all(ws, entity)
    return PublishedResponse(published=len(published), items=[entity_payload(p) for p in published])


@router.post("/queues/{entity}/{item_id}/publish", response_model=WorkspaceResponse)
async def publish_queued(entity: EntityType, item_id: str, ws: Workspace, dashboard: Dashboard):
    with dashboard_errors("Failed to publish"):
        await dashboard.publish_queued(ws, entity, item_id)
    return _state(ws)


@router.post("/queues/{entity}/{item_id}/edit", response_model=WorkspaceResponse)
async def edit_queued(entity: EntityType, item_id: str, ws: Workspace, dashboard: Dashboard):
    """Move a candidate into the form and out of the queue."""
    with dashboard_errors("Failed to edit"):
        dashboard.edit_queued(ws, entity, item_id)
    return _state(ws)


@router.delete("/queues/{entity}/{item_id}", response_model=WorkspaceResponse)
async def discard_queued(entity: EntityType, item_id: str, ws: Workspace, dashboard: Dashboard):
    with dashboard_errors("Failed to discard"):
        dashboard.discard_queued(ws, entity, item_id)
    return _state(ws)


# --- Preview ---


@router.get("/preview/{entity}", response_model=PreviewResponse)
async def preview(
    entity: EntityType,
    ws: Workspace,
    dashboard: Dashboard,
    queue_item_id: Optional[str] = Query(None, alias="queueItemId"),
    last_success: bool = Query(False, alias="lastSuccess"),
):
    """Render a draft, queued candidate or the last published record as the public sees it."""
    with dashboard_errors("Failed to build preview"):
        item = dashboard.preview(ws, entity, queue_item_id=queue_item_id, last_success=last_success)
    kind = ws.last_success.type if last_success and ws.last_success else entity
    return PreviewResponse(type=kind, item=entity_payload(item))


# --- Delete confirmation ---


@router.post("/delete/request", response_model=WorkspaceResponse)
async def request_delete(body: DeleteRequest, ws: Workspace, dashboard: Dashboard):
    with dashboard_errors("Failed to load record"):
        await dashboard.request_delete(ws, body.type, body.id)
    return _state(ws)


@router.post("/delete/confirm", response_model=DeleteResultResponse)
async def confirm_delete(ws: Workspace, dashboard: Dashboard):
    with dashboard_errors("Failed to delete"):
        deleted = await dashboard.confirm_delete(ws)
    return DeleteResultResponse(deleted=deleted)


@router.post("/delete/cancel", response_model=WorkspaceResponse)
async def cancel_delete(ws: Workspace, dashboard: Dashboard):
    dashboard.cancel_delete(ws)
    return _state(ws)


# --- Start editing an existing record ---


@router.post("/manage/tools/{tool_id}/edit", response_model=WorkspaceResponse)
async def start_edit_tool(tool_id: str, ws: Workspace, dashboard: Dashboard):
    with dashboard_errors("Failed to load tool"):
        await dashboard.start_edit_tool(ws, tool_id)
    return _state(ws)


@router.post("/manage/news/{news_id}/edit", response_model=WorkspaceResponse)
async def start_edit_news(news_id: str, ws: Workspace, dashboard: Dashboard):
    with dashboard_errors("Failed to load article"):
        await dashboard.start_edit_news(ws, news_id)
    return _state(ws)
