"""
Tool catalog API routes.

Listing and detail are public. Creating, replacing and deleting tools is
admin-only. Slides, tutorials and courses are premium content generated on
first view.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from adapters.ai.anthropic_adapter import ContentGenerationError
from api.dependencies import get_admin_profile, get_learning_content, get_premium_user, get_shell
from api.schemas.catalog import (
    CourseSchema,
    SlideSchema,
    ToolCreate,
    ToolListResponse,
    ToolResponse,
    TutorialSectionSchema,
)
from core.domain.catalog import DisplayPage
from core.domain.user import UserProfile
from core.interfaces.repositories import DirectoryStoreError
from services.app_shell import AppShell
from services.learning_content import ContentKind, LearningContentService, ToolNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tools", tags=["Tools"])


def _store_error(action: str, e: DirectoryStoreError) -> HTTPException:
    logger.error("Failed to %s: %s", action, e)
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.get("", response_model=ToolListResponse)
async def list_tools(
    shell: Annotated[AppShell, Depends(get_shell)],
    page: Optional[DisplayPage] = Query(None, description="free-tools, paid-tools or top-tools"),
    category: Optional[str] = Query(None, max_length=100),
):
    """List tools, newest first."""
    try:
        tools = await shell.list_tools()
    except DirectoryStoreError as e:
        raise _store_error("load tools", e)

    if page is not None:
        tools = [t for t in tools if t.page == page.value]
    if category:
        tools = [t for t in tools if t.category == category]
    return ToolListResponse(items=[ToolResponse.from_domain(t) for t in tools], total=len(tools))


@router.get("/{tool_id}", response_model=ToolResponse)
async def get_tool(tool_id: str, shell: Annotated[AppShell, Depends(get_shell)]):
    try:
        tool = await shell.get_tool(tool_id)
    except DirectoryStoreError as e:
        raise _store_error("load tool", e)
    if tool is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tool not found")
    return ToolResponse.from_domain(tool)


# --- Admin mutations ---


@router.post("", response_model=ToolResponse, status_code=status.HTTP_201_CREATED)
async def create_tool(
    payload: ToolCreate,
    shell: Annotated[AppShell, Depends(get_shell)],
    admin: Annotated[UserProfile, Depends(get_admin_profile)],
):
    try:
        saved = await shell.add_tool(payload.to_domain())
    except DirectoryStoreError as e:
        raise _store_error("save tool", e)
    return ToolResponse.from_domain(saved)


@router.put("/{tool_id}", response_model=ToolResponse)
async def update_tool(
    tool_id: str,
    payload: ToolCreate,
    shell: Annotated[AppShell, Depends(get_shell)],
    admin: Annotated[UserProfile, Depends(get_admin_profile)],
):
    try:
        saved = await shell.update_tool(payload.to_domain(tool_id))
    except DirectoryStoreError as e:
        raise _store_error("update tool", e)
    if saved is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tool not found")
    return ToolResponse.from_domain(saved)


@router.delete("/{tool_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tool(
    tool_id: str,
    shell: Annotated[AppShell, Depends(get_shell)],
    admin: Annotated[UserProfile, Depends(get_admin_profile)],
):
    try:
        deleted = await shell.delete_tool(tool_id)
    except DirectoryStoreError as e:
        raise _store_error("delete tool", e)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tool not found")


# --- Premium learning content ---


async def _learning(
    tool_id: str,
    kind: ContentKind,
    profile: UserProfile,
    learning: LearningContentService,
):
    try:
        tool, _ = await learning.get_or_generate(tool_id, kind, profile)
    except ToolNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tool not found")
    except ContentGenerationError as e:
        logger.warning("Failed to generate %s for %s: %s", kind.value, tool_id, e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    except DirectoryStoreError as e:
        raise _store_error(f"save {kind.value}", e)
    return tool


@router.get("/{tool_id}/slides", response_model=list[SlideSchema])
async def get_tool_slides(
    tool_id: str,
    profile: Annotated[UserProfile, Depends(get_premium_user)],
    learning: Annotated[LearningContentService, Depends(get_learning_content)],
):
    tool = await _learning(tool_id, ContentKind.SLIDES, profile, learning)
    return [SlideSchema.model_validate(s) for s in tool.slides]


@router.get("/{tool_id}/tutorial", response_model=list[TutorialSectionSchema])
async def get_tool_tutorial(
    tool_id: str,
    profile: Annotated[UserProfile, Depends(get_premium_user)],
    learning: Annotated[LearningContentService, Depends(get_learning_content)],
):
    tool = await _learning(tool_id, ContentKind.TUTORIAL, profile, learning)
    return [TutorialSectionSchema.model_validate(s) for s in tool.tutorial]


@router.get("/{tool_id}/course", response_model=CourseSchema)
async def get_tool_course(
    tool_id: str,
    profile: Annotated[UserProfile, Depends(get_premium_user)],
    learning: Annotated[LearningContentService, Depends(get_learning_content)],
):
    tool = await _learning(tool_id, ContentKind.COURSE, profile, learning)
    return CourseSchema.model_validate(tool.course)
