"""
API request and response schemas.
"""

from .auth import LoginRequest, ProfileResponse, RegisterRequest, TokenResponse
from .catalog import (
    NewsCreate,
    NewsDraftPatch,
    NewsListResponse,
    NewsResponse,
    ToolCreate,
    ToolDraftPatch,
    ToolListResponse,
    ToolResponse,
)

__all__ = [
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    "ProfileResponse",
    "ToolCreate",
    "ToolResponse",
    "ToolDraftPatch",
    "ToolListResponse",
    "NewsCreate",
    "NewsResponse",
    "NewsDraftPatch",
    "NewsListResponse",
]
