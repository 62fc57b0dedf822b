"""
API dependencies for authentication and authorization.
"""

from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, Request, status

from adapters.payments.stripe_adapter import StripeCheckoutAdapter, create_stripe_adapter
from core.domain.user import UserProfile
from core.security.tokens import TokenPayload, TokenService
from infrastructure.config.settings import settings
from services.admin_dashboard import AdminDashboard
from services.admin_workspace import AdminWorkspace
from services.app_shell import AppShell
from services.learning_content import LearningContentService

ACCESS_DENIED = {
    "view": "access_denied",
    "message": (
        "You do not have permission to view the Admin Dashboard. "
        "Please log in with an administrator account."
    ),
    "homeUrl": "/",
}

token_service = TokenService(
    secret_key=settings.jwt_secret_key,
    algorithm=settings.jwt_algorithm,
    access_token_expire_minutes=settings.jwt_access_token_expire_minutes,
)


def get_shell(request: Request) -> AppShell:
    """The application shell built during startup."""
    return request.app.state.shell


def get_dashboard(request: Request) -> AdminDashboard:
    return request.app.state.dashboard


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if authorization and authorization.startswith("Bearer "):
        token = authorization.split(" ", 1)[1].strip()
        return token or None
    return None


async def get_token_payload(
    authorization: Annotated[str | None, Header()] = None,
) -> TokenPayload:
    token = _bearer_token(authorization)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = token_service.verify_access_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload


async def get_current_user(
    payload: Annotated[TokenPayload, Depends(get_token_payload)],
    shell: Annotated[AppShell, Depends(get_shell)],
) -> UserProfile:
    """
    Dependency to get the signed-in user's profile.

    The token must belong to a live session; signing out ends it even though
    the JWT itself has not expired.
    """
    profile = shell.resolve_session(payload.sid, payload.sub)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session has ended",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return profile


async def get_optional_user(
    shell: Annotated[AppShell, Depends(get_shell)],
    authorization: Annotated[str | None, Header()] = None,
) -> Optional[UserProfile]:
    """Like get_current_user but returns None instead of raising."""
    token = _bearer_token(authorization)
    if not token:
        return None
    payload = token_service.verify_access_token(token)
    if not payload:
        return None
    return shell.resolve_session(payload.sid, payload.sub)


async def get_admin_profile(
    profile: Annotated[Optional[UserProfile], Depends(get_optional_user)],
) -> UserProfile:
    """
    Dependency that admits only profiles whose role is exactly ``admin``.

    Anonymous callers get the same access-denied payload as signed-in users.
    """
    if not AppShell.can_access_admin(profile):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=ACCESS_DENIED)
    return profile


async def get_admin_workspace(
    admin: Annotated[UserProfile, Depends(get_admin_profile)],
    shell: Annotated[AppShell, Depends(get_shell)],
) -> AdminWorkspace:
    return shell.workspaces.get(admin.id)


def get_learning_content(request: Request) -> LearningContentService:
    return request.app.state.learning


async def get_premium_user(
    current_user: Annotated[UserProfile, Depends(get_current_user)],
) -> UserProfile:
    """Admins and starter/pro buyers may open generated learning content."""
    if not current_user.has_premium_access:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Upgrade to Starter or Pro to unlock this content",
        )
    return current_user


def get_checkout_adapter() -> StripeCheckoutAdapter:
    return create_stripe_adapter()
