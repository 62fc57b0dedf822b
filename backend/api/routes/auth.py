"""
Authentication API routes.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status

from api.dependencies import get_current_user, get_shell, get_token_payload, token_service
from api.middleware.rate_limit import get_rate_limit, limiter
from api.schemas.auth import LoginRequest, ProfileResponse, RegisterRequest, TokenResponse
from core.domain.user import UserProfile, UserRole
from core.interfaces.repositories import DirectoryStoreError
from core.security.password import password_hasher
from core.security.tokens import TokenPayload
from infrastructure.config.settings import settings
from services.app_shell import AppShell

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(get_rate_limit("register"))
async def register(
    request: Request,
    register_data: RegisterRequest,
    shell: Annotated[AppShell, Depends(get_shell)],
) -> ProfileResponse:
    """
    Register a new account and provision its profile (role user, plan free).
    """
    email = register_data.email.lower()
    if await shell.profiles.get_credentials(email) is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="An account with this email already exists",
        )

    role = UserRole.ADMIN.value if email in settings.bootstrap_admin_emails_list else UserRole.USER.value
    try:
        profile = await shell.profiles.create(
            email=email,
            password_hash=password_hasher.hash(register_data.password),
            role=role,
        )
    except DirectoryStoreError as e:
        logger.error("Registration failed for %s: %s", email, e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    logger.info("Registered profile %s with role %s", profile.id, profile.role)
    return ProfileResponse.from_domain(profile)


@router.post("/login", response_model=TokenResponse)
@limiter.limit(get_rate_limit("login"))
async def login(
    request: Request,
    login_data: LoginRequest,
    shell: Annotated[AppShell, Depends(get_shell)],
) -> TokenResponse:
    """
    Authenticate and start a session.
    """
    credentials = await shell.profiles.get_credentials(login_data.email.lower())

    # Always run bcrypt so response time does not reveal registered emails
    if credentials is None:
        password_hasher.verify_dummy(login_data.password)
        password_ok = False
    else:
        password_ok = password_hasher.verify(login_data.password, credentials[1])

    if not password_ok:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    profile = credentials[0]
    session_id = await shell.sign_in(profile)
    access_token = token_service.create_access_token(
        user_id=profile.id,
        session_id=session_id,
        role=profile.role,
    )
    return TokenResponse(access_token=access_token, expires_in=token_service.expires_in)


@router.post("/logout", status_code=status.HTTP_200_OK)
async def logout(
    payload: Annotated[TokenPayload, Depends(get_token_payload)],
    shell: Annotated[AppShell, Depends(get_shell)],
) -> dict:
    """End the session the token belongs to."""
    await shell.sign_out(payload.sub, payload.sid)
    return {"message": "Signed out"}


@router.get("/me", response_model=ProfileResponse)
async def get_me(
    current_user: Annotated[UserProfile, Depends(get_current_user)],
) -> ProfileResponse:
    """Get the signed-in user's profile."""
    return ProfileResponse.from_domain(current_user)
