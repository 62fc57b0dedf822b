"""
Authentication request and response schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from api.schemas.catalog import CamelModel
from core.domain.user import UserProfile


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    """Registration request schema."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        """Validate password meets minimum requirements."""
        if not any(c.isalpha() for c in v):
            raise ValueError("Password must contain at least one letter")
        if not any(c.isdigit() for c in v):
            raise ValueError("Password must contain at least one digit")
        return v


class TokenResponse(BaseModel):
    """Token response schema."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int  # Seconds until access token expires


class ProfileResponse(CamelModel):
    """Signed-in user's profile."""

    id: str
    email: str
    role: str
    plan: str
    subscription_end: Optional[datetime] = None
    generations_count: int = 0
    is_admin: bool = False
    has_premium_access: bool = False

    @classmethod
    def from_domain(cls, profile: UserProfile) -> "ProfileResponse":
        return cls.model_validate(profile)
