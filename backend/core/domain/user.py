"""User profile domain entity."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Optional


class UserRole(StrEnum):
    """User roles in the system."""

    USER = "user"
    ADMIN = "admin"


class Plan(StrEnum):
    """Purchased access level."""

    FREE = "free"
    STARTER = "starter"
    PRO = "pro"


PREMIUM_PLANS = frozenset({Plan.STARTER.value, Plan.PRO.value})


@dataclass
class UserProfile:
    """Resolved profile of a signed-in user."""

    id: str
    email: str = ""
    role: str = UserRole.USER.value
    plan: str = Plan.FREE.value
    subscription_end: Optional[datetime] = None
    generations_count: int = 0
    created_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        """Only the exact admin role counts."""
        return self.role == UserRole.ADMIN.value

    @property
    def has_premium_access(self) -> bool:
        """Admins and paying users can open generated learning content."""
        return self.is_admin or self.plan in PREMIUM_PLANS
