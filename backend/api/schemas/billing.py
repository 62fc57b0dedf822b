"""
Billing request/response schemas.
"""

from typing import Optional

from pydantic import BaseModel, Field

from api.schemas.auth import ProfileResponse


class PlanInfo(BaseModel):
    """A purchasable plan on the pricing page."""

    id: str = Field(..., description="Plan ID (free, starter, pro)")
    name: str = Field(..., description="Display name, also the checkout plan name")
    price: int = Field(..., description="One-time price in minor currency units")
    currency: str
    features: list[str] = Field(default_factory=list)


class PricingResponse(BaseModel):
    """Response containing all plans and the Stripe publishable key."""

    plans: list[PlanInfo]
    publishable_key: Optional[str] = None


class PaymentSuccessResponse(BaseModel):
    """Result of confirming a completed checkout session."""

    session_id: str
    plan: str
    upgraded: bool
    profile: ProfileResponse


class WebhookResponse(BaseModel):
    received: bool = True
    handled: bool = False
