"""
Billing API routes: pricing data, payment confirmation and Stripe webhooks.

Purchases are one-time and grant lifetime access, so an upgrade sets the
plan and clears ``subscription_end``. The plan change is published as a
USER_UPDATED auth event so every open session sees it immediately.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

from adapters.payments.stripe_adapter import (
    CheckoutSession,
    PaymentAPIError,
    PaymentConfigError,
    StripeCheckoutAdapter,
    WebhookVerificationError,
    stripe_field,
)
from api.dependencies import get_checkout_adapter, get_current_user, get_shell
from api.middleware.rate_limit import get_rate_limit, limiter
from api.schemas.auth import ProfileResponse
from api.schemas.billing import PaymentSuccessResponse, PlanInfo, PricingResponse, WebhookResponse
from core.domain.user import UserProfile
from core.plans import PLANS
from infrastructure.config.settings import settings
from services.app_shell import AppShell

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/billing", tags=["Billing"])


@router.get("/plans", response_model=PricingResponse)
async def get_plans():
    """Pricing page data."""
    plans = [
        PlanInfo(
            id=plan_id,
            name=plan["name"],
            price=plan["price"],
            currency=settings.stripe_currency,
            features=plan["features"],
        )
        for plan_id, plan in PLANS.items()
    ]
    return PricingResponse(plans=plans, publishable_key=settings.stripe_publishable_key)


async def _apply_paid_session(shell: AppShell, session: CheckoutSession) -> UserProfile | None:
    if not session.is_paid or not session.client_reference_id or session.plan not in PLANS:
        return None
    return await shell.upgrade_plan(session.client_reference_id, session.plan)


@router.get("/payment-success", response_model=PaymentSuccessResponse)
async def payment_success(
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    shell: Annotated[AppShell, Depends(get_shell)],
    adapter: Annotated[StripeCheckoutAdapter, Depends(get_checkout_adapter)],
    session_id: str = Query(..., min_length=1, max_length=255),
):
    """Confirm a completed checkout and unlock the purchased plan."""
    try:
        session = await adapter.retrieve_session(session_id)
    except PaymentConfigError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except PaymentAPIError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    if session.client_reference_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This checkout session belongs to another account",
        )
    if not session.is_paid:
        raise HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail="Payment has not been completed",
        )

    profile = await _apply_paid_session(shell, session)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Checkout session has no valid plan")

    return PaymentSuccessResponse(
        session_id=session.id,
        plan=profile.plan,
        upgraded=profile.plan == session.plan,
        profile=ProfileResponse.from_domain(profile),
    )


@router.post("/webhook", response_model=WebhookResponse)
@limiter.limit(get_rate_limit("webhook"))
async def handle_webhook(
    request: Request,
    shell: Annotated[AppShell, Depends(get_shell)],
    adapter: Annotated[StripeCheckoutAdapter, Depends(get_checkout_adapter)],
    stripe_signature: Annotated[str | None, Header(alias="Stripe-Signature")] = None,
):
    """Handle Stripe webhook events; only checkout.session.completed is acted on."""
    body = await request.body()
    try:
        event = adapter.construct_webhook_event(body, stripe_signature)
    except PaymentConfigError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except WebhookVerificationError as e:
        logger.error("Rejected Stripe webhook: %s", e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    event_type = stripe_field(event, "type")
    if event_type != "checkout.session.completed":
        logger.info("Ignoring Stripe event %s", event_type)
        return WebhookResponse(handled=False)

    session = CheckoutSession.from_api_response(stripe_field(stripe_field(event, "data"), "object"))
    profile = await _apply_paid_session(shell, session)
    logger.info("Processed checkout %s: upgraded=%s", session.id, profile is not None)
    return WebhookResponse(handled=profile is not None)
