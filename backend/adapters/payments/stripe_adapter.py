"""
Stripe checkout adapter for one-time lifetime access purchases.

Creates hosted checkout sessions for the fixed plan price table, retrieves
completed sessions for the payment-success page, and verifies webhooks.
The Stripe SDK is synchronous, so calls run in a worker thread.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional

import stripe

from core.plans import CHECKOUT_DESCRIPTION, CHECKOUT_IMAGE, get_checkout_plan
from infrastructure.config.settings import settings

logger = logging.getLogger(__name__)


# Custom Exceptions
class PaymentError(Exception):
    """Base exception for payment adapter errors."""

    pass


class PaymentConfigError(PaymentError):
    """Raised when the Stripe secret key is not configured."""

    pass


class InvalidPlanError(PaymentError):
    """Raised for plan names outside the fixed price table."""

    pass


class PaymentAPIError(PaymentError):
    """Raised when the Stripe API returns an error."""

    pass


class WebhookVerificationError(PaymentError):
    """Raised when a webhook payload or signature is invalid."""

    pass


def stripe_field(data: Any, name: str, default: Any = None) -> Any:
    """Read a field from a Stripe object or a plain dict."""
    if data is None:
        return default
    if isinstance(data, dict):
        return data.get(name, default)
    return getattr(data, name, default)


# Dataclasses
@dataclass
class CheckoutPlan:
    """A purchasable plan resolved from the price table."""

    plan_id: str
    name: str
    product_name: str
    unit_amount: int


@dataclass
class CheckoutSession:
    """Created or retrieved checkout session."""

    id: str
    url: Optional[str]
    payment_status: str
    client_reference_id: Optional[str]
    plan: Optional[str]
    amount_total: Optional[int]

    @classmethod
    def from_api_response(cls, data: Any) -> "CheckoutSession":
        """Create session from a Stripe object or plain dict."""
        metadata = stripe_field(data, "metadata")
        return cls(
            id=stripe_field(data, "id", ""),
            url=stripe_field(data, "url"),
            payment_status=stripe_field(data, "payment_status") or "",
            client_reference_id=stripe_field(data, "client_reference_id"),
            plan=stripe_field(metadata, "plan"),
            amount_total=stripe_field(data, "amount_total"),
        )

    @property
    def is_paid(self) -> bool:
        return self.payment_status == "paid"


def resolve_plan(plan_name: Any) -> CheckoutPlan:
    """Validate *plan_name* against the price table (exact, case-sensitive)."""
    resolved = get_checkout_plan(plan_name) if isinstance(plan_name, str) else None
    if resolved is None:
        raise InvalidPlanError("Invalid plan selected")
    plan_id, plan = resolved
    return CheckoutPlan(
        plan_id=plan_id,
        name=plan["name"],
        product_name=plan["product_name"],
        unit_amount=plan["price"],
    )


class StripeCheckoutAdapter:
    """Adapter for Stripe Checkout one-time payments."""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        webhook_secret: Optional[str] = None,
        currency: Optional[str] = None,
    ):
        self.secret_key = secret_key if secret_key is not None else settings.stripe_secret_key
        self.webhook_secret = (
            webhook_secret if webhook_secret is not None else settings.stripe_webhook_secret
        )
        self.currency = currency or settings.stripe_currency

    @property
    def is_configured(self) -> bool:
        return bool(self.secret_key)

    def _require_key(self) -> str:
        if not self.secret_key:
            raise PaymentConfigError("Server Stripe configuration missing")
        return self.secret_key

    def build_session_params(self, plan: CheckoutPlan, user_id: str, origin: str) -> dict[str, Any]:
        """Parameters for ``stripe.checkout.Session.create``."""
        return {
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": self.currency,
                        "product_data": {
                            "name": plan.product_name,
                            "description": CHECKOUT_DESCRIPTION,
                            "images": [CHECKOUT_IMAGE],
                        },
                        "unit_amount": plan.unit_amount,
                    },
                    "quantity": 1,
                }
            ],
            "mode": "payment",
            "success_url": f"{origin}/#/payment-success?session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": f"{origin}/#/pricing",
            "client_reference_id": user_id,
            "metadata": {"userId": user_id, "plan": plan.name.lower()},
        }

    async def create_checkout_session(self, user_id: str, plan_name: Any, origin: str) -> CheckoutSession:
        """
        Create a hosted checkout session.

        Args:
            user_id: Profile ID, echoed back as client_reference_id
            plan_name: "Starter" or "Pro"
            origin: Validated site origin used for redirect targets

        Returns:
            CheckoutSession with the hosted page URL

        Raises:
            PaymentConfigError: Secret key missing
            InvalidPlanError: Plan outside the price table
            PaymentAPIError: Stripe rejected the request
        """
        api_key = self._require_key()
        plan = resolve_plan(plan_name)
        params = self.build_session_params(plan, user_id, origin)

        try:
            session = await asyncio.to_thread(
                stripe.checkout.Session.create, api_key=api_key, **params
            )
        except stripe.StripeError as e:
            logger.error("Stripe checkout session creation failed: %s", e.user_message or e)
            raise PaymentAPIError(str(e.user_message or e)) from e

        logger.info("Created checkout session %s for plan %s", stripe_field(session, "id"), plan.plan_id)
        return CheckoutSession.from_api_response(session)

    async def retrieve_session(self, session_id: str) -> CheckoutSession:
        """Fetch a checkout session to confirm payment."""
        api_key = self._require_key()
        try:
            session = await asyncio.to_thread(
                stripe.checkout.Session.retrieve, session_id, api_key=api_key
            )
        except stripe.StripeError as e:
            logger.error("Stripe session retrieval failed: %s", e)
            raise PaymentAPIError(str(e.user_message or e)) from e
        return CheckoutSession.from_api_response(session)

    def construct_webhook_event(self, payload: bytes, signature: Optional[str]) -> Any:
        """Verify a webhook signature and return the event."""
        if not self.webhook_secret:
            raise PaymentConfigError("Stripe webhook secret not configured")
        if not signature:
            raise WebhookVerificationError("Missing Stripe-Signature header")
        try:
            return stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except ValueError as e:
            raise WebhookVerificationError("Invalid webhook payload") from e
        except stripe.SignatureVerificationError as e:
            raise WebhookVerificationError("Invalid webhook signature") from e


def create_stripe_adapter() -> StripeCheckoutAdapter:
    """Factory function to create Stripe adapter with settings."""
    return StripeCheckoutAdapter()
