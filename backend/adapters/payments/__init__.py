"""Payment adapters for one-time checkout."""

from .stripe_adapter import (
    CheckoutPlan,
    CheckoutSession,
    InvalidPlanError,
    PaymentAPIError,
    PaymentConfigError,
    PaymentError,
    StripeCheckoutAdapter,
    WebhookVerificationError,
    create_stripe_adapter,
    resolve_plan,
    stripe_field,
)

__all__ = [
    "StripeCheckoutAdapter",
    "CheckoutPlan",
    "CheckoutSession",
    "PaymentError",
    "PaymentConfigError",
    "InvalidPlanError",
    "PaymentAPIError",
    "WebhookVerificationError",
    "create_stripe_adapter",
    "resolve_plan",
    "stripe_field",
]
