"""
Plan configuration for one-time access purchases.

This module is the single source of truth for plan prices and features.
It lives in core/ so both the payment adapter and the API layer can import
from it without creating circular dependencies.
"""

# Prices are in minor currency units (cents)
PLANS = {
    "free": {
        "name": "Free",
        "checkout_name": None,
        "price": 0,
        "product_name": None,
        "features": [
            "Browse the full tool directory",
            "Read all news articles",
            "Tool overviews, pros and cons",
        ],
    },
    "starter": {
        "name": "Starter",
        "checkout_name": "Starter",
        "price": 999,
        "product_name": "VETORRE Starter (Lifetime Access)",
        "features": [
            "Everything in Free",
            "AI slide decks for every tool",
            "Step-by-step tutorials",
            "Lifetime access",
        ],
    },
    "pro": {
        "name": "Pro",
        "checkout_name": "Pro",
        "price": 1999,
        "product_name": "VETORRE Pro (Lifetime Access)",
        "features": [
            "Everything in Starter",
            "Full multi-module courses",
            "Early access to new tools",
            "Lifetime access",
        ],
    },
}

CHECKOUT_DESCRIPTION = "One-time payment for lifetime access to AI tools."
CHECKOUT_IMAGE = "https://picsum.photos/seed/vetorre/200/200"


def get_checkout_plan(plan_name: str) -> tuple[str, dict] | None:
    """Resolve a checkout plan name ("Starter" / "Pro") to (plan_id, plan).

    Matching is exact; free or unknown names return None.
    """
    for plan_id, plan in PLANS.items():
        if plan["checkout_name"] is not None and plan["checkout_name"] == plan_name:
            return plan_id, plan
    return None
