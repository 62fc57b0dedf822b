"""
Checkout endpoint: ``/api/create-checkout``.

Serves the pricing page's checkout button. It answers every method itself so
the exact status codes and CORS headers stay under its control: preflight
gets 200, anything but POST gets 405, and Access-Control-Allow-Origin is only
sent back to allow-listed origins.
"""

import json
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, Response

from adapters.payments.stripe_adapter import (
    InvalidPlanError,
    PaymentAPIError,
    PaymentConfigError,
    StripeCheckoutAdapter,
)
from api.dependencies import get_checkout_adapter
from api.middleware.rate_limit import get_rate_limit, limiter
from infrastructure.config.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Checkout"])

CHECKOUT_PATH = "/create-checkout"
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def is_allowed_origin(origin: str) -> bool:
    return bool(origin) and origin.rstrip("/") in settings.cors_origins_list


def checkout_cors_headers(origin: str) -> dict[str, str]:
    headers = {
        "Access-Control-Allow-Methods": "POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
        "Vary": "Origin",
    }
    if is_allowed_origin(origin):
        headers["Access-Control-Allow-Origin"] = origin
        headers["Access-Control-Allow-Credentials"] = "true"
    return headers


@router.api_route(CHECKOUT_PATH, methods=ALL_METHODS)
@limiter.limit(get_rate_limit("checkout"))
async def create_checkout(
    request: Request,
    adapter: Annotated[StripeCheckoutAdapter, Depends(get_checkout_adapter)],
) -> Response:
    """Create a one-time payment checkout session for Starter or Pro."""
    origin = request.headers.get("origin", "")
    headers = checkout_cors_headers(origin)

    if request.method == "OPTIONS":
        return Response(status_code=status.HTTP_200_OK, headers=headers)

    if request.method != "POST":
        return JSONResponse(
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            content={"error": "Method not allowed"},
            headers=headers,
        )

    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        body = {}
    if not isinstance(body, dict):
        body = {}

    # Redirect targets never use an origin outside the allow-list
    safe_origin = origin.rstrip("/") if is_allowed_origin(origin) else settings.frontend_url.rstrip("/")

    try:
        session = await adapter.create_checkout_session(
            user_id=body.get("userId"),
            plan_name=body.get("plan"),
            origin=safe_origin,
        )
    except PaymentConfigError as e:
        logger.error("Checkout rejected: %s", e)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(e)}, headers=headers)
    except InvalidPlanError as e:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(e)}, headers=headers)
    except PaymentAPIError as e:
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(e)}, headers=headers)

    return JSONResponse(status_code=status.HTTP_200_OK, content={"url": session.url}, headers=headers)
