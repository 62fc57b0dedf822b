"""
Unit tests for the Stripe checkout adapter.

The Stripe SDK is patched; no network calls are made.
"""

from unittest.mock import MagicMock, patch

import pytest
import stripe

from adapters.payments.stripe_adapter import (
    CheckoutSession,
    InvalidPlanError,
    PaymentAPIError,
    PaymentConfigError,
    StripeCheckoutAdapter,
    WebhookVerificationError,
    resolve_plan,
)


@pytest.fixture
def adapter():
    return StripeCheckoutAdapter(secret_key="sk_test_123", webhook_secret="whsec_test", currency="eur")


class TestResolvePlan:

    def test_starter_price(self):
        plan = resolve_plan("Starter")
        assert plan.plan_id == "starter"
        assert plan.unit_amount == 999
        assert plan.product_name == "VETORRE Starter (Lifetime Access)"

    def test_pro_price(self):
        plan = resolve_plan("Pro")
        assert plan.plan_id == "pro"
        assert plan.unit_amount == 1999

    @pytest.mark.parametrize("name", ["starter", "PRO", "Free", "Enterprise", "", None, 42])
    def test_anything_else_is_invalid(self, name):
        with pytest.raises(InvalidPlanError, match="Invalid plan selected"):
            resolve_plan(name)


class TestSessionParams:

    def test_one_time_payment_shape(self, adapter):
        params = adapter.build_session_params(resolve_plan("Pro"), "user-1", "https://www.vetorre.com")

        assert params["mode"] == "payment"
        assert params["payment_method_types"] == ["card"]
        assert params["client_reference_id"] == "user-1"
        assert params["metadata"] == {"userId": "user-1", "plan": "pro"}

        line_item = params["line_items"][0]
        assert line_item["quantity"] == 1
        assert line_item["price_data"]["currency"] == "eur"
        assert line_item["price_data"]["unit_amount"] == 1999
        assert line_item["price_data"]["product_data"]["name"] == "VETORRE Pro (Lifetime Access)"

    def test_redirect_targets_use_origin(self, adapter):
        params = adapter.build_session_params(resolve_plan("Starter"), "u", "http://localhost:5173")
        assert params["success_url"] == "http://localhost:5173/#/payment-success?session_id={CHECKOUT_SESSION_ID}"
        assert params["cancel_url"] == "http://localhost:5173/#/pricing"


class TestCreateCheckoutSession:

    @pytest.mark.asyncio
    async def test_returns_hosted_url(self, adapter):
        created = {"id": "cs_test_1", "url": "https://checkout.stripe.com/c/pay/cs_test_1", "payment_status": "unpaid"}
        with patch("stripe.checkout.Session.create", return_value=created) as create:
            session = await adapter.create_checkout_session("user-1", "Starter", "https://www.vetorre.com")

        assert session.url == "https://checkout.stripe.com/c/pay/cs_test_1"
        kwargs = create.call_args.kwargs
        assert kwargs["api_key"] == "sk_test_123"
        assert kwargs["line_items"][0]["price_data"]["unit_amount"] == 999

    @pytest.mark.asyncio
    async def test_missing_key_checked_first(self):
        adapter = StripeCheckoutAdapter(secret_key="")
        with patch("stripe.checkout.Session.create") as create:
            with pytest.raises(PaymentConfigError, match="Server Stripe configuration missing"):
                await adapter.create_checkout_session("user-1", "Enterprise", "https://www.vetorre.com")
        create.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_plan_makes_no_call(self, adapter):
        with patch("stripe.checkout.Session.create") as create:
            with pytest.raises(InvalidPlanError):
                await adapter.create_checkout_session("user-1", "Gold", "https://www.vetorre.com")
        create.assert_not_called()

    @pytest.mark.asyncio
    async def test_stripe_error_is_wrapped(self, adapter):
        error = stripe.InvalidRequestError("Amount too small", param="unit_amount")
        with patch("stripe.checkout.Session.create", side_effect=error):
            with pytest.raises(PaymentAPIError):
                await adapter.create_checkout_session("user-1", "Pro", "https://www.vetorre.com")


class TestCheckoutSession:

    def test_from_dict(self):
        session = CheckoutSession.from_api_response(
            {
                "id": "cs_1",
                "payment_status": "paid",
                "client_reference_id": "user-1",
                "metadata": {"plan": "starter"},
                "amount_total": 999,
            }
        )
        assert session.is_paid
        assert session.plan == "starter"
        assert session.url is None

    def test_unpaid(self):
        assert not CheckoutSession.from_api_response({"id": "cs_1", "payment_status": "unpaid"}).is_paid


class TestWebhook:

    def test_missing_secret(self):
        adapter = StripeCheckoutAdapter(secret_key="sk_test", webhook_secret="")
        with pytest.raises(PaymentConfigError):
            adapter.construct_webhook_event(b"{}", "sig")

    def test_missing_signature(self, adapter):
        with pytest.raises(WebhookVerificationError, match="Missing"):
            adapter.construct_webhook_event(b"{}", None)

    def test_bad_signature(self, adapter):
        error = stripe.SignatureVerificationError("bad", "sig")
        with patch("stripe.Webhook.construct_event", side_effect=error):
            with pytest.raises(WebhookVerificationError, match="signature"):
                adapter.construct_webhook_event(b"{}", "sig")

    def test_valid_event(self, adapter):
        event = MagicMock()
        with patch("stripe.Webhook.construct_event", return_value=event) as construct:
            assert adapter.construct_webhook_event(b"{}", "sig") is event
        construct.assert_called_once_with(b"{}", "sig", "whsec_test")
