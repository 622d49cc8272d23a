"""Unit tests for HttpPaymentGateway against a mocked transport"""

import json
import httpx
import pytest

from economy.adapter.services import HttpPaymentGateway
from economy.app.services.payment_gateway import PaymentGatewayError


def gateway_for(handler):
    return HttpPaymentGateway(
        base_url="https://payments.test/v1/",
        api_key="sk_test",
        timeout=2.0,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
class TestHttpPaymentGateway:

    async def test_create_intent_sends_form_and_metadata(self):
        """
        Given: The processor accepts the intent
        When: create_intent is called with correlation metadata
        Then: The request is form encoded, authorized, and the intent parsed
        """
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = request.content.decode()
            return httpx.Response(
                200,
                json={
                    "id": "pi_123",
                    "status": "requires_payment_method",
                    "client_secret": "pi_123_secret",
                    "amount": 3999,
                    "metadata": {"user_id": "user_1", "package_code": "PRO"},
                },
            )

        intent = await gateway_for(handler).create_intent(
            3999, "usd", {"user_id": "user_1", "package_code": "PRO"}
        )

        assert seen["url"] == "https://payments.test/v1/payment_intents"
        assert seen["auth"] == "Bearer sk_test"
        assert "amount=3999" in seen["body"]
        assert "metadata%5Buser_id%5D=user_1" in seen["body"]
        assert intent.id == "pi_123"
        assert intent.amount_cents == 3999
        assert intent.client_secret == "pi_123_secret"
        assert not intent.succeeded

    async def test_retrieve_intent(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "GET"
            assert request.url.path == "/v1/payment_intents/pi_9"
            return httpx.Response(200, content=json.dumps({"id": "pi_9", "status": "succeeded", "amount": 999}))

        intent = await gateway_for(handler).retrieve_intent("pi_9")

        assert intent.succeeded
        assert intent.metadata == {}

    async def test_server_error_raises(self):
        gateway = gateway_for(lambda request: httpx.Response(502, json={"error": "bad gateway"}))

        with pytest.raises(PaymentGatewayError, match="502"):
            await gateway.retrieve_intent("pi_1")

    async def test_timeout_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(PaymentGatewayError, match="timed out"):
            await gateway_for(handler).retrieve_intent("pi_1")

    async def test_malformed_response_raises(self):
        gateway = gateway_for(lambda request: httpx.Response(200, json={"status": "succeeded"}))

        with pytest.raises(PaymentGatewayError, match="Malformed"):
            await gateway.retrieve_intent("pi_1")
