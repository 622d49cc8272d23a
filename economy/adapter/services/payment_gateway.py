"""HTTP payment gateway

Talks to a processor exposing Stripe-style ``/payment_intents``
endpoints: form-encoded requests, bearer API key, JSON responses.
"""

import logging
from typing import Dict
import httpx
from economy.app.services.payment_gateway import PaymentGateway, PaymentGatewayError, PaymentIntent

logger = logging.getLogger(__name__)


class HttpPaymentGateway(PaymentGateway):
    """
    PaymentGateway backed by an HTTP API

    Every call is bounded by ``timeout``. Transport errors, timeouts and
    5xx answers surface as PaymentGatewayError; 4xx answers are raised too
    since the engine cannot act on them either.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={"Authorization": f"Bearer {self.api_key}"},
            transport=self.transport,
        )

    async def create_intent(
        self,
        amount_cents: int,
        currency: str,
        metadata: Dict[str, str],
    ) -> PaymentIntent:
        form = {
            "amount": str(amount_cents),
            "currency": currency,
            "automatic_payment_methods[enabled]": "true",
        }
        for key, value in metadata.items():
            form[f"metadata[{key}]"] = str(value)

        data = await self._request("POST", "/payment_intents", data=form)
        return self._to_intent(data)

    async def retrieve_intent(self, intent_id: str) -> PaymentIntent:
        data = await self._request("GET", f"/payment_intents/{intent_id}")
        return self._to_intent(data)

    async def _request(self, method: str, path: str, **kwargs) -> dict:
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
                return response.json()
        except httpx.TimeoutException as e:
            logger.error(f"Payment gateway timed out on {method} {path} after {self.timeout}s")
            raise PaymentGatewayError(f"Payment gateway timed out: {e}") from e
        except httpx.HTTPStatusError as e:
            logger.error(f"Payment gateway answered {e.response.status_code} on {method} {path}")
            raise PaymentGatewayError(
                f"Payment gateway error {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Payment gateway unreachable on {method} {path}: {e}")
            raise PaymentGatewayError(f"Payment gateway unreachable: {e}") from e

    @staticmethod
    def _to_intent(data: dict) -> PaymentIntent:
        try:
            return PaymentIntent(
                id=data["id"],
                status=data["status"],
                client_secret=data.get("client_secret"),
                amount_cents=int(data["amount"]),
                metadata={k: str(v) for k, v in (data.get("metadata") or {}).items()},
            )
        except (KeyError, TypeError, ValueError) as e:
            raise PaymentGatewayError(f"Malformed payment intent response: {e}") from e
