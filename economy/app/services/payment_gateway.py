"""Payment Gateway Interface

The payment processor is an opaque collaborator with a create-intent /
retrieve-intent contract. Nothing in the engine depends on a specific
processor protocol.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional
from pydantic import BaseModel, Field


class PaymentIntentStatus:
    SUCCEEDED = "succeeded"
    PROCESSING = "processing"
    REQUIRES_ACTION = "requires_action"
    REQUIRES_CONFIRMATION = "requires_confirmation"
    REQUIRES_CAPTURE = "requires_capture"
    REQUIRES_PAYMENT_METHOD = "requires_payment_method"
    CANCELED = "canceled"
    FAILED = "failed"


# The payment will never succeed; the purchase can be closed as FAILED
TERMINAL_FAILURE_STATUSES = frozenset({
    PaymentIntentStatus.CANCELED,
    PaymentIntentStatus.REQUIRES_PAYMENT_METHOD,
    PaymentIntentStatus.FAILED,
})

# The payment may still succeed; the purchase stays CREATED
IN_FLIGHT_STATUSES = frozenset({
    PaymentIntentStatus.PROCESSING,
    PaymentIntentStatus.REQUIRES_ACTION,
    PaymentIntentStatus.REQUIRES_CONFIRMATION,
    PaymentIntentStatus.REQUIRES_CAPTURE,
})


class PaymentIntent(BaseModel):
    id: str = Field(..., description="Opaque intent reference")
    status: str = Field(..., description="Processor status string")
    client_secret: Optional[str] = Field(None, description="Secret handed to the client to complete payment")
    amount_cents: int = Field(..., description="Amount in minor currency units")
    metadata: Dict[str, str] = Field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status == PaymentIntentStatus.SUCCEEDED


class PaymentGatewayError(Exception):
    """Processor unreachable, timed out or answered with a server error"""
    pass


class PaymentGateway(ABC):

    @abstractmethod
    async def create_intent(
        self,
        amount_cents: int,
        currency: str,
        metadata: Dict[str, str],
    ) -> PaymentIntent:
        """
        Create a payment intent for a purchase

        Args:
            amount_cents: Price in minor currency units
            currency: ISO 4217 code
            metadata: Correlation data stored with the intent

        Returns:
            The created PaymentIntent

        Raises:
            PaymentGatewayError: The processor could not be reached
        """
        pass

    @abstractmethod
    async def retrieve_intent(self, intent_id: str) -> PaymentIntent:
        """
        Fetch the current state of an intent

        Raises:
            PaymentGatewayError: The processor could not be reached
        """
        pass
