"""
Payment Gateway Interface

The payment provider is opaque to the ticketing core: it creates intents and
delivers signed webhooks.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.service.ticketing.domain.value_object.gateway_event import GatewayEvent
from src.service.ticketing.domain.value_object.payment_intent import PaymentIntent


class IPaymentGateway(ABC):
    @abstractmethod
    async def create_intent(
        self,
        *,
        amount_minor_units: int,
        currency: str,
        metadata: dict[str, str],
        idempotency_key: Optional[str] = None,
    ) -> PaymentIntent:
        """
        Create a payment intent

        Args:
            amount_minor_units: Amount in cents
            currency: ISO currency code
            metadata: Ids echoed back by the provider on webhooks
            idempotency_key: Same key returns the same intent on retry

        Returns:
            PaymentIntent with the client secret for client-side confirmation

        Raises:
            PaymentGatewayUnavailableError: transient failure, safe to retry
            PaymentGatewayError: the provider rejected the request
        """
        pass

    @abstractmethod
    async def retrieve_intent(self, *, intent_id: str) -> PaymentIntent:
        pass

    @abstractmethod
    def construct_event(self, *, payload: bytes, signature: Optional[str]) -> GatewayEvent:
        """
        Verify the signature over the raw body and parse the event

        Raises:
            InvalidSignatureError: missing or wrong signature
            InvalidWebhookPayloadError: body is not a valid event
        """
        pass
