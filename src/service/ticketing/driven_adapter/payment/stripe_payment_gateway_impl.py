"""
Stripe Payment Gateway

PaymentIntents API over the async httpx transport, webhook signature check
with `Webhook.construct_event` (the `stripe-signature` header over the raw
body).
"""

from typing import Any, Optional

import orjson
import stripe

from src.platform.config.core_setting import Settings
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_payment_gateway import IPaymentGateway
from src.service.ticketing.domain.ticketing_error import (
    InvalidSignatureError,
    InvalidWebhookPayloadError,
    PaymentGatewayError,
    PaymentGatewayUnavailableError,
)
from src.service.ticketing.domain.value_object.gateway_event import GatewayEvent
from src.service.ticketing.domain.value_object.payment_intent import PaymentIntent


# Network trouble and 5xx/429 from Stripe; safe to retry with the same idempotency key
_TRANSIENT_ERRORS = (stripe.APIConnectionError, stripe.RateLimitError, stripe.APIError)


class StripePaymentGatewayImpl(IPaymentGateway):
    def __init__(self, *, settings: Settings) -> None:
        self._webhook_secret = settings.STRIPE_WEBHOOK_SECRET.get_secret_value()
        self._client = stripe.StripeClient(
            settings.STRIPE_SECRET_KEY.get_secret_value(),
            http_client=stripe.HTTPXClient(),
            max_network_retries=2,
        )

    @Logger.io
    async def create_intent(
        self,
        *,
        amount_minor_units: int,
        currency: str,
        metadata: dict[str, str],
        idempotency_key: Optional[str] = None,
    ) -> PaymentIntent:
        options: dict[str, Any] = {}
        if idempotency_key:
            options['idempotency_key'] = idempotency_key
        try:
            intent = await self._client.v1.payment_intents.create_async(
                params={
                    'amount': amount_minor_units,
                    'currency': currency,
                    'metadata': metadata,
                    'automatic_payment_methods': {'enabled': True},
                },
                options=options,  # type: ignore[arg-type]
            )
        except _TRANSIENT_ERRORS as e:
            raise PaymentGatewayUnavailableError(f'Stripe unavailable: {e.user_message or e}') from e
        except stripe.StripeError as e:
            raise PaymentGatewayError(f'Stripe rejected the intent: {e.user_message or e}') from e

        return PaymentIntent(
            intent_id=intent.id,
            client_secret=intent.client_secret or '',
            status=intent.status,
        )

    @Logger.io
    async def retrieve_intent(self, *, intent_id: str) -> PaymentIntent:
        try:
            intent = await self._client.v1.payment_intents.retrieve_async(intent_id)
        except _TRANSIENT_ERRORS as e:
            raise PaymentGatewayUnavailableError(f'Stripe unavailable: {e.user_message or e}') from e
        except stripe.StripeError as e:
            raise PaymentGatewayError(f'Stripe rejected the lookup: {e.user_message or e}') from e

        return PaymentIntent(
            intent_id=intent.id,
            client_secret=intent.client_secret or '',
            status=intent.status,
        )

    def construct_event(self, *, payload: bytes, signature: Optional[str]) -> GatewayEvent:
        if not signature:
            raise InvalidSignatureError('Missing stripe-signature header')
        try:
            event = self._client.construct_event(payload, signature, self._webhook_secret)
        except stripe.SignatureVerificationError as e:
            raise InvalidSignatureError() from e
        except ValueError as e:
            raise InvalidWebhookPayloadError() from e

        # Signature verified above; read the plain JSON rather than the SDK object
        obj: dict[str, Any] = orjson.loads(payload).get('data', {}).get('object', {})
        return GatewayEvent(
            id=event.id,
            type=event.type,
            payment_intent_id=obj.get('id') if obj.get('object') == 'payment_intent' else None,
            data=obj,
        )
