"""
Mock Payment Gateway

Local stand-in for the payment provider, used in development and tests.
Intents are made up on the spot; webhook bodies are Stripe-shaped JSON
signed with base64 HMAC-SHA256 under MOCK_WEBHOOK_SECRET.
"""

import base64
import hashlib
import hmac
import secrets
import time
from typing import Any, Optional

import orjson
from uuid_utils.compat import uuid7

from src.platform.config.core_setting import Settings
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_payment_gateway import IPaymentGateway
from src.service.ticketing.domain.ticketing_error import (
    InvalidSignatureError,
    InvalidWebhookPayloadError,
)
from src.service.ticketing.domain.value_object.gateway_event import GatewayEvent
from src.service.ticketing.domain.value_object.payment_intent import PaymentIntent


class MockPaymentGatewayImpl(IPaymentGateway):
    def __init__(self, *, settings: Settings) -> None:
        self._secret = settings.MOCK_WEBHOOK_SECRET.get_secret_value().encode()
        # idempotency key -> intent, so a retried create returns the same intent
        self._intents_by_key: dict[str, PaymentIntent] = {}
        self._intents: dict[str, PaymentIntent] = {}

    @Logger.io
    async def create_intent(
        self,
        *,
        amount_minor_units: int,
        currency: str,
        metadata: dict[str, str],
        idempotency_key: Optional[str] = None,
    ) -> PaymentIntent:
        if idempotency_key and idempotency_key in self._intents_by_key:
            return self._intents_by_key[idempotency_key]

        intent_id = f'pi_dev_{uuid7().hex}'
        intent = PaymentIntent(
            intent_id=intent_id,
            client_secret=f'{intent_id}_secret_{secrets.token_urlsafe(12)}',
            status='requires_payment_method',
        )
        self._intents[intent_id] = intent
        if idempotency_key:
            self._intents_by_key[idempotency_key] = intent
        Logger.base.info(
            f'💳 [MockPay] Intent {intent_id} for {amount_minor_units} {currency} {metadata}'
        )
        return intent

    @Logger.io
    async def retrieve_intent(self, *, intent_id: str) -> PaymentIntent:
        # Intents created before a restart are not remembered; hand out a fresh secret
        return self._intents.get(intent_id) or PaymentIntent(
            intent_id=intent_id,
            client_secret=f'{intent_id}_secret_{secrets.token_urlsafe(12)}',
            status='requires_payment_method',
        )

    def sign(self, payload: bytes) -> str:
        mac = hmac.new(self._secret, payload, hashlib.sha256).digest()
        return base64.b64encode(mac).decode()

    def build_event(
        self,
        *,
        event_type: str,
        payment_intent_id: str,
        metadata: Optional[dict[str, str]] = None,
        event_id: Optional[str] = None,
    ) -> bytes:
        """Stripe-shaped event body, ready to be signed with `sign`."""
        body = {
            'id': event_id or f'evt_dev_{uuid7().hex}',
            'object': 'event',
            'type': event_type,
            'created': int(time.time()),
            'data': {
                'object': {
                    'id': payment_intent_id,
                    'object': 'payment_intent',
                    'metadata': metadata or {},
                }
            },
        }
        return orjson.dumps(body)

    def construct_event(self, *, payload: bytes, signature: Optional[str]) -> GatewayEvent:
        if not signature or not hmac.compare_digest(self.sign(payload), signature):
            raise InvalidSignatureError()

        try:
            body: dict[str, Any] = orjson.loads(payload)
            obj: dict[str, Any] = body.get('data', {}).get('object', {})
            return GatewayEvent(
                id=body['id'],
                type=body['type'],
                payment_intent_id=obj.get('id') if obj.get('object') == 'payment_intent' else None,
                data=obj,
            )
        except (orjson.JSONDecodeError, KeyError, AttributeError, TypeError) as e:
            raise InvalidWebhookPayloadError() from e
