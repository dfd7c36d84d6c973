import hashlib
import hmac
import time
from types import SimpleNamespace

import orjson
import pytest
import stripe
from pydantic import SecretStr

from src.platform.config.core_setting import Settings
from src.service.ticketing.domain.ticketing_error import (
    InvalidSignatureError,
    InvalidWebhookPayloadError,
    PaymentGatewayError,
    PaymentGatewayUnavailableError,
)
from src.service.ticketing.domain.value_object.gateway_event import GatewayEventType
from src.service.ticketing.driven_adapter.payment.mock_payment_gateway_impl import (
    MockPaymentGatewayImpl,
)
from src.service.ticketing.driven_adapter.payment.stripe_payment_gateway_impl import (
    StripePaymentGatewayImpl,
)


STRIPE_WEBHOOK_SECRET = 'whsec_test_secret'


def stripe_signature(payload: bytes, *, secret: str = STRIPE_WEBHOOK_SECRET) -> str:
    timestamp = int(time.time())
    signed = f'{timestamp}.'.encode() + payload
    digest = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f't={timestamp},v1={digest}'


@pytest.fixture
def stripe_gateway() -> StripePaymentGatewayImpl:
    return StripePaymentGatewayImpl(
        settings=Settings(
            STRIPE_SECRET_KEY=SecretStr('sk_test_dummy'),
            STRIPE_WEBHOOK_SECRET=SecretStr(STRIPE_WEBHOOK_SECRET),
        )
    )


def _stub_payment_intents(gateway: StripePaymentGatewayImpl, **methods) -> None:
    gateway._client = SimpleNamespace(  # type: ignore[assignment]
        v1=SimpleNamespace(payment_intents=SimpleNamespace(**methods)),
        construct_event=gateway._client.construct_event,
    )


@pytest.mark.unit
class TestMockPaymentGateway:
    @pytest.mark.asyncio
    async def test_idempotency_key_returns_same_intent(self, gateway: MockPaymentGatewayImpl) -> None:
        first = await gateway.create_intent(
            amount_minor_units=4999, currency='usd', metadata={}, idempotency_key='ticket-1'
        )
        second = await gateway.create_intent(
            amount_minor_units=4999, currency='usd', metadata={}, idempotency_key='ticket-1'
        )

        assert second == first
        assert first.intent_id.startswith('pi_dev_')
        assert first.client_secret.startswith(f'{first.intent_id}_secret_')

    @pytest.mark.asyncio
    async def test_retrieve_known_intent(self, gateway: MockPaymentGatewayImpl) -> None:
        intent = await gateway.create_intent(amount_minor_units=100, currency='usd', metadata={})

        assert await gateway.retrieve_intent(intent_id=intent.intent_id) == intent

    def test_signed_event_verifies(self, gateway: MockPaymentGatewayImpl) -> None:
        # Arrange
        payload = gateway.build_event(
            event_type=GatewayEventType.PAYMENT_SUCCEEDED,
            payment_intent_id='pi_test_1',
            metadata={'ticket_id': 't1'},
            event_id='evt_1',
        )

        # Act
        event = gateway.construct_event(payload=payload, signature=gateway.sign(payload))

        # Assert
        assert event.id == 'evt_1'
        assert event.type == 'payment_intent.succeeded'
        assert event.payment_intent_id == 'pi_test_1'
        assert event.data['metadata'] == {'ticket_id': 't1'}
        assert event.is_handled

    @pytest.mark.parametrize('signature', [None, '', 'bm90LWEtc2lnbmF0dXJl'])
    def test_bad_signature(self, gateway: MockPaymentGatewayImpl, signature) -> None:
        payload = gateway.build_event(event_type='charge.refunded', payment_intent_id='pi_1')

        with pytest.raises(InvalidSignatureError):
            gateway.construct_event(payload=payload, signature=signature)

    def test_tampered_body(self, gateway: MockPaymentGatewayImpl) -> None:
        payload = gateway.build_event(event_type='payment_intent.succeeded', payment_intent_id='pi_1')
        signature = gateway.sign(payload)

        with pytest.raises(InvalidSignatureError):
            gateway.construct_event(payload=payload.replace(b'pi_1', b'pi_2'), signature=signature)

    @pytest.mark.parametrize('payload', [b'not json', b'{"type": "x"}', b'[]'])
    def test_signed_garbage(self, gateway: MockPaymentGatewayImpl, payload: bytes) -> None:
        with pytest.raises(InvalidWebhookPayloadError):
            gateway.construct_event(payload=payload, signature=gateway.sign(payload))


@pytest.mark.unit
class TestStripePaymentGateway:
    @pytest.mark.asyncio
    async def test_create_intent_passes_idempotency_key(
        self, stripe_gateway: StripePaymentGatewayImpl
    ) -> None:
        # Arrange
        calls = []

        async def create_async(*, params, options):
            calls.append((params, options))
            return SimpleNamespace(
                id='pi_live_1', client_secret='pi_live_1_secret_x', status='requires_payment_method'
            )

        _stub_payment_intents(stripe_gateway, create_async=create_async)

        # Act
        intent = await stripe_gateway.create_intent(
            amount_minor_units=4999,
            currency='usd',
            metadata={'ticket_id': 't1'},
            idempotency_key='ticket-t1',
        )

        # Assert
        assert intent.intent_id == 'pi_live_1'
        assert intent.client_secret == 'pi_live_1_secret_x'
        params, options = calls[0]
        assert params['amount'] == 4999
        assert params['currency'] == 'usd'
        assert params['metadata'] == {'ticket_id': 't1'}
        assert options == {'idempotency_key': 'ticket-t1'}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'error, expected',
        [
            (stripe.APIConnectionError('connection reset'), PaymentGatewayUnavailableError),
            (stripe.RateLimitError('slow down'), PaymentGatewayUnavailableError),
            (stripe.InvalidRequestError('Invalid currency', 'currency'), PaymentGatewayError),
            (stripe.AuthenticationError('bad key'), PaymentGatewayError),
        ],
    )
    async def test_error_mapping(
        self, stripe_gateway: StripePaymentGatewayImpl, error: Exception, expected: type
    ) -> None:
        # Arrange
        async def create_async(**_):
            raise error

        _stub_payment_intents(stripe_gateway, create_async=create_async)

        # Act & Assert
        with pytest.raises(expected):
            await stripe_gateway.create_intent(amount_minor_units=100, currency='usd', metadata={})

    def test_construct_event_verifies_signature(
        self, stripe_gateway: StripePaymentGatewayImpl
    ) -> None:
        # Arrange
        payload = orjson.dumps(
            {
                'id': 'evt_live_1',
                'object': 'event',
                'type': 'payment_intent.payment_failed',
                'data': {'object': {'id': 'pi_live_1', 'object': 'payment_intent'}},
            }
        )

        # Act
        event = stripe_gateway.construct_event(payload=payload, signature=stripe_signature(payload))

        # Assert
        assert event.id == 'evt_live_1'
        assert event.type == GatewayEventType.PAYMENT_FAILED
        assert event.payment_intent_id == 'pi_live_1'

    def test_construct_event_rejects_wrong_secret(
        self, stripe_gateway: StripePaymentGatewayImpl
    ) -> None:
        payload = b'{"id": "evt_1", "object": "event", "type": "x", "data": {"object": {}}}'

        with pytest.raises(InvalidSignatureError):
            stripe_gateway.construct_event(
                payload=payload, signature=stripe_signature(payload, secret='whsec_other')
            )

    def test_construct_event_requires_header(
        self, stripe_gateway: StripePaymentGatewayImpl
    ) -> None:
        with pytest.raises(InvalidSignatureError):
            stripe_gateway.construct_event(payload=b'{}', signature=None)
