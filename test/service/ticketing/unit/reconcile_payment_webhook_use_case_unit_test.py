"""
Unit tests for ReconcilePaymentWebhookUseCase

signature -> already processed? -> transaction lookup -> apply -> record event
"""

import asyncio

import pytest

from src.service.ticketing.app.command.reconcile_payment_webhook_use_case import (
    ReconcilePaymentWebhookUseCase,
)
from src.service.ticketing.app.command.register_attendee_use_case import RegisterAttendeeUseCase
from src.service.ticketing.app.dto.registration_result import (
    FreeRegistrationResult,
    PaidRegistrationResult,
)
from src.service.ticketing.app.dto.webhook_outcome import WebhookOutcomeStatus
from src.service.ticketing.app.service.payment_checkout_service import PaymentCheckoutService
from src.service.ticketing.app.service.ticket_state_machine import TicketStateMachine
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.enum.transaction_status import TransactionStatus
from src.service.ticketing.domain.ticketing_error import (
    InvalidSignatureError,
    InvalidWebhookPayloadError,
    SoldOutError,
    TransactionNotFoundError,
)
from src.service.ticketing.domain.value_object.gateway_event import GatewayEventType
from src.service.ticketing.driven_adapter.notification.mock_notifier_impl import MockNotifierImpl
from src.service.ticketing.driven_adapter.payment.mock_payment_gateway_impl import (
    MockPaymentGatewayImpl,
)
from test.service.ticketing.fakes import TicketingStore


SUCCEEDED = GatewayEventType.PAYMENT_SUCCEEDED
FAILED = GatewayEventType.PAYMENT_FAILED


@pytest.fixture
def make_reconciler(new_uow, gateway: MockPaymentGatewayImpl, state_machine: TicketStateMachine):
    return lambda: ReconcilePaymentWebhookUseCase(
        uow=new_uow(), payment_gateway=gateway, ticket_state_machine=state_machine
    )


@pytest.fixture
def pending_paid_ticket(store: TicketingStore):
    event = store.add_event()
    ticket_type = store.add_paid_ticket_type(event=event, quantity=1)
    attendee = store.add_attendee()
    ticket = store.add_ticket(
        ticket_type=ticket_type, attendee=attendee, status=TicketStatus.PENDING
    )
    transaction = store.add_transaction(ticket=ticket, payment_intent_id='pi_test_1')
    return ticket_type, ticket, transaction


async def _deliver(make_reconciler, gateway: MockPaymentGatewayImpl, payload: bytes):
    return await make_reconciler().handle(payload=payload, signature=gateway.sign(payload))


@pytest.mark.unit
class TestWebhookSuccess:
    @pytest.mark.asyncio
    async def test_redelivered_success__issued_once_one_email(
        self,
        make_reconciler,
        gateway: MockPaymentGatewayImpl,
        store: TicketingStore,
        notifier: MockNotifierImpl,
        pending_paid_ticket,
    ) -> None:
        # Arrange
        ticket_type, ticket, transaction = pending_paid_ticket
        payload = gateway.build_event(
            event_type=SUCCEEDED, payment_intent_id='pi_test_1', event_id='evt_1'
        )

        # Act - first delivery plus three redeliveries
        outcomes = [await _deliver(make_reconciler, gateway, payload) for _ in range(4)]

        # Assert
        assert [o.status for o in outcomes] == [
            WebhookOutcomeStatus.APPLIED,
            WebhookOutcomeStatus.ALREADY_PROCESSED,
            WebhookOutcomeStatus.ALREADY_PROCESSED,
            WebhookOutcomeStatus.ALREADY_PROCESSED,
        ]
        assert outcomes[0].ticket_id == ticket.id
        assert store.tickets[ticket.id].status is TicketStatus.ISSUED
        assert store.tickets[ticket.id].qr_code
        assert store.transactions[transaction.id].status is TransactionStatus.COMPLETED
        assert len(notifier.sent_emails) == 1
        assert list(store.processed_events) == ['evt_1']
        # Capacity was taken at registration; success does not touch it
        assert store.sold(ticket_type.id) == 1

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_deliveries(
        self,
        make_reconciler,
        gateway: MockPaymentGatewayImpl,
        store: TicketingStore,
        notifier: MockNotifierImpl,
        pending_paid_ticket,
    ) -> None:
        _, ticket, _ = pending_paid_ticket
        payload = gateway.build_event(
            event_type=SUCCEEDED, payment_intent_id='pi_test_1', event_id='evt_1'
        )

        outcomes = await asyncio.gather(
            *(_deliver(make_reconciler, gateway, payload) for _ in range(3))
        )

        statuses = sorted(o.status.value for o in outcomes)
        assert statuses == ['already_processed', 'already_processed', 'applied']
        assert store.tickets[ticket.id].status is TicketStatus.ISSUED
        assert len(notifier.sent_emails) == 1

    @pytest.mark.asyncio
    async def test_distinct_events_same_intent__issued_once(
        self,
        make_reconciler,
        gateway: MockPaymentGatewayImpl,
        store: TicketingStore,
        notifier: MockNotifierImpl,
        pending_paid_ticket,
    ) -> None:
        _, ticket, _ = pending_paid_ticket

        for event_id in ('evt_a', 'evt_b'):
            payload = gateway.build_event(
                event_type=SUCCEEDED, payment_intent_id='pi_test_1', event_id=event_id
            )
            outcome = await _deliver(make_reconciler, gateway, payload)
            assert outcome.status is WebhookOutcomeStatus.APPLIED

        assert store.tickets[ticket.id].status is TicketStatus.ISSUED
        assert len(notifier.sent_emails) == 1
        assert set(store.processed_events) == {'evt_a', 'evt_b'}

    @pytest.mark.asyncio
    async def test_success_after_cancel__unfulfilled(
        self,
        make_reconciler,
        gateway: MockPaymentGatewayImpl,
        store: TicketingStore,
        notifier: MockNotifierImpl,
        pending_paid_ticket,
    ) -> None:
        # Arrange - the ticket expired and was cancelled while payment was in flight
        _, ticket, transaction = pending_paid_ticket
        store.tickets[ticket.id] = ticket.cancel(reason='payment_timeout')
        payload = gateway.build_event(event_type=SUCCEEDED, payment_intent_id='pi_test_1')

        # Act
        outcome = await _deliver(make_reconciler, gateway, payload)

        # Assert - acknowledged, nothing issued, recorded for manual refund
        assert outcome.status is WebhookOutcomeStatus.UNFULFILLED
        assert store.tickets[ticket.id].status is TicketStatus.CANCELLED
        assert store.transactions[transaction.id].status is TransactionStatus.FAILED
        assert notifier.sent_emails == []
        assert len(store.processed_events) == 1


@pytest.mark.unit
class TestWebhookFailure:
    @pytest.mark.asyncio
    async def test_failed_payment_frees_unit_for_next_registration(
        self,
        make_reconciler,
        gateway: MockPaymentGatewayImpl,
        store: TicketingStore,
        new_uow,
        state_machine: TicketStateMachine,
        checkout: PaymentCheckoutService,
        pending_paid_ticket,
    ) -> None:
        # Arrange - the only unit is held by the pending ticket
        ticket_type, ticket, transaction = pending_paid_ticket
        register = lambda: RegisterAttendeeUseCase(  # noqa: E731
            uow=new_uow(), ticket_state_machine=state_machine, payment_checkout_service=checkout
        ).register(ticket_type_id=ticket_type.id, name='B', email='b@x.io')
        with pytest.raises(SoldOutError):
            await register()

        # Act
        payload = gateway.build_event(event_type=FAILED, payment_intent_id='pi_test_1')
        outcome = await _deliver(make_reconciler, gateway, payload)

        # Assert
        assert outcome.status is WebhookOutcomeStatus.APPLIED
        assert store.tickets[ticket.id].status is TicketStatus.CANCELLED
        assert store.tickets[ticket.id].cancellation_reason == 'payment_failed'
        assert store.transactions[transaction.id].status is TransactionStatus.FAILED
        assert store.sold(ticket_type.id) == 0

        result = await register()
        assert isinstance(result, (FreeRegistrationResult, PaidRegistrationResult))
        assert store.sold(ticket_type.id) == 1

    @pytest.mark.asyncio
    async def test_redelivered_failure__released_once(
        self,
        make_reconciler,
        gateway: MockPaymentGatewayImpl,
        store: TicketingStore,
        pending_paid_ticket,
    ) -> None:
        ticket_type, _, _ = pending_paid_ticket
        store.add_ticket(
            ticket_type=ticket_type,
            attendee=store.add_attendee(email='other@x.io'),
            token='ticket_1735689600000_zzzzzzzzz',
        )
        assert store.sold(ticket_type.id) == 2
        payload = gateway.build_event(
            event_type=FAILED, payment_intent_id='pi_test_1', event_id='evt_f'
        )

        for _ in range(3):
            await _deliver(make_reconciler, gateway, payload)

        assert store.sold(ticket_type.id) == 1

    @pytest.mark.asyncio
    async def test_failure_after_success__ignored(
        self,
        make_reconciler,
        gateway: MockPaymentGatewayImpl,
        store: TicketingStore,
        pending_paid_ticket,
    ) -> None:
        # Arrange
        ticket_type, ticket, transaction = pending_paid_ticket
        await _deliver(
            make_reconciler,
            gateway,
            gateway.build_event(event_type=SUCCEEDED, payment_intent_id='pi_test_1'),
        )

        # Act - out of order failure for the same intent
        outcome = await _deliver(
            make_reconciler,
            gateway,
            gateway.build_event(event_type=FAILED, payment_intent_id='pi_test_1'),
        )

        # Assert
        assert outcome.status is WebhookOutcomeStatus.IGNORED
        assert store.tickets[ticket.id].status is TicketStatus.ISSUED
        assert store.transactions[transaction.id].status is TransactionStatus.COMPLETED
        assert store.sold(ticket_type.id) == 1
        assert len(store.processed_events) == 2



def _stale_first_read(repo, method_name: str, snapshot) -> None:
    """The first call returns a snapshot taken before a concurrent commit, as READ COMMITTED can"""
    read_committed = getattr(repo, method_name)
    served = []

    async def read(**kwargs):
        if not served:
            served.append(snapshot)
            return snapshot
        return await read_committed(**kwargs)

    setattr(repo, method_name, read)


@pytest.mark.unit
class TestWebhookCrossedEvents:
    @pytest.mark.asyncio
    async def test_failure_read_pending_before_success_committed__ignored(
        self,
        make_reconciler,
        new_uow,
        gateway: MockPaymentGatewayImpl,
        state_machine: TicketStateMachine,
        store: TicketingStore,
        pending_paid_ticket,
    ) -> None:
        # Arrange - the failure delivery read the transaction just before the success committed
        ticket_type, ticket, transaction = pending_paid_ticket
        await _deliver(
            make_reconciler,
            gateway,
            gateway.build_event(
                event_type=SUCCEEDED, payment_intent_id='pi_test_1', event_id='evt_s'
            ),
        )
        uow = new_uow()
        _stale_first_read(uow.transaction_repo, 'get_by_payment_intent_id', transaction)
        payload = gateway.build_event(
            event_type=FAILED, payment_intent_id='pi_test_1', event_id='evt_f'
        )

        # Act
        outcome = await ReconcilePaymentWebhookUseCase(
            uow=uow, payment_gateway=gateway, ticket_state_machine=state_machine
        ).handle(payload=payload, signature=gateway.sign(payload))

        # Assert
        assert outcome.status is WebhookOutcomeStatus.IGNORED
        assert store.transactions[transaction.id].status is TransactionStatus.COMPLETED
        assert store.tickets[ticket.id].status is TicketStatus.ISSUED
        assert store.tickets[ticket.id].capacity_held is True
        assert store.sold(ticket_type.id) == 1
        assert set(store.processed_events) == {'evt_s', 'evt_f'}

    @pytest.mark.asyncio
    async def test_success_read_pending_before_failure_committed__unfulfilled(
        self,
        make_reconciler,
        new_uow,
        gateway: MockPaymentGatewayImpl,
        state_machine: TicketStateMachine,
        store: TicketingStore,
        notifier: MockNotifierImpl,
        pending_paid_ticket,
    ) -> None:
        # Arrange - the success delivery read ticket and transaction before the failure committed
        ticket_type, ticket, transaction = pending_paid_ticket
        await _deliver(
            make_reconciler,
            gateway,
            gateway.build_event(event_type=FAILED, payment_intent_id='pi_test_1', event_id='evt_f'),
        )
        uow = new_uow()
        _stale_first_read(uow.transaction_repo, 'get_by_payment_intent_id', transaction)
        _stale_first_read(uow.ticket_command_repo, 'get_by_id', ticket)
        payload = gateway.build_event(
            event_type=SUCCEEDED, payment_intent_id='pi_test_1', event_id='evt_s'
        )

        # Act
        outcome = await ReconcilePaymentWebhookUseCase(
            uow=uow, payment_gateway=gateway, ticket_state_machine=state_machine
        ).handle(payload=payload, signature=gateway.sign(payload))

        # Assert
        assert outcome.status is WebhookOutcomeStatus.UNFULFILLED
        assert store.transactions[transaction.id].status is TransactionStatus.FAILED
        assert store.tickets[ticket.id].status is TicketStatus.CANCELLED
        assert store.tickets[ticket.id].cancellation_reason == 'payment_failed'
        assert store.sold(ticket_type.id) == 0
        assert notifier.sent_emails == []
        assert set(store.processed_events) == {'evt_f', 'evt_s'}



@pytest.mark.unit
class TestWebhookRejections:
    @pytest.mark.asyncio
    async def test_bad_signature__nothing_changes(
        self,
        make_reconciler,
        gateway: MockPaymentGatewayImpl,
        store: TicketingStore,
        pending_paid_ticket,
    ) -> None:
        _, ticket, _ = pending_paid_ticket
        payload = gateway.build_event(event_type=SUCCEEDED, payment_intent_id='pi_test_1')

        with pytest.raises(InvalidSignatureError) as exc_info:
            await make_reconciler().handle(payload=payload, signature='bm9wZQ==')

        assert exc_info.value.status_code == 400
        assert store.tickets[ticket.id].status is TicketStatus.PENDING
        assert store.processed_events == {}

    @pytest.mark.asyncio
    async def test_missing_signature(self, make_reconciler, gateway: MockPaymentGatewayImpl) -> None:
        payload = gateway.build_event(event_type=SUCCEEDED, payment_intent_id='pi_test_1')

        with pytest.raises(InvalidSignatureError):
            await make_reconciler().handle(payload=payload, signature=None)

    @pytest.mark.asyncio
    async def test_signed_garbage__invalid_payload(
        self, make_reconciler, gateway: MockPaymentGatewayImpl
    ) -> None:
        payload = b'{"not": "an event"'

        with pytest.raises(InvalidWebhookPayloadError):
            await make_reconciler().handle(payload=payload, signature=gateway.sign(payload))

    @pytest.mark.asyncio
    async def test_unknown_event_type__ignored_not_recorded(
        self, make_reconciler, gateway: MockPaymentGatewayImpl, store: TicketingStore
    ) -> None:
        payload = gateway.build_event(event_type='charge.refunded', payment_intent_id='pi_x')

        outcome = await _deliver(make_reconciler, gateway, payload)

        assert outcome.status is WebhookOutcomeStatus.IGNORED
        assert store.processed_events == {}

    @pytest.mark.asyncio
    async def test_unknown_intent__integrity_error_not_recorded(
        self, make_reconciler, gateway: MockPaymentGatewayImpl, store: TicketingStore
    ) -> None:
        payload = gateway.build_event(
            event_type=SUCCEEDED, payment_intent_id='pi_nobody', event_id='evt_orphan'
        )

        with pytest.raises(TransactionNotFoundError) as exc_info:
            await _deliver(make_reconciler, gateway, payload)

        # 5xx so the provider redelivers once the data is fixed
        assert exc_info.value.status_code == 500
        assert store.processed_events == {}
