from decimal import Decimal

import pytest
from uuid_utils.compat import uuid7

from src.service.ticketing.app.command.create_payment_intent_use_case import (
    CreatePaymentIntentUseCase,
)
from src.service.ticketing.app.service.payment_checkout_service import PaymentCheckoutService
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.ticketing_error import TicketNotFoundError, TicketNotPayableError
from src.service.ticketing.driven_adapter.payment.mock_payment_gateway_impl import (
    MockPaymentGatewayImpl,
)
from test.service.ticketing.fakes import TicketingStore


@pytest.fixture
def make_use_case(new_uow, gateway: MockPaymentGatewayImpl, checkout: PaymentCheckoutService):
    return lambda: CreatePaymentIntentUseCase(
        uow=new_uow(), payment_gateway=gateway, payment_checkout_service=checkout
    )


@pytest.fixture
def pending_ticket(store: TicketingStore):
    ticket_type = store.add_paid_ticket_type(event=store.add_event())
    return store.add_ticket(
        ticket_type=ticket_type, attendee=store.add_attendee(), status=TicketStatus.PENDING
    )


@pytest.mark.unit
class TestCreatePaymentIntent:
    @pytest.mark.asyncio
    async def test_opens_intent_when_registration_could_not(
        self, make_use_case, store: TicketingStore, pending_ticket
    ) -> None:
        # Act
        result = await make_use_case().create_for_ticket(ticket_id=pending_ticket.id)

        # Assert
        transaction = store.transaction_for(pending_ticket.id)
        assert transaction is not None
        assert result.client_secret.startswith(f'{transaction.payment_intent_id}_secret_')
        assert result.amount == 4999
        assert result.price == Decimal('49.99')
        assert result.currency == 'USD'

    @pytest.mark.asyncio
    async def test_existing_intent_reused(
        self, make_use_case, store: TicketingStore, pending_ticket
    ) -> None:
        # Arrange
        first = await make_use_case().create_for_ticket(ticket_id=pending_ticket.id)

        # Act
        second = await make_use_case().create_for_ticket(ticket_id=pending_ticket.id)

        # Assert
        assert second.client_secret == first.client_secret
        assert len(store.transactions) == 1

    @pytest.mark.asyncio
    async def test_issued_ticket_not_payable(
        self, make_use_case, store: TicketingStore, pending_ticket
    ) -> None:
        # Arrange
        store.tickets[pending_ticket.id] = pending_ticket.issue(qr_code='data:image/png;base64,x')

        # Act & Assert
        with pytest.raises(TicketNotPayableError):
            await make_use_case().create_for_ticket(ticket_id=pending_ticket.id)

    @pytest.mark.asyncio
    async def test_free_ticket_not_payable(self, make_use_case, store: TicketingStore) -> None:
        # Arrange
        ticket_type = store.add_ticket_type(event=store.add_event())
        ticket = store.add_ticket(
            ticket_type=ticket_type, attendee=store.add_attendee(), status=TicketStatus.PENDING
        )

        # Act & Assert
        with pytest.raises(TicketNotPayableError):
            await make_use_case().create_for_ticket(ticket_id=ticket.id)

    @pytest.mark.asyncio
    async def test_unknown_ticket(self, make_use_case) -> None:
        with pytest.raises(TicketNotFoundError):
            await make_use_case().create_for_ticket(ticket_id=uuid7())
