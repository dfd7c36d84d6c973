"""
Integration tests for CapacityLedgerImpl

Concurrent registrations, each on its own session, race for the last units of
a ticket type. The conditional UPDATE must let exactly `quantity` through.
"""

import asyncio
from decimal import Decimal
from uuid import UUID

import pytest
from uuid_utils.compat import uuid7

from src.service.ticketing.app.command.register_attendee_use_case import RegisterAttendeeUseCase
from src.service.ticketing.app.service.payment_checkout_service import PaymentCheckoutService
from src.service.ticketing.app.service.ticket_state_machine import TicketStateMachine
from src.service.ticketing.domain.ticketing_error import SoldOutError, UnknownTicketTypeError
from test.service.ticketing.integration.conftest import (
    quantity_sold,
    seed_ticket_type,
    ticket_rows,
    with_uow,
)


async def _register(
    state_machine: TicketStateMachine,
    checkout: PaymentCheckoutService,
    ticket_type_id: UUID,
    email: str,
):
    return await with_uow(
        lambda uow: RegisterAttendeeUseCase(
            uow=uow, ticket_state_machine=state_machine, payment_checkout_service=checkout
        ).register(ticket_type_id=ticket_type_id, name='Attendee', email=email)
    )


@pytest.mark.integration
class TestCapacityLedger:
    @pytest.mark.asyncio
    async def test_concurrent_registrations_never_oversell(
        self,
        event_id: UUID,
        state_machine: TicketStateMachine,
        checkout: PaymentCheckoutService,
    ) -> None:
        # Arrange
        ticket_type_id = await seed_ticket_type(event_id=event_id, quantity=5)

        # Act
        results = await asyncio.gather(
            *(
                _register(state_machine, checkout, ticket_type_id, f'guest{i}@example.com')
                for i in range(12)
            ),
            return_exceptions=True,
        )

        # Assert
        sold_out = [r for r in results if isinstance(r, SoldOutError)]
        issued = [r for r in results if not isinstance(r, Exception)]
        assert len(issued) == 5
        assert len(sold_out) == 7
        assert await quantity_sold(ticket_type_id) == 5
        assert len(await ticket_rows(ticket_type_id)) == 5

    @pytest.mark.asyncio
    async def test_unlimited_ticket_type(
        self,
        event_id: UUID,
        state_machine: TicketStateMachine,
        checkout: PaymentCheckoutService,
    ) -> None:
        ticket_type_id = await seed_ticket_type(event_id=event_id, quantity=None)

        await asyncio.gather(
            *(
                _register(state_machine, checkout, ticket_type_id, f'guest{i}@example.com')
                for i in range(4)
            )
        )

        assert await quantity_sold(ticket_type_id) == 4

    @pytest.mark.asyncio
    async def test_sold_out_versus_unknown(self, event_id: UUID) -> None:
        ticket_type_id = await seed_ticket_type(event_id=event_id, quantity=0)

        with pytest.raises(SoldOutError):
            await with_uow(lambda uow: _reserve(uow, ticket_type_id))
        with pytest.raises(UnknownTicketTypeError):
            await with_uow(lambda uow: _reserve(uow, uuid7()))

    @pytest.mark.asyncio
    async def test_release_gives_capacity_back_and_stops_at_zero(self, event_id: UUID) -> None:
        # Arrange
        ticket_type_id = await seed_ticket_type(
            event_id=event_id, quantity=1, price=Decimal('49.99')
        )
        await with_uow(lambda uow: _reserve(uow, ticket_type_id))

        # Act
        await with_uow(lambda uow: _release(uow, ticket_type_id))
        await with_uow(lambda uow: _release(uow, ticket_type_id))

        # Assert
        assert await quantity_sold(ticket_type_id) == 0
        ticket_type = await with_uow(lambda uow: _reserve(uow, ticket_type_id))
        assert ticket_type.quantity_sold == 1

    @pytest.mark.asyncio
    async def test_rollback_keeps_capacity(self, event_id: UUID) -> None:
        ticket_type_id = await seed_ticket_type(event_id=event_id, quantity=1)

        async def reserve_then_abandon(uow) -> None:
            async with uow:
                await uow.capacity_ledger.reserve(ticket_type_id=ticket_type_id)

        await with_uow(reserve_then_abandon)

        assert await quantity_sold(ticket_type_id) == 0


async def _reserve(uow, ticket_type_id: UUID):
    async with uow:
        ticket_type = await uow.capacity_ledger.reserve(ticket_type_id=ticket_type_id)
        await uow.commit()
        return ticket_type


async def _release(uow, ticket_type_id: UUID) -> None:
    async with uow:
        await uow.capacity_ledger.release(ticket_type_id=ticket_type_id)
        await uow.commit()
