from typing import Optional, Self, Union
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticketing_metrics import metrics
from src.service.ticketing.app.dto.registration_result import (
    FreeRegistrationResult,
    PaidRegistrationResult,
)
from src.service.ticketing.app.service.payment_checkout_service import PaymentCheckoutService
from src.service.ticketing.app.service.ticket_state_machine import TicketStateMachine
from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.domain.ticketing_error import (
    EventNotFoundError,
    PaymentGatewayError,
    PaymentGatewayUnavailableError,
    SoldOutError,
    UnknownTicketTypeError,
)


class RegisterAttendeeUseCase:
    """
    Register an attendee for a ticket type

    Flow:
    1. One transaction: resolve ticket type + event, find-or-create the
       attendee, reserve one unit of capacity, create the ticket
       - free ticket: issued immediately (QR code, email after commit)
       - paid ticket: pending
    2. Paid only, after commit: open a payment intent with the gateway and
       record the Transaction

    Capacity is taken exactly once, in step 1. If the gateway call fails the
    pending ticket keeps its reservation until the caller retries through
    `CreatePaymentIntentUseCase` or the pending-expiry job releases it.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        ticket_state_machine: TicketStateMachine,
        payment_checkout_service: PaymentCheckoutService,
    ) -> None:
        self.uow = uow
        self.ticket_state_machine = ticket_state_machine
        self.payment_checkout_service = payment_checkout_service

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(get_unit_of_work),
        ticket_state_machine: TicketStateMachine = Depends(
            Provide[Container.ticket_state_machine]
        ),
        payment_checkout_service: PaymentCheckoutService = Depends(
            Provide[Container.payment_checkout_service]
        ),
    ) -> Self:
        return cls(
            uow=uow,
            ticket_state_machine=ticket_state_machine,
            payment_checkout_service=payment_checkout_service,
        )

    @Logger.io
    async def register(
        self,
        *,
        ticket_type_id: UUID,
        name: str,
        email: str,
        phone: Optional[str] = None,
        company: Optional[str] = None,
        event_slug: Optional[str] = None,
    ) -> Union[FreeRegistrationResult, PaidRegistrationResult]:
        kind = 'unknown'
        try:
            async with self.uow:
                ticket_type = await self.uow.ticket_type_query_repo.get_by_id(
                    ticket_type_id=ticket_type_id
                )
                if ticket_type is None or not ticket_type.is_visible:
                    raise UnknownTicketTypeError(ticket_type_id=ticket_type_id)
                kind = 'paid' if ticket_type.requires_payment else 'free'

                event = await self.uow.event_query_repo.get_by_id(event_id=ticket_type.event_id)
                if event is None or event.status is not EventStatus.PUBLISHED:
                    raise EventNotFoundError()
                if event_slug is not None and event.slug != event_slug:
                    raise UnknownTicketTypeError(ticket_type_id=ticket_type_id)

                attendee = await self.uow.attendee_repo.get_or_create(
                    name=name, email=email, phone=phone, company=company
                )
                ticket_type = await self.uow.capacity_ledger.reserve(
                    ticket_type_id=ticket_type_id
                )

                if not ticket_type.requires_payment:
                    ticket = await self.ticket_state_machine.create_issued_directly(
                        uow=self.uow, ticket_type=ticket_type, attendee=attendee, event=event
                    )
                    await self.uow.commit()
                    metrics.record_registration(kind=kind, result='issued')
                    Logger.base.info(
                        f'🎟️ [Register] Free ticket {ticket.id} issued to {attendee.email}'
                    )
                    return FreeRegistrationResult(ticket=ticket, event=event)

                ticket = await self.ticket_state_machine.create_pending(
                    uow=self.uow, ticket_type=ticket_type, attendee=attendee
                )
                await self.uow.commit()
        except SoldOutError:
            metrics.record_registration(kind=kind, result='sold_out')
            raise

        # Gateway round trip happens with no transaction open
        try:
            intent = await self.payment_checkout_service.open_intent(
                uow=self.uow, ticket=ticket, ticket_type=ticket_type
            )
        except (PaymentGatewayUnavailableError, PaymentGatewayError):
            metrics.record_registration(kind=kind, result='gateway_error')
            raise

        metrics.record_registration(kind=kind, result='pending')
        Logger.base.info(f'💳 [Register] Paid ticket {ticket.id} pending payment')
        return PaidRegistrationResult(
            ticket_id=ticket.id,
            client_secret=intent.client_secret,
            amount=ticket_type.amount_minor_units,
            currency=ticket_type.currency,
            price=ticket_type.price,
        )
