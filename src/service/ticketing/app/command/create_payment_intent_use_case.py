from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.dto.registration_result import PaidRegistrationResult
from src.service.ticketing.app.interface.i_payment_gateway import IPaymentGateway
from src.service.ticketing.app.service.payment_checkout_service import PaymentCheckoutService
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.ticketing_error import (
    TicketNotFoundError,
    TicketNotPayableError,
    UnknownTicketTypeError,
)


class CreatePaymentIntentUseCase:
    """
    Payment-intent retry for a ticket still awaiting payment

    Returns the existing intent's client secret when a Transaction already
    exists, otherwise opens the intent that a transient gateway failure
    prevented at registration time.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        payment_gateway: IPaymentGateway,
        payment_checkout_service: PaymentCheckoutService,
    ) -> None:
        self.uow = uow
        self.payment_gateway = payment_gateway
        self.payment_checkout_service = payment_checkout_service

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(get_unit_of_work),
        payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
        payment_checkout_service: PaymentCheckoutService = Depends(
            Provide[Container.payment_checkout_service]
        ),
    ) -> Self:
        return cls(
            uow=uow,
            payment_gateway=payment_gateway,
            payment_checkout_service=payment_checkout_service,
        )

    @Logger.io
    async def create_for_ticket(self, *, ticket_id: UUID) -> PaidRegistrationResult:
        async with self.uow:
            ticket = await self.uow.ticket_command_repo.get_by_id(ticket_id=ticket_id)
            if ticket is None:
                raise TicketNotFoundError()
            if ticket.status is not TicketStatus.PENDING:
                raise TicketNotPayableError(
                    'Only pending tickets can be paid',
                    ticket_id=ticket_id,
                    status=ticket.status.value,
                )

            ticket_type = await self.uow.ticket_type_query_repo.get_by_id(
                ticket_type_id=ticket.ticket_type_id
            )
            if ticket_type is None:
                raise UnknownTicketTypeError(ticket_type_id=ticket.ticket_type_id)
            if not ticket_type.requires_payment:
                raise TicketNotPayableError(
                    'Ticket type is free', ticket_id=ticket_id, status=ticket.status.value
                )

            transaction = await self.uow.transaction_repo.get_by_ticket_id(ticket_id=ticket_id)

        if transaction is not None and transaction.payment_intent_id:
            intent = await self.payment_gateway.retrieve_intent(
                intent_id=transaction.payment_intent_id
            )
        else:
            intent = await self.payment_checkout_service.open_intent(
                uow=self.uow, ticket=ticket, ticket_type=ticket_type
            )

        return PaidRegistrationResult(
            ticket_id=ticket.id,
            client_secret=intent.client_secret,
            amount=ticket_type.amount_minor_units,
            currency=ticket_type.currency,
            price=ticket_type.price,
        )
