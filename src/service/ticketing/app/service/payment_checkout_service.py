from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_payment_gateway import IPaymentGateway
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.entity.ticket_type_entity import TicketType
from src.service.ticketing.domain.entity.transaction_entity import Transaction
from src.service.ticketing.domain.ticketing_error import (
    PaymentGatewayError,
    PaymentGatewayUnavailableError,
)
from src.service.ticketing.domain.value_object.payment_intent import PaymentIntent


class PaymentCheckoutService:
    """
    Opens a payment intent for a pending ticket and records its Transaction.

    Must be called with no database transaction open: the gateway round trip
    is never held inside one. When the gateway fails the ticket stays pending
    without a Transaction, and the caller may retry later.
    """

    def __init__(self, *, payment_gateway: IPaymentGateway) -> None:
        self.payment_gateway = payment_gateway

    @Logger.io
    async def open_intent(
        self, *, uow: AbstractUnitOfWork, ticket: Ticket, ticket_type: TicketType
    ) -> PaymentIntent:
        try:
            intent = await self.payment_gateway.create_intent(
                amount_minor_units=ticket_type.amount_minor_units,
                currency=ticket_type.currency.lower(),
                metadata={
                    'ticket_id': str(ticket.id),
                    'event_id': str(ticket.event_id),
                    'attendee_id': str(ticket.attendee_id),
                },
                idempotency_key=f'ticket-{ticket.id}',
            )
        except PaymentGatewayUnavailableError as e:
            raise PaymentGatewayUnavailableError(e.message, ticket_id=ticket.id) from e
        except PaymentGatewayError as e:
            raise PaymentGatewayError(e.message, ticket_id=ticket.id) from e

        async with uow:
            await uow.transaction_repo.create(
                transaction=Transaction.create_pending(
                    ticket_id=ticket.id,
                    amount=ticket_type.price,
                    currency=ticket_type.currency,
                    payment_intent_id=intent.intent_id,
                )
            )
            await uow.commit()

        Logger.base.info(f'💳 [Checkout] Intent {intent.intent_id} opened for ticket {ticket.id}')
        return intent
