"""
Simulate Payment Use Case (development only)

Plays the payment provider for a pending ticket: builds a signed
`payment_intent.succeeded` or `payment_intent.payment_failed` event and feeds
it through the same reconciler the real webhook endpoint uses.
"""

from typing import Literal, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.reconcile_payment_webhook_use_case import (
    ReconcilePaymentWebhookUseCase,
)
from src.service.ticketing.app.dto.webhook_outcome import WebhookOutcome
from src.service.ticketing.app.service.payment_checkout_service import PaymentCheckoutService
from src.service.ticketing.app.service.ticket_state_machine import TicketStateMachine
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.ticketing_error import (
    TicketNotFoundError,
    TicketNotPayableError,
    UnknownTicketTypeError,
)
from src.service.ticketing.domain.value_object.gateway_event import GatewayEventType
from src.service.ticketing.driven_adapter.payment.mock_payment_gateway_impl import (
    MockPaymentGatewayImpl,
)


SimulatedResult = Literal['success', 'failure']


class SimulatePaymentUseCase:
    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        mock_payment_gateway: MockPaymentGatewayImpl,
        payment_checkout_service: PaymentCheckoutService,
        reconciler: ReconcilePaymentWebhookUseCase,
    ) -> None:
        self.uow = uow
        self.mock_payment_gateway = mock_payment_gateway
        self.payment_checkout_service = payment_checkout_service
        self.reconciler = reconciler

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(get_unit_of_work),
        mock_payment_gateway: MockPaymentGatewayImpl = Depends(
            Provide[Container.mock_payment_gateway]
        ),
        payment_checkout_service: PaymentCheckoutService = Depends(
            Provide[Container.payment_checkout_service]
        ),
        ticket_state_machine: TicketStateMachine = Depends(
            Provide[Container.ticket_state_machine]
        ),
    ) -> Self:
        return cls(
            uow=uow,
            mock_payment_gateway=mock_payment_gateway,
            payment_checkout_service=payment_checkout_service,
            reconciler=ReconcilePaymentWebhookUseCase(
                uow=uow,
                payment_gateway=mock_payment_gateway,
                ticket_state_machine=ticket_state_machine,
            ),
        )

    @Logger.io
    async def simulate(self, *, ticket_id: UUID, result: SimulatedResult) -> WebhookOutcome:
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
            transaction = await self.uow.transaction_repo.get_by_ticket_id(ticket_id=ticket_id)

        if transaction is not None and transaction.payment_intent_id:
            intent_id = transaction.payment_intent_id
        else:
            intent = await self.payment_checkout_service.open_intent(
                uow=self.uow, ticket=ticket, ticket_type=ticket_type
            )
            intent_id = intent.intent_id

        payload = self.mock_payment_gateway.build_event(
            event_type=(
                GatewayEventType.PAYMENT_SUCCEEDED
                if result == 'success'
                else GatewayEventType.PAYMENT_FAILED
            ),
            payment_intent_id=intent_id,
            metadata={'ticket_id': str(ticket.id), 'event_id': str(ticket.event_id)},
        )
        Logger.base.info(f'🧪 [DevPay] Simulating {result} for ticket {ticket_id} ({intent_id})')
        return await self.reconciler.handle(
            payload=payload, signature=self.mock_payment_gateway.sign(payload)
        )
