"""
Reconcile Payment Webhook Use Case

Turns a signed payment provider event into ticket state, at most once per
provider event id:

    signature ──▶ already processed? ──▶ transaction lookup ──▶ apply ──▶ record event ──▶ commit

Steps after the signature check run in one unit of work. The processed-event
marker is written last; if a concurrent delivery recorded it first the whole
unit of work is rolled back and the delivery is reported as already processed.
"""

from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import CustomBaseError, IntegrityViolationError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticketing_metrics import metrics
from src.service.ticketing.app.dto.webhook_outcome import WebhookOutcome, WebhookOutcomeStatus
from src.service.ticketing.app.interface.i_payment_gateway import IPaymentGateway
from src.service.ticketing.app.service.ticket_state_machine import TicketStateMachine
from src.service.ticketing.domain.entity.processed_webhook_event_entity import (
    ProcessedWebhookEvent,
)
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.entity.transaction_entity import Transaction
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.enum.transaction_status import TransactionStatus
from src.service.ticketing.domain.ticketing_error import TransactionNotFoundError
from src.service.ticketing.domain.value_object.gateway_event import GatewayEvent, GatewayEventType


class ReconcilePaymentWebhookUseCase:
    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        payment_gateway: IPaymentGateway,
        ticket_state_machine: TicketStateMachine,
    ) -> None:
        self.uow = uow
        self.payment_gateway = payment_gateway
        self.ticket_state_machine = ticket_state_machine

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(get_unit_of_work),
        payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
        ticket_state_machine: TicketStateMachine = Depends(
            Provide[Container.ticket_state_machine]
        ),
    ) -> Self:
        return cls(
            uow=uow,
            payment_gateway=payment_gateway,
            ticket_state_machine=ticket_state_machine,
        )

    @Logger.io
    async def handle(self, *, payload: bytes, signature: Optional[str]) -> WebhookOutcome:
        event = self.payment_gateway.construct_event(payload=payload, signature=signature)

        if not event.is_handled:
            Logger.base.info(f'🪝 [Webhook] Ignoring unhandled event type {event.type} ({event.id})')
            return self._finish(event=event, status=WebhookOutcomeStatus.IGNORED)

        try:
            return await self._reconcile(event=event)
        except CustomBaseError as e:
            metrics.record_webhook(event_type=event.type, outcome=e.code)
            raise

    async def _reconcile(self, *, event: GatewayEvent) -> WebhookOutcome:
        async with self.uow:
            if await self.uow.processed_webhook_event_repo.exists(provider_event_id=event.id):
                return self._finish(event=event, status=WebhookOutcomeStatus.ALREADY_PROCESSED)

            transaction = None
            if event.payment_intent_id:
                transaction = await self.uow.transaction_repo.get_by_payment_intent_id(
                    payment_intent_id=event.payment_intent_id
                )
            if transaction is None:
                raise TransactionNotFoundError(
                    payment_intent_id=event.payment_intent_id, event_id=event.id
                )

            if event.type == GatewayEventType.PAYMENT_SUCCEEDED:
                status = await self._apply_success(transaction=transaction, event=event)
            else:
                status = await self._apply_failure(transaction=transaction, event=event)

            recorded = await self.uow.processed_webhook_event_repo.add(
                event=ProcessedWebhookEvent(provider_event_id=event.id, event_type=event.type)
            )
            if not recorded:
                await self.uow.rollback()
                return self._finish(
                    event=event,
                    status=WebhookOutcomeStatus.ALREADY_PROCESSED,
                    ticket_id=transaction.ticket_id,
                )

            await self.uow.commit()

        return self._finish(event=event, status=status, ticket_id=transaction.ticket_id)

    async def _apply_success(
        self, *, transaction: Transaction, event: GatewayEvent
    ) -> WebhookOutcomeStatus:
        ticket = await self._load_ticket(transaction)

        if ticket.status is not TicketStatus.CANCELLED and (
            transaction.status is TransactionStatus.PENDING
        ):
            if await self._save(transaction.complete()) is None:
                # A concurrent failure or expiry won and cancelled the ticket in its commit
                transaction = await self._reload(transaction)
                ticket = await self._load_ticket(transaction)

        if ticket.status is TicketStatus.CANCELLED or (
            transaction.status is TransactionStatus.FAILED
        ):
            # Money captured for a ticket that no longer holds capacity: refund by hand
            Logger.base.critical(
                f'💸 [Webhook] Unfulfilled payment {transaction.payment_intent_id}: '
                f'ticket {ticket.id} already cancelled ({ticket.cancellation_reason}), event {event.id}'
            )
            if transaction.status is TransactionStatus.PENDING:
                await self._save(transaction.fail())
            return WebhookOutcomeStatus.UNFULFILLED

        await self.ticket_state_machine.mark_issued(uow=self.uow, ticket_id=ticket.id)
        return WebhookOutcomeStatus.APPLIED

    async def _apply_failure(
        self, *, transaction: Transaction, event: GatewayEvent
    ) -> WebhookOutcomeStatus:
        if transaction.status is TransactionStatus.PENDING:
            if await self._save(transaction.fail()) is None:
                transaction = await self._reload(transaction)

        if transaction.status is TransactionStatus.COMPLETED:
            Logger.base.warning(
                f'🔀 [Webhook] payment_failed {event.id} arrived after payment succeeded for '
                f'{transaction.payment_intent_id}, ignored'
            )
            return WebhookOutcomeStatus.IGNORED

        await self.ticket_state_machine.mark_cancelled(
            uow=self.uow, ticket_id=transaction.ticket_id, reason='payment_failed'
        )
        return WebhookOutcomeStatus.APPLIED

    async def _load_ticket(self, transaction: Transaction) -> Ticket:
        ticket = await self.uow.ticket_command_repo.get_by_id(ticket_id=transaction.ticket_id)
        if ticket is None:
            raise IntegrityViolationError(
                f'Transaction {transaction.id} references a missing ticket',
                details={'payment_intent_id': transaction.payment_intent_id},
            )
        return ticket

    async def _save(self, transaction: Transaction) -> Optional[Transaction]:
        # Different event ids for the same intent are not serialized by the event marker;
        # None means another delivery settled the transaction first
        return await self.uow.transaction_repo.update_if_status(
            transaction=transaction, expected=(TransactionStatus.PENDING,)
        )

    async def _reload(self, transaction: Transaction) -> Transaction:
        current = await self.uow.transaction_repo.get_by_payment_intent_id(
            payment_intent_id=transaction.payment_intent_id
        )
        if current is None:
            raise IntegrityViolationError(
                f'Transaction {transaction.id} disappeared while being settled',
                details={'payment_intent_id': transaction.payment_intent_id},
            )
        return current

    @staticmethod
    def _finish(
        *,
        event: GatewayEvent,
        status: WebhookOutcomeStatus,
        ticket_id: Optional[UUID] = None,
    ) -> WebhookOutcome:
        metrics.record_webhook(event_type=event.type, outcome=status.value)
        Logger.base.info(
            f'🪝 [Webhook] {event.type} {event.id} -> {status.value}'
            + (f' (ticket {ticket_id})' if ticket_id else '')
        )
        return WebhookOutcome(
            status=status, event_id=event.id, event_type=event.type, ticket_id=ticket_id
        )
