from datetime import datetime, timedelta, timezone
from typing import Optional

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.service.ticket_state_machine import TicketStateMachine
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.enum.transaction_status import TransactionStatus


class ExpirePendingTicketsUseCase:
    """
    Give back the capacity of paid tickets whose payment never arrived

    A pending ticket older than the TTL is cancelled with reason
    `payment_timeout` unless its transaction already completed. The pending
    transaction is failed first with a conditional update, so a payment
    webhook racing this job either wins (ticket skipped) or finds the ticket
    cancelled and reports the payment as unfulfilled.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        ticket_state_machine: TicketStateMachine,
        ttl: timedelta,
    ) -> None:
        self.uow = uow
        self.ticket_state_machine = ticket_state_machine
        self.ttl = ttl

    @Logger.io
    async def expire(self, *, now: Optional[datetime] = None, batch_size: int = 100) -> int:
        cutoff = (now or datetime.now(timezone.utc)) - self.ttl
        async with self.uow:
            stale = await self.uow.ticket_query_repo.list_stale_pending(
                created_before=cutoff, limit=batch_size
            )

        expired = 0
        for ticket in stale:
            if await self._expire_one(ticket):
                expired += 1

        if stale:
            Logger.base.info(f'⌛ [Expire] {expired} of {len(stale)} stale pending tickets cancelled')
        return expired

    async def _expire_one(self, ticket: Ticket) -> bool:
        async with self.uow:
            transaction = await self.uow.transaction_repo.get_by_ticket_id(ticket_id=ticket.id)
            if transaction is not None:
                if transaction.status is TransactionStatus.COMPLETED:
                    Logger.base.warning(
                        f'⌛ [Expire] Ticket {ticket.id} is pending but its payment completed, skipped'
                    )
                    return False
                if transaction.status is TransactionStatus.PENDING:
                    failed = await self.uow.transaction_repo.update_if_status(
                        transaction=transaction.fail(), expected=(TransactionStatus.PENDING,)
                    )
                    if failed is None:
                        return False

            cancelled = await self.ticket_state_machine.mark_cancelled(
                uow=self.uow,
                ticket_id=ticket.id,
                reason='payment_timeout',
                only_if_pending=True,
            )
            if cancelled.status is not TicketStatus.CANCELLED:
                return False
            await self.uow.commit()
        return True
