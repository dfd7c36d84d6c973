"""
Unit of Work Pattern - one database transaction shared by every repository

Architecture:
- UoW owns the session lifecycle and commit/rollback
- Repositories get the shared session from the UoW
- Use cases coordinate several repositories through one UoW
- Side effects that must only happen once data is durable (notifications)
  are registered with `on_commit` and run after a successful commit
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Awaitable, Callable

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.orm_db_setting import get_async_session
from src.platform.logging.loguru_io import Logger


if TYPE_CHECKING:
    from src.service.ticketing.app.interface.i_attendee_repo import IAttendeeRepo
    from src.service.ticketing.app.interface.i_capacity_ledger import ICapacityLedger
    from src.service.ticketing.app.interface.i_event_query_repo import IEventQueryRepo
    from src.service.ticketing.app.interface.i_processed_webhook_event_repo import (
        IProcessedWebhookEventRepo,
    )
    from src.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo
    from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
    from src.service.ticketing.app.interface.i_ticket_type_query_repo import (
        ITicketTypeQueryRepo,
    )
    from src.service.ticketing.app.interface.i_transaction_repo import ITransactionRepo


PostCommitHook = Callable[[], Awaitable[None]]


class AbstractUnitOfWork(abc.ABC):
    """
    Abstract Unit of Work for the ticketing service

    Usage:
        async with uow:
            ticket_type = await uow.capacity_ledger.reserve(ticket_type_id=...)
            ticket = await uow.ticket_command_repo.create(ticket=...)
            await uow.commit()
    """

    # Ticket repositories
    ticket_command_repo: ITicketCommandRepo
    ticket_query_repo: ITicketQueryRepo

    # Inventory
    ticket_type_query_repo: ITicketTypeQueryRepo
    capacity_ledger: ICapacityLedger

    # Payment reconciliation
    transaction_repo: ITransactionRepo
    processed_webhook_event_repo: IProcessedWebhookEventRepo

    # Supporting entities
    event_query_repo: IEventQueryRepo
    attendee_repo: IAttendeeRepo

    def __init__(self) -> None:
        self._post_commit_hooks: list[PostCommitHook] = []

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args) -> None:
        await self.rollback()

    def on_commit(self, hook: PostCommitHook) -> None:
        """Run `hook` after the next successful commit; dropped on rollback."""
        self._post_commit_hooks.append(hook)

    async def commit(self) -> None:
        await self._commit()
        hooks, self._post_commit_hooks = self._post_commit_hooks, []
        for hook in hooks:
            try:
                await hook()
            except Exception as e:
                # Data is already durable; a failing hook must not surface as a failed request
                Logger.base.opt(exception=e).error(f'⚠️ [UoW] Post-commit hook failed: {e}')

    async def rollback(self) -> None:
        self._post_commit_hooks.clear()
        await self._rollback()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def _rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__()
        self.session = session

    async def __aenter__(self) -> AbstractUnitOfWork:
        from src.service.ticketing.driven_adapter.repo.attendee_repo_impl import AttendeeRepoImpl
        from src.service.ticketing.driven_adapter.repo.capacity_ledger_impl import (
            CapacityLedgerImpl,
        )
        from src.service.ticketing.driven_adapter.repo.event_query_repo_impl import (
            EventQueryRepoImpl,
        )
        from src.service.ticketing.driven_adapter.repo.processed_webhook_event_repo_impl import (
            ProcessedWebhookEventRepoImpl,
        )
        from src.service.ticketing.driven_adapter.repo.ticket_command_repo_impl import (
            TicketCommandRepoImpl,
        )
        from src.service.ticketing.driven_adapter.repo.ticket_query_repo_impl import (
            TicketQueryRepoImpl,
        )
        from src.service.ticketing.driven_adapter.repo.ticket_type_query_repo_impl import (
            TicketTypeQueryRepoImpl,
        )
        from src.service.ticketing.driven_adapter.repo.transaction_repo_impl import (
            TransactionRepoImpl,
        )

        # Every repository shares the same session, hence the same transaction
        self.ticket_command_repo = TicketCommandRepoImpl(session=self.session)
        self.ticket_query_repo = TicketQueryRepoImpl(session=self.session)
        self.ticket_type_query_repo = TicketTypeQueryRepoImpl(session=self.session)
        self.capacity_ledger = CapacityLedgerImpl(session=self.session)
        self.transaction_repo = TransactionRepoImpl(session=self.session)
        self.processed_webhook_event_repo = ProcessedWebhookEventRepoImpl(session=self.session)
        self.event_query_repo = EventQueryRepoImpl(session=self.session)
        self.attendee_repo = AttendeeRepoImpl(session=self.session)

        return await super().__aenter__()

    async def _commit(self) -> None:
        await self.session.commit()

    async def _rollback(self) -> None:
        await self.session.rollback()


def get_unit_of_work(
    session: AsyncSession = Depends(get_async_session),
) -> AbstractUnitOfWork:
    """
    FastAPI dependency for Unit of Work

    Usage:
        async def check_in(uow: AbstractUnitOfWork = Depends(get_unit_of_work)):
            async with uow:
                ...
                await uow.commit()
    """
    return SqlAlchemyUnitOfWork(session)
