#!/usr/bin/env python
"""
Pending Ticket Expiry

Cancels paid tickets whose payment never arrived and gives their capacity
back. Run once from cron, or with --every to keep sweeping:

    uv run python -m scripts.expire_pending_tickets --every 60
"""

import argparse
from datetime import timedelta

import anyio

from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.database.orm_db_setting import dispose_engine, session_scope
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.expire_pending_tickets_use_case import (
    ExpirePendingTicketsUseCase,
)


async def sweep(*, batch_size: int) -> int:
    async with session_scope() as session:
        use_case = ExpirePendingTicketsUseCase(
            uow=SqlAlchemyUnitOfWork(session),
            ticket_state_machine=container.ticket_state_machine(),
            ttl=timedelta(minutes=settings.PENDING_TICKET_TTL_MINUTES),
        )
        total = 0
        # Keep going while full batches come back
        while True:
            expired = await use_case.expire(batch_size=batch_size)
            total += expired
            if expired < batch_size:
                return total


async def main(*, every: int | None, batch_size: int) -> None:
    try:
        while True:
            total = await sweep(batch_size=batch_size)
            Logger.base.info(
                f'⌛ [Expire] Sweep done, {total} tickets cancelled '
                f'(ttl {settings.PENDING_TICKET_TTL_MINUTES} min)'
            )
            if every is None:
                return
            await anyio.sleep(every)
    finally:
        await dispose_engine()


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Cancel stale pending tickets')
    parser.add_argument('--every', type=int, default=None, help='repeat every N seconds')
    parser.add_argument('--batch-size', type=int, default=100)
    args = parser.parse_args()
    anyio.run(lambda: main(every=args.every, batch_size=args.batch_size))
