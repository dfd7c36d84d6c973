"""
Capacity Ledger (PostgreSQL)

`reserve` is a single conditional UPDATE: the row lock serialises concurrent
reservations and the WHERE clause re-checks remaining capacity after the
lock is taken, so N concurrent calls against capacity C yield exactly C
successes. The CHECK constraints on ticket_type are the second line.
"""

from uuid import UUID

from sqlalchemy import exists, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_capacity_ledger import ICapacityLedger
from src.service.ticketing.domain.entity.ticket_type_entity import TicketType
from src.service.ticketing.domain.ticketing_error import SoldOutError, UnknownTicketTypeError
from src.service.ticketing.driven_adapter.model.ticket_type_model import TicketTypeModel
from src.service.ticketing.driven_adapter.repo.model_mapper import to_ticket_type


class CapacityLedgerImpl(ICapacityLedger):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def reserve(self, *, ticket_type_id: UUID) -> TicketType:
        result = await self.session.execute(
            update(TicketTypeModel)
            .where(
                TicketTypeModel.id == ticket_type_id,
                (TicketTypeModel.quantity.is_(None))
                | (TicketTypeModel.quantity_sold < TicketTypeModel.quantity),
            )
            .values(quantity_sold=TicketTypeModel.quantity_sold + 1)
            .returning(TicketTypeModel)
            .execution_options(synchronize_session=False, populate_existing=True)
        )
        model = result.scalar_one_or_none()
        if model is not None:
            return to_ticket_type(model)

        found = await self.session.scalar(
            select(exists().where(TicketTypeModel.id == ticket_type_id))
        )
        if not found:
            raise UnknownTicketTypeError(ticket_type_id=ticket_type_id)
        raise SoldOutError(ticket_type_id=ticket_type_id)

    @Logger.io
    async def release(self, *, ticket_type_id: UUID) -> None:
        result = await self.session.execute(
            update(TicketTypeModel)
            .where(TicketTypeModel.id == ticket_type_id, TicketTypeModel.quantity_sold > 0)
            .values(quantity_sold=TicketTypeModel.quantity_sold - 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            Logger.base.warning(
                f'⚠️ [Ledger] Release on {ticket_type_id} found nothing to release'
            )
