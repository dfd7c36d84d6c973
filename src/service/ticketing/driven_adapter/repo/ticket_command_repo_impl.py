from collections.abc import Collection
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.ticketing.driven_adapter.repo.model_mapper import to_ticket


class TicketCommandRepoImpl(ITicketCommandRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def create(self, *, ticket: Ticket) -> Ticket:
        model = TicketModel(
            id=ticket.id,
            token=ticket.token,
            event_id=ticket.event_id,
            ticket_type_id=ticket.ticket_type_id,
            attendee_id=ticket.attendee_id,
            status=ticket.status.value,
            capacity_held=ticket.capacity_held,
            qr_code=ticket.qr_code,
        )
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        return to_ticket(model)

    @Logger.io
    async def get_by_id(self, *, ticket_id: UUID) -> Ticket | None:
        # A lost compare-and-set is followed by a re-read; it must see the winner's row
        model = await self.session.get(TicketModel, ticket_id, populate_existing=True)
        return to_ticket(model) if model else None

    @Logger.io
    async def update_if_status(
        self, *, ticket: Ticket, expected: Collection[TicketStatus]
    ) -> Ticket | None:
        result = await self.session.execute(
            update(TicketModel)
            .where(
                TicketModel.id == ticket.id,
                TicketModel.status.in_([s.value for s in expected]),
            )
            .values(
                status=ticket.status.value,
                capacity_held=ticket.capacity_held,
                qr_code=ticket.qr_code,
                checked_in_at=ticket.checked_in_at,
                check_in_meta=ticket.check_in_meta.to_dict() if ticket.check_in_meta else None,
                cancellation_reason=ticket.cancellation_reason,
                updated_at=ticket.updated_at,
            )
            .returning(TicketModel)
            .execution_options(synchronize_session=False, populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return to_ticket(model) if model else None
