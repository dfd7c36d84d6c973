from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.dto.ticket_details import TicketDetails
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.enum.transaction_status import TransactionStatus
from src.service.ticketing.driven_adapter.model.attendee_model import AttendeeModel
from src.service.ticketing.driven_adapter.model.event_model import EventModel
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.ticketing.driven_adapter.model.ticket_type_model import TicketTypeModel
from src.service.ticketing.driven_adapter.model.transaction_model import TransactionModel
from src.service.ticketing.driven_adapter.repo.model_mapper import (
    to_attendee,
    to_event,
    to_ticket,
    to_ticket_type,
)


class TicketQueryRepoImpl(ITicketQueryRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _details_query() -> Select[Any]:
        return (
            select(TicketModel, AttendeeModel, EventModel, TicketTypeModel)
            .join(AttendeeModel, AttendeeModel.id == TicketModel.attendee_id)
            .join(EventModel, EventModel.id == TicketModel.event_id)
            .join(TicketTypeModel, TicketTypeModel.id == TicketModel.ticket_type_id)
            .execution_options(populate_existing=True)
        )

    @staticmethod
    def _to_details(row: Any) -> TicketDetails:
        ticket, attendee, event, ticket_type = row
        return TicketDetails(
            ticket=to_ticket(ticket),
            attendee=to_attendee(attendee),
            event=to_event(event),
            ticket_type=to_ticket_type(ticket_type),
        )

    @Logger.io
    async def get_details_by_token(self, *, token: str) -> TicketDetails | None:
        result = await self.session.execute(
            self._details_query().where(TicketModel.token == token)
        )
        row = result.one_or_none()
        return self._to_details(row) if row else None

    @Logger.io
    async def get_details_by_id(self, *, ticket_id: UUID) -> TicketDetails | None:
        result = await self.session.execute(self._details_query().where(TicketModel.id == ticket_id))
        row = result.one_or_none()
        return self._to_details(row) if row else None

    @Logger.io
    async def list_issued_for_event(self, *, event_id: UUID) -> list[TicketDetails]:
        result = await self.session.execute(
            self._details_query()
            .where(
                TicketModel.event_id == event_id,
                TicketModel.status == TicketStatus.ISSUED.value,
            )
            .order_by(TicketModel.created_at)
        )
        return [self._to_details(row) for row in result.all()]

    @Logger.io
    async def list_stale_pending(self, *, created_before: datetime, limit: int) -> list[Ticket]:
        # Pending with a completed payment waits for its issue, never for expiry
        paid = select(TransactionModel.id).where(
            TransactionModel.ticket_id == TicketModel.id,
            TransactionModel.status == TransactionStatus.COMPLETED.value,
        )
        result = await self.session.scalars(
            select(TicketModel)
            .where(
                TicketModel.status == TicketStatus.PENDING.value,
                TicketModel.created_at < created_before,
                ~paid.exists(),
            )
            .order_by(TicketModel.created_at)
            .limit(limit)
        )
        return [to_ticket(model) for model in result.all()]
