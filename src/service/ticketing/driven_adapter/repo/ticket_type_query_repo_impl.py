from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_ticket_type_query_repo import ITicketTypeQueryRepo
from src.service.ticketing.domain.entity.ticket_type_entity import TicketType
from src.service.ticketing.driven_adapter.model.ticket_type_model import TicketTypeModel
from src.service.ticketing.driven_adapter.repo.model_mapper import to_ticket_type


class TicketTypeQueryRepoImpl(ITicketTypeQueryRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get_by_id(self, *, ticket_type_id: UUID) -> TicketType | None:
        # quantity_sold changes under concurrent registrations; always read the row
        model = await self.session.get(TicketTypeModel, ticket_type_id, populate_existing=True)
        return to_ticket_type(model) if model else None
