from abc import ABC, abstractmethod
from uuid import UUID

from src.service.ticketing.domain.entity.ticket_type_entity import TicketType


class ITicketTypeQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, ticket_type_id: UUID) -> TicketType | None:
        pass
