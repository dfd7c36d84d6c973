from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from src.service.ticketing.app.dto.ticket_details import TicketDetails
from src.service.ticketing.domain.entity.ticket_entity import Ticket


class ITicketQueryRepo(ABC):
    @abstractmethod
    async def get_details_by_token(self, *, token: str) -> TicketDetails | None:
        """
        Ticket with its attendee, event and ticket type

        Args:
            token: Ticket token as scanned at the gate

        Returns:
            TicketDetails or None if no ticket has this token
        """
        pass

    @abstractmethod
    async def get_details_by_id(self, *, ticket_id: UUID) -> TicketDetails | None:
        pass

    @abstractmethod
    async def list_issued_for_event(self, *, event_id: UUID) -> list[TicketDetails]:
        """Issued (not yet used) tickets of an event, for reminders."""
        pass

    @abstractmethod
    async def list_stale_pending(self, *, created_before: datetime, limit: int) -> list[Ticket]:
        """Pending tickets older than `created_before` whose payment never completed."""
        pass
