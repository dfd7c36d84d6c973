"""
Ticket Command Repository Interface

Every status change is a compare-and-set on the current status, so two
concurrent writers can never both move the same ticket.
"""

from abc import ABC, abstractmethod
from collections.abc import Collection
from uuid import UUID

from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.enum.ticket_status import TicketStatus


class ITicketCommandRepo(ABC):
    @abstractmethod
    async def create(self, *, ticket: Ticket) -> Ticket:
        """
        Insert a new ticket

        Args:
            ticket: Ticket entity (pending or issued)

        Returns:
            Persisted ticket
        """
        pass

    @abstractmethod
    async def get_by_id(self, *, ticket_id: UUID) -> Ticket | None:
        pass

    @abstractmethod
    async def update_if_status(
        self, *, ticket: Ticket, expected: Collection[TicketStatus]
    ) -> Ticket | None:
        """
        Persist `ticket` only while the stored status is one of `expected`

        Args:
            ticket: Ticket carrying the new state
            expected: Statuses the stored row must currently have

        Returns:
            Updated ticket, or None when another writer changed the status first
        """
        pass
