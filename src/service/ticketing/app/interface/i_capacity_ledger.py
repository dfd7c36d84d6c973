"""
Capacity Ledger Interface

The only writer of `ticket_type.quantity_sold`.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from src.service.ticketing.domain.entity.ticket_type_entity import TicketType


class ICapacityLedger(ABC):
    @abstractmethod
    async def reserve(self, *, ticket_type_id: UUID) -> TicketType:
        """
        Take one unit of capacity in a single atomic step

        Args:
            ticket_type_id: Ticket type to reserve from

        Returns:
            Ticket type after the increment

        Raises:
            UnknownTicketTypeError: no such ticket type
            SoldOutError: quantity_sold already equals quantity
        """
        pass

    @abstractmethod
    async def release(self, *, ticket_type_id: UUID) -> None:
        """
        Give one unit back (never drops quantity_sold below zero)

        Args:
            ticket_type_id: Ticket type the unit was reserved from
        """
        pass
