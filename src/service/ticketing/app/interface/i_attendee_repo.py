from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.service.ticketing.domain.entity.attendee_entity import Attendee


class IAttendeeRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, attendee_id: UUID) -> Attendee | None:
        pass

    @abstractmethod
    async def get_or_create(
        self,
        *,
        name: str,
        email: str,
        phone: Optional[str] = None,
        company: Optional[str] = None,
    ) -> Attendee:
        """
        Find the attendee by email, creating it on first registration

        Args:
            name: Display name, used only when creating
            email: Lookup key (case-insensitive)
            phone: Optional phone for SMS reminders
            company: Optional company

        Returns:
            Existing or newly created attendee
        """
        pass
