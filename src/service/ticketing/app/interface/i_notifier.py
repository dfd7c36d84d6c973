"""
Notifier Interface

Email/SMS delivery. Implementations report failure by returning False or
raising; callers never let either affect ticket state.
"""

from abc import ABC, abstractmethod

from src.service.ticketing.domain.entity.attendee_entity import Attendee
from src.service.ticketing.domain.entity.event_entity import Event


class INotifier(ABC):
    @abstractmethod
    async def send_ticket_issued(
        self, *, attendee: Attendee, event: Event, token: str, qr_code: str
    ) -> bool:
        """
        Email the issued ticket

        Args:
            attendee: Ticket holder
            event: Event the ticket admits to
            token: Ticket token, printed under the QR code
            qr_code: PNG data URL of the token

        Returns:
            True once the provider accepted the message
        """
        pass

    @abstractmethod
    async def send_reminder(
        self, *, attendee: Attendee, event: Event, token: str, subject: str, message: str
    ) -> bool:
        """Reminder email; an empty `message` means the standard reminder body."""
        pass

    @abstractmethod
    async def send_reminder_sms(self, *, attendee: Attendee, event: Event, message: str) -> bool:
        """Reminder SMS; callers only invoke it when the attendee has a phone."""
        pass
