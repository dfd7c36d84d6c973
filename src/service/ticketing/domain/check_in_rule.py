"""
Gate admission rules that only need data already loaded

Token syntax and ticket lookup run before these; the caller owns them because
they need the token generator and a repository.
"""

from datetime import datetime

from src.service.ticketing.domain.entity.attendee_entity import Attendee
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.ticketing_error import (
    AlreadyCheckedInError,
    EventEndedError,
    PaymentPendingError,
    TicketCancelledError,
    TooEarlyError,
)
from src.service.ticketing.domain.value_object.check_in_window import CheckInWindow


def assert_admissible(
    *,
    ticket: Ticket,
    attendee: Attendee,
    event: Event,
    window: CheckInWindow,
    now: datetime,
) -> None:
    """Raise the first failing rule: ticket status, then too early, then ended."""
    if ticket.status is TicketStatus.PENDING:
        raise PaymentPendingError()
    if ticket.status is TicketStatus.CANCELLED:
        raise TicketCancelledError()
    if ticket.status is TicketStatus.USED:
        meta = ticket.check_in_meta
        raise AlreadyCheckedInError(
            checked_in_at=ticket.checked_in_at,
            attendee_name=attendee.name,
            attendee_email=attendee.email,
            gate_id=meta.gate_id if meta else None,
            operator_id=meta.operator_id if meta else None,
        )

    effective = window.for_event(event)
    opens_at = effective.opens_at(event)
    if now < opens_at:
        raise TooEarlyError(event_start=event.start_date, opens_at=opens_at)
    if now > effective.closes_at(event):
        raise EventEndedError(event_end=event.end_date)
