"""Check-in DTOs."""

from datetime import datetime
from typing import Optional

import attrs

from src.service.ticketing.domain.entity.attendee_entity import Attendee
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.entity.ticket_entity import Ticket


@attrs.define(frozen=True)
class CheckInResult:
    ticket: Ticket
    attendee: Attendee
    event: Event
    checked_in_at: datetime


@attrs.define(frozen=True)
class CheckInEligibility:
    """
    Read-only eligibility answer for `GET /checkin`.

    `reason` is the error code of the first failing rule, None when admissible.
    """

    ticket: Ticket
    attendee: Attendee
    event: Event
    can_check_in: bool
    reason: Optional[str] = None
    message: Optional[str] = None
