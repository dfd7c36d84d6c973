from datetime import datetime
from typing import Optional
from uuid import UUID

import attrs

from src.service.ticketing.domain.enum.event_status import EventStatus


def _validate_ends_after_start(instance: 'Event', attribute: attrs.Attribute, value: datetime) -> None:
    if value < instance.start_date:
        raise ValueError('Event end_date cannot be before start_date')


@attrs.define
class Event:
    id: UUID
    tenant_id: UUID
    slug: str
    title: str
    type: str
    start_date: datetime
    end_date: datetime = attrs.field(validator=_validate_ends_after_start)
    location: Optional[str] = None
    timezone: str = 'UTC'
    status: EventStatus = EventStatus.PUBLISHED
    # Per-event override of the configured check-in window, in minutes
    checkin_opens_before_minutes: Optional[int] = None
    checkin_closes_after_minutes: Optional[int] = None
