from datetime import datetime, timedelta
from typing import TYPE_CHECKING

import attrs


if TYPE_CHECKING:
    from src.service.ticketing.domain.entity.event_entity import Event


@attrs.frozen
class CheckInWindow:
    """How long before start the gate opens and how long after end it stays open."""

    opens_before_start: timedelta
    closes_after_end: timedelta = timedelta(0)

    @classmethod
    def from_minutes(cls, *, opens_before: int, closes_after: int = 0) -> 'CheckInWindow':
        return cls(
            opens_before_start=timedelta(minutes=opens_before),
            closes_after_end=timedelta(minutes=closes_after),
        )

    def for_event(self, event: 'Event') -> 'CheckInWindow':
        """Apply the event's own override, if it has one."""
        return CheckInWindow(
            opens_before_start=(
                timedelta(minutes=event.checkin_opens_before_minutes)
                if event.checkin_opens_before_minutes is not None
                else self.opens_before_start
            ),
            closes_after_end=(
                timedelta(minutes=event.checkin_closes_after_minutes)
                if event.checkin_closes_after_minutes is not None
                else self.closes_after_end
            ),
        )

    def opens_at(self, event: 'Event') -> datetime:
        return event.start_date - self.opens_before_start

    def closes_at(self, event: 'Event') -> datetime:
        return event.end_date + self.closes_after_end
