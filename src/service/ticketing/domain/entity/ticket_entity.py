from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.ticketing_error import InvalidTransitionError
from src.service.ticketing.domain.value_object.check_in_meta import CheckInMeta


# cancelled and used are terminal
ALLOWED_TRANSITIONS: dict[TicketStatus, frozenset[TicketStatus]] = {
    TicketStatus.PENDING: frozenset({TicketStatus.ISSUED, TicketStatus.CANCELLED}),
    TicketStatus.ISSUED: frozenset({TicketStatus.USED, TicketStatus.CANCELLED}),
    TicketStatus.CANCELLED: frozenset(),
    TicketStatus.USED: frozenset(),
}


def can_transition(current: TicketStatus, target: TicketStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


@attrs.define
class Ticket:
    id: UUID
    token: str
    event_id: UUID
    ticket_type_id: UUID
    attendee_id: UUID
    status: TicketStatus
    # True while this ticket owns one unit of its ticket type's capacity
    capacity_held: bool = True
    qr_code: Optional[str] = attrs.field(default=None, repr=False)
    checked_in_at: Optional[datetime] = None
    check_in_meta: Optional[CheckInMeta] = None
    cancellation_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create_pending(
        cls, *, token: str, event_id: UUID, ticket_type_id: UUID, attendee_id: UUID
    ) -> 'Ticket':
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid7(),
            token=token,
            event_id=event_id,
            ticket_type_id=ticket_type_id,
            attendee_id=attendee_id,
            status=TicketStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def create_issued(
        cls,
        *,
        token: str,
        qr_code: str,
        event_id: UUID,
        ticket_type_id: UUID,
        attendee_id: UUID,
    ) -> 'Ticket':
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid7(),
            token=token,
            event_id=event_id,
            ticket_type_id=ticket_type_id,
            attendee_id=attendee_id,
            status=TicketStatus.ISSUED,
            qr_code=qr_code,
            created_at=now,
            updated_at=now,
        )

    def ensure_can_transition(self, target: TicketStatus) -> None:
        if not can_transition(self.status, target):
            raise InvalidTransitionError(
                entity='Ticket',
                entity_id=self.id,
                current=self.status.value,
                attempted=target.value,
            )

    @Logger.io
    def issue(self, *, qr_code: str) -> 'Ticket':
        self.ensure_can_transition(TicketStatus.ISSUED)
        return attrs.evolve(
            self,
            status=TicketStatus.ISSUED,
            qr_code=qr_code,
            updated_at=datetime.now(timezone.utc),
        )

    @Logger.io
    def cancel(self, *, reason: str) -> 'Ticket':
        self.ensure_can_transition(TicketStatus.CANCELLED)
        return attrs.evolve(
            self,
            status=TicketStatus.CANCELLED,
            capacity_held=False,
            cancellation_reason=reason,
            updated_at=datetime.now(timezone.utc),
        )

    @Logger.io
    def use(self, *, meta: CheckInMeta, at: datetime) -> 'Ticket':
        self.ensure_can_transition(TicketStatus.USED)
        return attrs.evolve(
            self,
            status=TicketStatus.USED,
            checked_in_at=at,
            check_in_meta=meta,
            updated_at=at,
        )
