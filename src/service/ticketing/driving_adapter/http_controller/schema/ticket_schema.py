from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from src.service.ticketing.domain.entity.attendee_entity import Attendee
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.entity.ticket_type_entity import TicketType


class TicketSummary(BaseModel):
    id: UUID
    token: str
    status: str
    qr_code: Optional[str] = None
    checked_in_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, ticket: Ticket) -> 'TicketSummary':
        return cls(
            id=ticket.id,
            token=ticket.token,
            status=ticket.status.value,
            qr_code=ticket.qr_code,
            checked_in_at=ticket.checked_in_at,
        )


class AttendeeSummary(BaseModel):
    name: str
    email: str
    company: Optional[str] = None

    @classmethod
    def from_entity(cls, attendee: Attendee) -> 'AttendeeSummary':
        return cls(name=attendee.name, email=attendee.email, company=attendee.company)


class EventSummary(BaseModel):
    id: UUID
    title: str
    type: str
    start_date: datetime
    end_date: datetime
    location: Optional[str] = None

    @classmethod
    def from_entity(cls, event: Event) -> 'EventSummary':
        return cls(
            id=event.id,
            title=event.title,
            type=event.type,
            start_date=event.start_date,
            end_date=event.end_date,
            location=event.location,
        )


class TicketTypeSummary(BaseModel):
    id: UUID
    name: str
    price: Decimal
    currency: str

    @classmethod
    def from_entity(cls, ticket_type: TicketType) -> 'TicketTypeSummary':
        return cls(
            id=ticket_type.id,
            name=ticket_type.name,
            price=ticket_type.price,
            currency=ticket_type.currency,
        )


class TicketDetailResponse(BaseModel):
    ticket: TicketSummary
    attendee: AttendeeSummary
    event: EventSummary
    ticket_type: TicketTypeSummary
