from typing import Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field

from src.service.ticketing.driving_adapter.http_controller.schema.ticket_schema import (
    EventSummary,
    TicketSummary,
)


class RegisterRequest(BaseModel):
    ticket_type_id: UUID = Field(validation_alias=AliasChoices('ticket_type_id', 'ticketTypeId'))
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(pattern=r'^[^@\s]+@[^@\s]+\.[^@\s]+$', max_length=255)
    phone: Optional[str] = Field(default=None, max_length=32)
    company: Optional[str] = Field(default=None, max_length=255)
    event_slug: Optional[str] = Field(
        default=None, validation_alias=AliasChoices('event_slug', 'eventSlug')
    )

    model_config = {
        'json_schema_extra': {
            'example': {
                'ticket_type_id': '01936d8f-5e73-7c4e-a9c5-123456789abc',
                'name': 'Ada Lovelace',
                'email': 'ada@example.com',
                'phone': '+15555550100',
                'company': 'Analytical Engines',
            }
        },
    }


class FreeRegistrationResponse(BaseModel):
    ticket: TicketSummary
    qr_code: str
    event: EventSummary


class PaidRegistrationResponse(BaseModel):
    ticket_id: UUID
    client_secret: str
    amount: int  # minor units (cents)
    currency: str
