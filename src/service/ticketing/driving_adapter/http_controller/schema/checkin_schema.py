from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.service.ticketing.driving_adapter.http_controller.schema.ticket_schema import (
    AttendeeSummary,
    EventSummary,
    TicketSummary,
)


class CheckInRequest(BaseModel):
    token: str = Field(min_length=1, max_length=128)
    gate_id: Optional[str] = Field(default=None, max_length=64)
    operator_id: Optional[str] = Field(default=None, max_length=64)
    notes: Optional[str] = Field(default=None, max_length=500)

    model_config = {
        'json_schema_extra': {
            'example': {
                'token': 'ticket_1735689600000_k3j9x2m1q',
                'gate_id': 'north-1',
                'operator_id': 'staff-17',
            }
        },
    }


class CheckInRecord(BaseModel):
    timestamp: datetime
    gate_id: Optional[str] = None
    operator_id: Optional[str] = None


class CheckInResponse(BaseModel):
    success: bool = True
    message: str = 'Check-in successful'
    checkin: CheckInRecord
    ticket: TicketSummary
    attendee: AttendeeSummary
    event: EventSummary


class CheckInEligibilityResponse(BaseModel):
    can_check_in: bool
    reason: Optional[str] = None
    message: Optional[str] = None
    ticket: TicketSummary
    attendee: AttendeeSummary
    event: EventSummary
