"""Application layer DTOs"""

from src.service.ticketing.app.dto.check_in_result import CheckInEligibility, CheckInResult
from src.service.ticketing.app.dto.registration_result import (
    FreeRegistrationResult,
    PaidRegistrationResult,
)
from src.service.ticketing.app.dto.reminder_result import ReminderResult
from src.service.ticketing.app.dto.ticket_details import TicketDetails
from src.service.ticketing.app.dto.webhook_outcome import WebhookOutcome, WebhookOutcomeStatus

__all__ = [
    'CheckInEligibility',
    'CheckInResult',
    'FreeRegistrationResult',
    'PaidRegistrationResult',
    'ReminderResult',
    'TicketDetails',
    'WebhookOutcome',
    'WebhookOutcomeStatus',
]
