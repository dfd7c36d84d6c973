"""
Typed errors raised by the ticket lifecycle

Each class sits on one of the platform categories, which fixes both the HTTP
status and the level @Logger.io reports it at:

- ConflictError: business rule rejection (409, INFO)
- IntegrityViolationError: inconsistent data or a caller bug (500, CRITICAL)
- DomainError: malformed input (400, WARNING)
- NotFoundError: unknown identifier (404, WARNING)
- ServiceUnavailableError / BadGatewayError: payment provider trouble
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from src.platform.exception.exceptions import (
    BadGatewayError,
    ConflictError,
    DomainError,
    IntegrityViolationError,
    NotFoundError,
    ServiceUnavailableError,
)


# ========== Capacity ==========


class SoldOutError(ConflictError):
    code = 'sold_out'

    def __init__(self, *, ticket_type_id: UUID) -> None:
        super().__init__('Ticket type is sold out', details={'ticket_type_id': ticket_type_id})


class UnknownTicketTypeError(NotFoundError):
    code = 'unknown_ticket_type'

    def __init__(self, *, ticket_type_id: UUID) -> None:
        super().__init__('Ticket type not found', details={'ticket_type_id': ticket_type_id})


class EventNotFoundError(NotFoundError):
    code = 'event_not_found'

    def __init__(self, message: str = 'Event not found') -> None:
        super().__init__(message)


# ========== State machine ==========


class InvalidTransitionError(IntegrityViolationError):
    code = 'invalid_transition'

    def __init__(self, *, entity: str, entity_id: Any, current: str, attempted: str) -> None:
        self.current = current
        self.attempted = attempted
        super().__init__(
            f'{entity} {entity_id} cannot move from {current} to {attempted}',
            details={
                'entity': entity,
                'entity_id': entity_id,
                'current': current,
                'attempted': attempted,
            },
        )


class TicketNotPayableError(ConflictError):
    code = 'ticket_not_payable'

    def __init__(self, message: str, *, ticket_id: UUID, status: str) -> None:
        super().__init__(message, details={'ticket_id': ticket_id, 'status': status})


# ========== Check-in ==========


class MalformedTokenError(DomainError):
    code = 'malformed_token'

    def __init__(self) -> None:
        super().__init__('Invalid ticket token format')


class TicketNotFoundError(NotFoundError):
    code = 'ticket_not_found'

    def __init__(self) -> None:
        super().__init__('Ticket not found')


class PaymentPendingError(ConflictError):
    code = 'payment_pending'

    def __init__(self) -> None:
        super().__init__('Ticket payment is still pending', details={'status': 'pending'})


class TicketCancelledError(ConflictError):
    code = 'ticket_cancelled'

    def __init__(self) -> None:
        super().__init__('Ticket has been cancelled', details={'status': 'cancelled'})


class AlreadyCheckedInError(ConflictError):
    code = 'already_checked_in'

    def __init__(
        self,
        *,
        checked_in_at: Optional[datetime],
        attendee_name: str,
        attendee_email: str,
        gate_id: Optional[str] = None,
        operator_id: Optional[str] = None,
    ) -> None:
        self.checked_in_at = checked_in_at
        super().__init__(
            'Ticket already checked in',
            details={
                'status': 'used',
                'checked_in_at': checked_in_at,
                'attendee': {'name': attendee_name, 'email': attendee_email},
                'gate_id': gate_id,
                'operator_id': operator_id,
            },
        )


class TooEarlyError(ConflictError):
    code = 'too_early'

    def __init__(self, *, event_start: datetime, opens_at: datetime) -> None:
        self.event_start = event_start
        self.opens_at = opens_at
        super().__init__(
            'Check-in not yet available',
            details={'event_start': event_start, 'opens_at': opens_at},
        )


class EventEndedError(ConflictError):
    code = 'event_ended'

    def __init__(self, *, event_end: datetime) -> None:
        self.event_end = event_end
        super().__init__('Event has ended', details={'event_end': event_end})


# ========== Payment ==========


class InvalidSignatureError(DomainError):
    code = 'invalid_signature'

    def __init__(self, message: str = 'Invalid webhook signature') -> None:
        super().__init__(message)


class InvalidWebhookPayloadError(DomainError):
    code = 'invalid_payload'

    def __init__(self, message: str = 'Invalid webhook payload') -> None:
        super().__init__(message)


class TransactionNotFoundError(IntegrityViolationError):
    code = 'transaction_not_found'

    def __init__(self, *, payment_intent_id: Optional[str], event_id: str) -> None:
        super().__init__(
            'No transaction matches the payment intent',
            details={'payment_intent_id': payment_intent_id, 'event_id': event_id},
        )


class PaymentGatewayUnavailableError(ServiceUnavailableError):
    code = 'payment_gateway_unavailable'

    def __init__(self, message: str, *, ticket_id: Optional[UUID] = None) -> None:
        super().__init__(message, details={'ticket_id': ticket_id} if ticket_id else None)


class PaymentGatewayError(BadGatewayError):
    code = 'payment_gateway_error'

    def __init__(self, message: str, *, ticket_id: Optional[UUID] = None) -> None:
        super().__init__(message, details={'ticket_id': ticket_id} if ticket_id else None)
