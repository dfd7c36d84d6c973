from uuid import UUID

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.create_payment_intent_use_case import (
    CreatePaymentIntentUseCase,
)
from src.service.ticketing.app.command.register_attendee_use_case import RegisterAttendeeUseCase
from src.service.ticketing.app.dto.registration_result import (
    FreeRegistrationResult,
    PaidRegistrationResult,
)
from src.service.ticketing.driving_adapter.http_controller.schema.registration_schema import (
    FreeRegistrationResponse,
    PaidRegistrationResponse,
    RegisterRequest,
)
from src.service.ticketing.driving_adapter.http_controller.schema.ticket_schema import (
    EventSummary,
    TicketSummary,
)


router = APIRouter()


def _paid_response(result: PaidRegistrationResult) -> PaidRegistrationResponse:
    return PaidRegistrationResponse(
        ticket_id=result.ticket_id,
        client_secret=result.client_secret,
        amount=result.amount,
        currency=result.currency,
    )


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def register(
    request: RegisterRequest,
    use_case: RegisterAttendeeUseCase = Depends(RegisterAttendeeUseCase.depends),
) -> FreeRegistrationResponse | PaidRegistrationResponse:
    """Free ticket types are issued at once; paid ones return a client secret to pay with."""
    result = await use_case.register(
        ticket_type_id=request.ticket_type_id,
        name=request.name,
        email=request.email,
        phone=request.phone,
        company=request.company,
        event_slug=request.event_slug,
    )

    if isinstance(result, FreeRegistrationResult):
        return FreeRegistrationResponse(
            ticket=TicketSummary.from_entity(result.ticket),
            qr_code=result.ticket.qr_code or '',
            event=EventSummary.from_entity(result.event),
        )
    return _paid_response(result)


@router.post('/{ticket_id}/payment-intent')
@Logger.io
async def create_payment_intent(
    ticket_id: UUID,
    use_case: CreatePaymentIntentUseCase = Depends(CreatePaymentIntentUseCase.depends),
) -> PaidRegistrationResponse:
    """Retry payment for a pending ticket (reuses the intent when one exists)."""
    result = await use_case.create_for_ticket(ticket_id=ticket_id)
    return _paid_response(result)
