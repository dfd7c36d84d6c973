from fastapi import APIRouter, Depends, Query

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.check_in_ticket_use_case import CheckInTicketUseCase
from src.service.ticketing.app.query.check_in_eligibility_use_case import (
    CheckInEligibilityUseCase,
)
from src.service.ticketing.driving_adapter.http_controller.schema.checkin_schema import (
    CheckInEligibilityResponse,
    CheckInRecord,
    CheckInRequest,
    CheckInResponse,
)
from src.service.ticketing.driving_adapter.http_controller.schema.ticket_schema import (
    AttendeeSummary,
    EventSummary,
    TicketSummary,
)


router = APIRouter()


@router.post('')
@Logger.io
async def check_in(
    request: CheckInRequest,
    use_case: CheckInTicketUseCase = Depends(CheckInTicketUseCase.depends),
) -> CheckInResponse:
    result = await use_case.check_in(
        token=request.token,
        gate_id=request.gate_id,
        operator_id=request.operator_id,
        notes=request.notes,
    )
    return CheckInResponse(
        checkin=CheckInRecord(
            timestamp=result.checked_in_at,
            gate_id=request.gate_id,
            operator_id=request.operator_id,
        ),
        ticket=TicketSummary.from_entity(result.ticket),
        attendee=AttendeeSummary.from_entity(result.attendee),
        event=EventSummary.from_entity(result.event),
    )


@router.get('')
@Logger.io
async def check_in_eligibility(
    token: str = Query(min_length=1, max_length=128),
    use_case: CheckInEligibilityUseCase = Depends(CheckInEligibilityUseCase.depends),
) -> CheckInEligibilityResponse:
    """Read-only: would this ticket be admitted now?"""
    eligibility = await use_case.evaluate(token=token)
    return CheckInEligibilityResponse(
        can_check_in=eligibility.can_check_in,
        reason=eligibility.reason,
        message=eligibility.message,
        ticket=TicketSummary.from_entity(eligibility.ticket),
        attendee=AttendeeSummary.from_entity(eligibility.attendee),
        event=EventSummary.from_entity(eligibility.event),
    )
