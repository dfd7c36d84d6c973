from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.query.get_ticket_by_token_use_case import GetTicketByTokenUseCase
from src.service.ticketing.driving_adapter.http_controller.schema.ticket_schema import (
    AttendeeSummary,
    EventSummary,
    TicketDetailResponse,
    TicketSummary,
    TicketTypeSummary,
)


router = APIRouter()


@router.get('/{token}')
@Logger.io
async def get_ticket(
    token: str,
    use_case: GetTicketByTokenUseCase = Depends(GetTicketByTokenUseCase.depends),
) -> TicketDetailResponse:
    details = await use_case.get_by_token(token=token)
    return TicketDetailResponse(
        ticket=TicketSummary.from_entity(details.ticket),
        attendee=AttendeeSummary.from_entity(details.attendee),
        event=EventSummary.from_entity(details.event),
        ticket_type=TicketTypeSummary.from_entity(details.ticket_type),
    )
