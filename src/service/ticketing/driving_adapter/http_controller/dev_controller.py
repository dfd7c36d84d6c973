"""Development-only endpoints; mounted when DEBUG is on and the mock gateway is selected."""

from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.simulate_payment_use_case import SimulatePaymentUseCase
from src.service.ticketing.driving_adapter.http_controller.schema.dev_schema import (
    SimulatePaymentRequest,
    SimulatePaymentResponse,
)


router = APIRouter()


@router.post('/simulate-payment')
@Logger.io
async def simulate_payment(
    request: SimulatePaymentRequest,
    use_case: SimulatePaymentUseCase = Depends(SimulatePaymentUseCase.depends),
) -> SimulatePaymentResponse:
    outcome = await use_case.simulate(ticket_id=request.ticket_id, result=request.simulate)
    return SimulatePaymentResponse(
        status=outcome.status.value, event_id=outcome.event_id, ticket_id=outcome.ticket_id
    )
