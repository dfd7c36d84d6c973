from typing import Optional

from fastapi import APIRouter, Depends, Header, Request

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.reconcile_payment_webhook_use_case import (
    ReconcilePaymentWebhookUseCase,
)
from src.service.ticketing.driving_adapter.http_controller.schema.webhook_schema import (
    WebhookResponse,
)


router = APIRouter()


@router.post('')
@Logger.io
async def receive_payment_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(default=None, alias='stripe-signature'),
    use_case: ReconcilePaymentWebhookUseCase = Depends(ReconcilePaymentWebhookUseCase.depends),
) -> WebhookResponse:
    """
    Payment provider callback

    200 for applied, already processed, ignored and unfulfilled events so the
    provider stops retrying; 400 for bad signatures or bodies; 5xx when the
    provider should deliver again.
    """
    # Signature is computed over the exact bytes received
    payload = await request.body()
    outcome = await use_case.handle(payload=payload, signature=stripe_signature)
    return WebhookResponse(
        status=outcome.status.value, event_id=outcome.event_id, ticket_id=outcome.ticket_id
    )
