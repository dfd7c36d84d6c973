from uuid import UUID

from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.send_event_reminder_use_case import (
    SendEventReminderUseCase,
)
from src.service.ticketing.driving_adapter.http_controller.schema.reminder_schema import (
    ReminderRequest,
    ReminderResponse,
)


router = APIRouter()


@router.post('/{event_id}/reminder')
@Logger.io
async def send_event_reminder(
    event_id: UUID,
    request: ReminderRequest,
    use_case: SendEventReminderUseCase = Depends(SendEventReminderUseCase.depends),
) -> ReminderResponse:
    result = await use_case.send(
        event_id=event_id,
        when=request.when,
        custom_message=request.custom_message,
        subject=request.subject,
    )
    return ReminderResponse(
        total_attendees=result.total,
        reminders_sent=result.emails_sent + result.sms_sent,
        emails_sent=result.emails_sent,
        sms_sent=result.sms_sent,
        failed_recipients=result.failed_recipients,
    )
