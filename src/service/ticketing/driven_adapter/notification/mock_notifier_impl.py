"""Mock notifier: keeps every message in memory and logs it instead of sending."""

from datetime import datetime, timezone

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_notifier import INotifier
from src.service.ticketing.domain.entity.attendee_entity import Attendee
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.driven_adapter.notification.notification_template import (
    reminder_sms_text,
    ticket_email_subject,
)


class MockNotifierImpl(INotifier):
    def __init__(self) -> None:
        self.sent_emails: list[dict] = []  # Store sent emails for testing
        self.sent_sms: list[dict] = []

    @Logger.io
    async def send_ticket_issued(
        self, *, attendee: Attendee, event: Event, token: str, qr_code: str
    ) -> bool:
        return self._record_email(
            to=attendee.email, subject=ticket_email_subject(event), token=token
        )

    @Logger.io
    async def send_reminder(
        self, *, attendee: Attendee, event: Event, token: str, subject: str, message: str
    ) -> bool:
        return self._record_email(to=attendee.email, subject=subject, token=token)

    @Logger.io
    async def send_reminder_sms(self, *, attendee: Attendee, event: Event, message: str) -> bool:
        body = reminder_sms_text(attendee=attendee, event=event, message=message)
        self.sent_sms.append(
            {'to': attendee.phone, 'body': body, 'sent_at': datetime.now(timezone.utc)}
        )
        Logger.base.info(f'📱 [MockNotifier] SMS to {attendee.phone}: {body}')
        return True

    def _record_email(self, *, to: str, subject: str, token: str) -> bool:
        self.sent_emails.append(
            {'to': to, 'subject': subject, 'token': token, 'sent_at': datetime.now(timezone.utc)}
        )
        Logger.base.info(f'📧 [MockNotifier] Email to {to}: {subject}')
        return True
