"""
HTTP notifier: SendGrid v3 mail API for email, Twilio Messages API for SMS

Either channel falls back to logging the message (and reporting success)
while its credentials are not configured, so a dev setup needs neither.
"""

from typing import Optional

import httpx

from src.platform.config.core_setting import Settings
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_notifier import INotifier
from src.service.ticketing.domain.entity.attendee_entity import Attendee
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.driven_adapter.notification.notification_template import (
    event_link,
    reminder_email_html,
    reminder_sms_text,
    ticket_email_html,
    ticket_email_subject,
)


SENDGRID_SEND_URL = 'https://api.sendgrid.com/v3/mail/send'
TWILIO_MESSAGES_URL = 'https://api.twilio.com/2010-04-01/Accounts/{account_sid}/Messages.json'


class HttpNotifierImpl(INotifier):
    def __init__(
        self, *, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> None:
        self.settings = settings
        self._transport = transport

    @property
    def email_configured(self) -> bool:
        return bool(self.settings.SENDGRID_API_KEY.get_secret_value())

    @property
    def sms_configured(self) -> bool:
        return bool(
            self.settings.TWILIO_ACCOUNT_SID
            and self.settings.TWILIO_AUTH_TOKEN.get_secret_value()
            and self.settings.TWILIO_FROM_NUMBER
        )

    @Logger.io
    async def send_ticket_issued(
        self, *, attendee: Attendee, event: Event, token: str, qr_code: str
    ) -> bool:
        return await self._send_email(
            to=attendee.email,
            subject=ticket_email_subject(event),
            html=ticket_email_html(attendee=attendee, event=event, token=token, qr_code=qr_code),
        )

    @Logger.io
    async def send_reminder(
        self, *, attendee: Attendee, event: Event, token: str, subject: str, message: str
    ) -> bool:
        link = event_link(base_url=self.settings.PUBLIC_BASE_URL, event=event)
        return await self._send_email(
            to=attendee.email,
            subject=subject,
            html=reminder_email_html(attendee=attendee, event=event, link=link, message=message),
        )

    @Logger.io
    async def send_reminder_sms(self, *, attendee: Attendee, event: Event, message: str) -> bool:
        if not attendee.phone:
            return False
        return await self._send_sms(
            to=attendee.phone,
            body=reminder_sms_text(attendee=attendee, event=event, message=message),
        )

    async def _send_email(self, *, to: str, subject: str, html: str) -> bool:
        if not self.email_configured:
            Logger.base.info(f'📧 [DevMode] Email to {to} not sent (SendGrid not configured): {subject}')
            return True

        payload = {
            'personalizations': [{'to': [{'email': to}]}],
            'from': {'email': self.settings.SENDGRID_FROM_EMAIL},
            'subject': subject,
            'content': [{'type': 'text/html', 'value': html}],
        }
        async with self._client() as client:
            response = await client.post(
                SENDGRID_SEND_URL,
                json=payload,
                headers={
                    'Authorization': f'Bearer {self.settings.SENDGRID_API_KEY.get_secret_value()}'
                },
            )
        if response.is_success:
            return True
        Logger.base.warning(f'📧 [SendGrid] {response.status_code} for {to}: {response.text[:200]}')
        return False

    async def _send_sms(self, *, to: str, body: str) -> bool:
        if not self.sms_configured:
            Logger.base.info(f'📱 [DevMode] SMS to {to} not sent (Twilio not configured): {body}')
            return True

        async with self._client() as client:
            response = await client.post(
                TWILIO_MESSAGES_URL.format(account_sid=self.settings.TWILIO_ACCOUNT_SID),
                data={'From': self.settings.TWILIO_FROM_NUMBER, 'To': to, 'Body': body},
                auth=(
                    self.settings.TWILIO_ACCOUNT_SID,
                    self.settings.TWILIO_AUTH_TOKEN.get_secret_value(),
                ),
            )
        if response.is_success:
            return True
        Logger.base.warning(f'📱 [Twilio] {response.status_code} for {to}: {response.text[:200]}')
        return False

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.settings.NOTIFY_HTTP_TIMEOUT_SECONDS, transport=self._transport
        )
