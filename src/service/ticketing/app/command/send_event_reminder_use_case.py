from typing import Literal, Optional, Self
from uuid import UUID

import anyio
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.dto.reminder_result import ReminderResult
from src.service.ticketing.app.dto.ticket_details import TicketDetails
from src.service.ticketing.app.service.notification_dispatcher import NotificationDispatcher
from src.service.ticketing.domain.ticketing_error import EventNotFoundError


ReminderTiming = Literal['24h', '1h', 'custom']

_TIMING_TEXT = {'24h': '24 hours', '1h': '1 hour'}
# Deliveries in flight at once; each one retries on its own
_MAX_CONCURRENT_DELIVERIES = 10


class SendEventReminderUseCase:
    """
    Remind every holder of an issued ticket that the event is coming up

    Email to everyone, SMS to holders with a phone on file. Failures are
    collected per recipient; one failing delivery never stops the others.
    """

    def __init__(
        self, *, uow: AbstractUnitOfWork, notification_dispatcher: NotificationDispatcher
    ) -> None:
        self.uow = uow
        self.notification_dispatcher = notification_dispatcher

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(get_unit_of_work),
        notification_dispatcher: NotificationDispatcher = Depends(
            Provide[Container.notification_dispatcher]
        ),
    ) -> Self:
        return cls(uow=uow, notification_dispatcher=notification_dispatcher)

    @Logger.io
    async def send(
        self,
        *,
        event_id: UUID,
        when: ReminderTiming,
        custom_message: Optional[str] = None,
        subject: Optional[str] = None,
    ) -> ReminderResult:
        if when == 'custom' and not custom_message:
            raise DomainError('custom_message is required for a custom reminder')

        async with self.uow:
            event = await self.uow.event_query_repo.get_by_id(event_id=event_id)
            if event is None:
                raise EventNotFoundError()
            holders = await self.uow.ticket_query_repo.list_issued_for_event(event_id=event_id)

        if subject is None:
            if custom_message:
                subject = f'Event Reminder: {event.title}'
            else:
                subject = f'Reminder: {event.title} in {_TIMING_TEXT[when]}'

        result = ReminderResult(total=len(holders))
        limiter = anyio.CapacityLimiter(_MAX_CONCURRENT_DELIVERIES)
        async with anyio.create_task_group() as tg:
            for details in holders:
                tg.start_soon(
                    self._remind, details, subject, custom_message or '', result, limiter
                )

        Logger.base.info(
            f'⏰ [Reminder] {event.title}: {result.emails_sent} emails, {result.sms_sent} SMS, '
            f'{result.failed} failed of {result.total} holders'
        )
        return result

    async def _remind(
        self,
        details: TicketDetails,
        subject: str,
        message: str,
        result: ReminderResult,
        limiter: anyio.CapacityLimiter,
    ) -> None:
        attendee, event = details.attendee, details.event
        async with limiter:
            emailed = await self.notification_dispatcher.deliver(
                'reminder_email',
                attendee.email,
                lambda: self.notification_dispatcher.notifier.send_reminder(
                    attendee=attendee,
                    event=event,
                    token=details.ticket.token,
                    subject=subject,
                    message=message,
                ),
            )
            if emailed:
                result.emails_sent += 1
            else:
                result.failed_recipients.append(attendee.email)

            if not attendee.phone:
                return
            texted = await self.notification_dispatcher.deliver(
                'reminder_sms',
                attendee.phone,
                lambda: self.notification_dispatcher.notifier.send_reminder_sms(
                    attendee=attendee, event=event, message=message
                ),
            )
            if texted:
                result.sms_sent += 1
            else:
                result.failed_recipients.append(attendee.phone)
