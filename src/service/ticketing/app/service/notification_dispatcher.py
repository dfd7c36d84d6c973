from collections.abc import Awaitable, Callable
from typing import Optional

import anyio
from anyio.abc import TaskGroup

from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticketing_metrics import metrics
from src.service.ticketing.app.interface.i_notifier import INotifier
from src.service.ticketing.domain.entity.attendee_entity import Attendee
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.entity.ticket_entity import Ticket


SendCall = Callable[[], Awaitable[bool]]


class NotificationDispatcher:
    """
    Fire-and-forget delivery with bounded retries

    Never raises: a notification that cannot be delivered is logged and
    counted, the ticket it belongs to is unaffected. When the app lifespan
    attaches a task group, deliveries run in the background so the request
    that triggered them returns immediately.
    """

    def __init__(
        self, *, notifier: INotifier, max_attempts: int = 3, backoff_seconds: float = 0.5
    ) -> None:
        self.notifier = notifier
        self.max_attempts = max(1, max_attempts)
        self.backoff_seconds = backoff_seconds
        self._task_group: Optional[TaskGroup] = None

    def attach_task_group(self, task_group: TaskGroup) -> None:
        self._task_group = task_group

    def detach_task_group(self) -> None:
        self._task_group = None

    async def dispatch(self, *, kind: str, recipient: str, send: SendCall) -> None:
        if self._task_group is not None:
            self._task_group.start_soon(self.deliver, kind, recipient, send)
            return
        await self.deliver(kind, recipient, send)

    async def deliver(self, kind: str, recipient: str, send: SendCall) -> bool:
        for attempt in range(1, self.max_attempts + 1):
            try:
                if await send():
                    metrics.record_notification(kind=kind, result='sent')
                    return True
                Logger.base.warning(
                    f'📭 [Notify] {kind} to {recipient} not accepted '
                    f'(attempt {attempt}/{self.max_attempts})'
                )
            except Exception as e:
                Logger.base.warning(
                    f'📭 [Notify] {kind} to {recipient} failed: {type(e).__name__}: {e} '
                    f'(attempt {attempt}/{self.max_attempts})'
                )

            if attempt < self.max_attempts:
                metrics.record_notification(kind=kind, result='retry')
                await anyio.sleep(self.backoff_seconds * 2 ** (attempt - 1))

        metrics.record_notification(kind=kind, result='gave_up')
        Logger.base.error(f'❌ [Notify] Gave up on {kind} to {recipient}')
        return False

    def ticket_issued_hook(
        self, *, attendee: Attendee, event: Event, ticket: Ticket
    ) -> Callable[[], Awaitable[None]]:
        """Post-commit hook that emails the ticket with its QR code."""

        async def hook() -> None:
            await self.dispatch(
                kind='ticket_issued',
                recipient=attendee.email,
                send=lambda: self.notifier.send_ticket_issued(
                    attendee=attendee,
                    event=event,
                    token=ticket.token,
                    qr_code=ticket.qr_code or '',
                ),
            )

        return hook
