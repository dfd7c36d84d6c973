"""
Ticket State Machine

Owns every ticket status change:

    pending ──▶ issued ──▶ used
       │           │
       └──▶ cancelled ◀──┘

cancelled and used are terminal. Each write is a compare-and-set on the
current status inside the caller's unit of work; the caller commits.
Notifications are registered as post-commit hooks so they only go out once
the new state is durable, and never inside the database transaction.
"""

from datetime import datetime
from uuid import UUID

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_qr_renderer import IQrRenderer
from src.service.ticketing.app.service.notification_dispatcher import NotificationDispatcher
from src.service.ticketing.domain.entity.attendee_entity import Attendee
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.entity.ticket_type_entity import TicketType
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.ticket_token import TokenGenerator
from src.service.ticketing.domain.ticketing_error import (
    AlreadyCheckedInError,
    EventNotFoundError,
    TicketNotFoundError,
)
from src.service.ticketing.domain.value_object.check_in_meta import CheckInMeta


# A cancel can race a concurrent issue once; a second miss means something else is wrong
_CANCEL_ATTEMPTS = 2


class TicketStateMachine:
    def __init__(
        self,
        *,
        token_generator: TokenGenerator,
        qr_renderer: IQrRenderer,
        notification_dispatcher: NotificationDispatcher,
    ) -> None:
        self.token_generator = token_generator
        self.qr_renderer = qr_renderer
        self.notification_dispatcher = notification_dispatcher

    @Logger.io
    async def create_pending(
        self, *, uow: AbstractUnitOfWork, ticket_type: TicketType, attendee: Attendee
    ) -> Ticket:
        """Paid ticket awaiting payment; capacity must already be reserved."""
        ticket = Ticket.create_pending(
            token=self.token_generator.generate(),
            event_id=ticket_type.event_id,
            ticket_type_id=ticket_type.id,
            attendee_id=attendee.id,
        )
        return await uow.ticket_command_repo.create(ticket=ticket)

    @Logger.io
    async def create_issued_directly(
        self,
        *,
        uow: AbstractUnitOfWork,
        ticket_type: TicketType,
        attendee: Attendee,
        event: Event,
    ) -> Ticket:
        """Free ticket: token, QR code and issued status in one step."""
        token = self.token_generator.generate()
        ticket = await uow.ticket_command_repo.create(
            ticket=Ticket.create_issued(
                token=token,
                qr_code=self.qr_renderer.render(content=token),
                event_id=ticket_type.event_id,
                ticket_type_id=ticket_type.id,
                attendee_id=attendee.id,
            )
        )
        uow.on_commit(
            self.notification_dispatcher.ticket_issued_hook(
                attendee=attendee, event=event, ticket=ticket
            )
        )
        return ticket

    @Logger.io
    async def mark_issued(self, *, uow: AbstractUnitOfWork, ticket_id: UUID) -> Ticket:
        """
        pending -> issued

        Redelivery safe: an already issued (or used) ticket is returned as is,
        with no new QR code and no second notification.
        """
        ticket = await self._load(uow=uow, ticket_id=ticket_id)
        if ticket.status in (TicketStatus.ISSUED, TicketStatus.USED):
            Logger.base.info(f'♻️ [Ticket] {ticket_id} already {ticket.status}, issue skipped')
            return ticket

        issued = ticket.issue(qr_code=self.qr_renderer.render(content=ticket.token))
        updated = await uow.ticket_command_repo.update_if_status(
            ticket=issued, expected=(TicketStatus.PENDING,)
        )
        if updated is None:
            current = await self._load(uow=uow, ticket_id=ticket_id)
            if current.status in (TicketStatus.ISSUED, TicketStatus.USED):
                return current
            current.ensure_can_transition(TicketStatus.ISSUED)
            return current

        attendee, event = await self._load_attendee_and_event(uow=uow, ticket=updated)
        uow.on_commit(
            self.notification_dispatcher.ticket_issued_hook(
                attendee=attendee, event=event, ticket=updated
            )
        )
        Logger.base.info(f'🎫 [Ticket] {ticket_id} issued')
        return updated

    @Logger.io
    async def mark_cancelled(
        self,
        *,
        uow: AbstractUnitOfWork,
        ticket_id: UUID,
        reason: str,
        only_if_pending: bool = False,
    ) -> Ticket:
        """
        pending|issued -> cancelled

        Gives the capacity unit back exactly once. Cancelling a cancelled
        ticket is a no-op. With `only_if_pending` an issued ticket is
        returned untouched instead.
        """
        for _ in range(_CANCEL_ATTEMPTS):
            ticket = await self._load(uow=uow, ticket_id=ticket_id)
            if ticket.status is TicketStatus.CANCELLED:
                return ticket
            if only_if_pending and ticket.status is not TicketStatus.PENDING:
                return ticket

            cancelled = ticket.cancel(reason=reason)
            updated = await uow.ticket_command_repo.update_if_status(
                ticket=cancelled, expected=(ticket.status,)
            )
            if updated is None:
                continue

            if ticket.capacity_held:
                await uow.capacity_ledger.release(ticket_type_id=ticket.ticket_type_id)
            Logger.base.info(f'🚫 [Ticket] {ticket_id} cancelled ({reason})')
            return updated

        current = await self._load(uow=uow, ticket_id=ticket_id)
        if current.status is not TicketStatus.CANCELLED:
            current.ensure_can_transition(TicketStatus.CANCELLED)
        return current

    @Logger.io
    async def mark_used(
        self, *, uow: AbstractUnitOfWork, ticket_id: UUID, meta: CheckInMeta, at: datetime
    ) -> Ticket:
        """
        issued -> used

        The conditional update lets exactly one of two concurrent check-ins
        win; the loser gets AlreadyCheckedInError with the winner's timestamp.
        """
        ticket = await self._load(uow=uow, ticket_id=ticket_id)
        if ticket.status is TicketStatus.ISSUED:
            updated = await uow.ticket_command_repo.update_if_status(
                ticket=ticket.use(meta=meta, at=at), expected=(TicketStatus.ISSUED,)
            )
            if updated is not None:
                return updated

        current = await self._load(uow=uow, ticket_id=ticket_id)
        if current.status is TicketStatus.USED:
            attendee = await uow.attendee_repo.get_by_id(attendee_id=current.attendee_id)
            raise AlreadyCheckedInError(
                checked_in_at=current.checked_in_at,
                attendee_name=attendee.name if attendee else '',
                attendee_email=attendee.email if attendee else '',
                gate_id=current.check_in_meta.gate_id if current.check_in_meta else None,
                operator_id=current.check_in_meta.operator_id if current.check_in_meta else None,
            )
        current.ensure_can_transition(TicketStatus.USED)
        return current

    @staticmethod
    async def _load(*, uow: AbstractUnitOfWork, ticket_id: UUID) -> Ticket:
        ticket = await uow.ticket_command_repo.get_by_id(ticket_id=ticket_id)
        if ticket is None:
            raise TicketNotFoundError()
        return ticket

    @staticmethod
    async def _load_attendee_and_event(
        *, uow: AbstractUnitOfWork, ticket: Ticket
    ) -> tuple[Attendee, Event]:
        attendee = await uow.attendee_repo.get_by_id(attendee_id=ticket.attendee_id)
        event = await uow.event_query_repo.get_by_id(event_id=ticket.event_id)
        if attendee is None or event is None:
            raise EventNotFoundError(f'Ticket {ticket.id} references a missing attendee or event')
        return attendee, event
