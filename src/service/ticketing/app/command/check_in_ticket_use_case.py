import time
from datetime import datetime, timezone
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticketing_metrics import metrics
from src.service.ticketing.app.dto.check_in_result import CheckInResult
from src.service.ticketing.app.service.ticket_state_machine import TicketStateMachine
from src.service.ticketing.domain.check_in_rule import assert_admissible
from src.service.ticketing.domain.ticket_token import TokenGenerator
from src.service.ticketing.domain.ticketing_error import MalformedTokenError, TicketNotFoundError
from src.service.ticketing.domain.value_object.check_in_meta import CheckInMeta
from src.service.ticketing.domain.value_object.check_in_window import CheckInWindow


class CheckInTicketUseCase:
    """
    Admit a ticket at the gate

    Rules, first failure wins:
    1. Token syntax                -> MalformedTokenError
    2. Ticket exists               -> TicketNotFoundError
    3. Status                      -> PaymentPending / TicketCancelled / AlreadyCheckedIn
    4. Gate open (start - window)  -> TooEarlyError
    5. Event not over              -> EventEndedError
    6. issued -> used (conditional update, loser of a race gets AlreadyCheckedIn)
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        ticket_state_machine: TicketStateMachine,
        check_in_window: CheckInWindow,
    ) -> None:
        self.uow = uow
        self.ticket_state_machine = ticket_state_machine
        self.check_in_window = check_in_window

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(get_unit_of_work),
        ticket_state_machine: TicketStateMachine = Depends(
            Provide[Container.ticket_state_machine]
        ),
        check_in_window: CheckInWindow = Depends(Provide[Container.check_in_window]),
    ) -> Self:
        return cls(
            uow=uow,
            ticket_state_machine=ticket_state_machine,
            check_in_window=check_in_window,
        )

    @Logger.io
    async def check_in(
        self,
        *,
        token: str,
        gate_id: Optional[str] = None,
        operator_id: Optional[str] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CheckInResult:
        started = time.perf_counter()
        try:
            result = await self._check_in(
                token=token,
                meta=CheckInMeta(gate_id=gate_id, operator_id=operator_id, notes=notes),
                now=now or datetime.now(timezone.utc),
            )
        except CustomBaseError as e:
            metrics.record_check_in(result=e.code)
            raise
        finally:
            metrics.check_in_duration.observe(time.perf_counter() - started)

        metrics.record_check_in(result='admitted')
        Logger.base.info(
            f'✅ [CheckIn] {result.attendee.name} <{result.attendee.email}> admitted to '
            f'{result.event.title} at {result.checked_in_at.isoformat()} '
            f'(ticket {result.ticket.id}, gate {gate_id or "-"}, operator {operator_id or "-"})'
        )
        return result

    async def _check_in(self, *, token: str, meta: CheckInMeta, now: datetime) -> CheckInResult:
        if not TokenGenerator.validate_syntax(token):
            raise MalformedTokenError()

        async with self.uow:
            details = await self.uow.ticket_query_repo.get_details_by_token(token=token)
            if details is None:
                raise TicketNotFoundError()

            assert_admissible(
                ticket=details.ticket,
                attendee=details.attendee,
                event=details.event,
                window=self.check_in_window,
                now=now,
            )

            ticket = await self.ticket_state_machine.mark_used(
                uow=self.uow, ticket_id=details.ticket.id, meta=meta, at=now
            )
            await self.uow.commit()

        return CheckInResult(
            ticket=ticket,
            attendee=details.attendee,
            event=details.event,
            checked_in_at=ticket.checked_in_at or now,
        )
