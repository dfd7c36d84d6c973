from datetime import datetime, timezone
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.dto.check_in_result import CheckInEligibility
from src.service.ticketing.domain.check_in_rule import assert_admissible
from src.service.ticketing.domain.ticket_token import TokenGenerator
from src.service.ticketing.domain.ticketing_error import MalformedTokenError, TicketNotFoundError
from src.service.ticketing.domain.value_object.check_in_window import CheckInWindow


class CheckInEligibilityUseCase:
    """
    Would this token be admitted right now? Nothing is written.

    Malformed and unknown tokens still raise (400/404); a ticket that exists
    but fails a rule comes back with `can_check_in=False` and the rule's code.
    """

    def __init__(self, *, uow: AbstractUnitOfWork, check_in_window: CheckInWindow) -> None:
        self.uow = uow
        self.check_in_window = check_in_window

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(get_unit_of_work),
        check_in_window: CheckInWindow = Depends(Provide[Container.check_in_window]),
    ) -> Self:
        return cls(uow=uow, check_in_window=check_in_window)

    @Logger.io
    async def evaluate(self, *, token: str, now: Optional[datetime] = None) -> CheckInEligibility:
        if not TokenGenerator.validate_syntax(token):
            raise MalformedTokenError()

        async with self.uow:
            details = await self.uow.ticket_query_repo.get_details_by_token(token=token)
        if details is None:
            raise TicketNotFoundError()

        try:
            assert_admissible(
                ticket=details.ticket,
                attendee=details.attendee,
                event=details.event,
                window=self.check_in_window,
                now=now or datetime.now(timezone.utc),
            )
        except ConflictError as e:
            return CheckInEligibility(
                ticket=details.ticket,
                attendee=details.attendee,
                event=details.event,
                can_check_in=False,
                reason=e.code,
                message=e.message,
            )

        return CheckInEligibility(
            ticket=details.ticket,
            attendee=details.attendee,
            event=details.event,
            can_check_in=True,
        )
