from typing import Self

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.dto.ticket_details import TicketDetails
from src.service.ticketing.domain.ticket_token import TokenGenerator
from src.service.ticketing.domain.ticketing_error import MalformedTokenError, TicketNotFoundError


class GetTicketByTokenUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def get_by_token(self, *, token: str) -> TicketDetails:
        if not TokenGenerator.validate_syntax(token):
            raise MalformedTokenError()

        async with self.uow:
            details = await self.uow.ticket_query_repo.get_details_by_token(token=token)
        if details is None:
            raise TicketNotFoundError()
        return details
