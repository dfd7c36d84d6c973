from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils.compat import uuid7

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_attendee_repo import IAttendeeRepo
from src.service.ticketing.domain.entity.attendee_entity import Attendee
from src.service.ticketing.driven_adapter.model.attendee_model import AttendeeModel
from src.service.ticketing.driven_adapter.repo.model_mapper import to_attendee


class AttendeeRepoImpl(IAttendeeRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get_by_id(self, *, attendee_id: UUID) -> Attendee | None:
        model = await self.session.get(AttendeeModel, attendee_id)
        return to_attendee(model) if model else None

    @Logger.io
    async def get_or_create(
        self,
        *,
        name: str,
        email: str,
        phone: Optional[str] = None,
        company: Optional[str] = None,
    ) -> Attendee:
        email = email.strip().lower()
        # Two first-time registrations with the same email must end up on one row
        await self.session.execute(
            insert(AttendeeModel)
            .values(id=uuid7(), name=name, email=email, phone=phone, company=company)
            .on_conflict_do_nothing(index_elements=[AttendeeModel.email])
        )
        model = await self.session.scalar(
            select(AttendeeModel).where(AttendeeModel.email == email)
        )
        assert model is not None
        return to_attendee(model)
