from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Optional, TypeVar
from uuid import UUID

import pytest
from sqlalchemy import select
from uuid_utils.compat import uuid7

from src.platform.database.orm_db_setting import session_scope
from src.platform.database.unit_of_work import AbstractUnitOfWork, SqlAlchemyUnitOfWork
from src.service.ticketing.driven_adapter.model import EventModel, TicketModel, TicketTypeModel


T = TypeVar('T')

EVENT_START = datetime(2026, 5, 14, 9, 0, tzinfo=timezone.utc)


async def with_uow(work: Callable[[AbstractUnitOfWork], Awaitable[T]]) -> T:
    """Run `work` against a fresh session, the way one request would."""
    async with session_scope() as session:
        return await work(SqlAlchemyUnitOfWork(session))


async def seed_event(**overrides: Any) -> UUID:
    values = {
        'id': uuid7(),
        'tenant_id': uuid7(),
        'slug': 'pycon-2026',
        'title': 'PyCon 2026',
        'type': 'conference',
        'start_date': EVENT_START,
        'end_date': EVENT_START + timedelta(hours=8),
        'location': 'Pittsburgh',
        'timezone': 'UTC',
        'status': 'published',
    } | overrides
    async with session_scope() as session:
        session.add(EventModel(**values))
        await session.commit()
    return values['id']


async def seed_ticket_type(
    *, event_id: UUID, quantity: Optional[int], price: Decimal = Decimal('0'), **overrides: Any
) -> UUID:
    values = {
        'id': uuid7(),
        'event_id': event_id,
        'name': 'General Admission',
        'price': price,
        'currency': 'USD',
        'is_paid': price > 0,
        'quantity': quantity,
        'quantity_sold': 0,
        'is_visible': True,
    } | overrides
    async with session_scope() as session:
        session.add(TicketTypeModel(**values))
        await session.commit()
    return values['id']


async def quantity_sold(ticket_type_id: UUID) -> int:
    async with session_scope() as session:
        model = await session.get(TicketTypeModel, ticket_type_id)
        assert model is not None
        return model.quantity_sold


async def ticket_rows(ticket_type_id: UUID) -> list[TicketModel]:
    async with session_scope() as session:
        result = await session.scalars(
            select(TicketModel).where(TicketModel.ticket_type_id == ticket_type_id)
        )
        return list(result)


@pytest.fixture
async def event_id(clean_database) -> UUID:
    return await seed_event()
