from collections.abc import Collection
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_transaction_repo import ITransactionRepo
from src.service.ticketing.domain.entity.transaction_entity import Transaction
from src.service.ticketing.domain.enum.transaction_status import TransactionStatus
from src.service.ticketing.driven_adapter.model.transaction_model import TransactionModel
from src.service.ticketing.driven_adapter.repo.model_mapper import to_transaction


class TransactionRepoImpl(ITransactionRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def create(self, *, transaction: Transaction) -> Transaction:
        model = TransactionModel(
            id=transaction.id,
            ticket_id=transaction.ticket_id,
            amount=transaction.amount,
            currency=transaction.currency,
            status=transaction.status.value,
            payment_intent_id=transaction.payment_intent_id,
        )
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        return to_transaction(model)

    @Logger.io
    async def get_by_payment_intent_id(self, *, payment_intent_id: str) -> Transaction | None:
        model = await self.session.scalar(
            select(TransactionModel)
            .where(TransactionModel.payment_intent_id == payment_intent_id)
            .execution_options(populate_existing=True)
        )
        return to_transaction(model) if model else None

    @Logger.io
    async def get_by_ticket_id(self, *, ticket_id: UUID) -> Transaction | None:
        model = await self.session.scalar(
            select(TransactionModel)
            .where(TransactionModel.ticket_id == ticket_id)
            .execution_options(populate_existing=True)
        )
        return to_transaction(model) if model else None

    @Logger.io
    async def update_if_status(
        self, *, transaction: Transaction, expected: Collection[TransactionStatus]
    ) -> Transaction | None:
        result = await self.session.execute(
            update(TransactionModel)
            .where(
                TransactionModel.id == transaction.id,
                TransactionModel.status.in_([s.value for s in expected]),
            )
            .values(status=transaction.status.value, updated_at=transaction.updated_at)
            .returning(TransactionModel)
            .execution_options(synchronize_session=False, populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return to_transaction(model) if model else None
