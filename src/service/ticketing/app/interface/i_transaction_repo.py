from abc import ABC, abstractmethod
from collections.abc import Collection
from uuid import UUID

from src.service.ticketing.domain.entity.transaction_entity import Transaction
from src.service.ticketing.domain.enum.transaction_status import TransactionStatus


class ITransactionRepo(ABC):
    @abstractmethod
    async def create(self, *, transaction: Transaction) -> Transaction:
        pass

    @abstractmethod
    async def get_by_payment_intent_id(self, *, payment_intent_id: str) -> Transaction | None:
        pass

    @abstractmethod
    async def get_by_ticket_id(self, *, ticket_id: UUID) -> Transaction | None:
        pass

    @abstractmethod
    async def update_if_status(
        self, *, transaction: Transaction, expected: Collection[TransactionStatus]
    ) -> Transaction | None:
        """
        Persist `transaction` only while the stored status is one of `expected`

        Returns:
            Updated transaction, or None when the stored status no longer matches
        """
        pass
