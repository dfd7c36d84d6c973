from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.domain.enum.transaction_status import TransactionStatus
from src.service.ticketing.domain.ticketing_error import InvalidTransitionError


@attrs.define
class Transaction:
    """One payment attempt for a paid ticket (1:1 with the ticket)."""

    id: UUID
    ticket_id: UUID
    amount: Decimal
    currency: str
    status: TransactionStatus
    payment_intent_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create_pending(
        cls, *, ticket_id: UUID, amount: Decimal, currency: str, payment_intent_id: str
    ) -> 'Transaction':
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid7(),
            ticket_id=ticket_id,
            amount=amount,
            currency=currency,
            status=TransactionStatus.PENDING,
            payment_intent_id=payment_intent_id,
            created_at=now,
            updated_at=now,
        )

    def _settle(self, target: TransactionStatus) -> 'Transaction':
        if self.status is not TransactionStatus.PENDING:
            raise InvalidTransitionError(
                entity='Transaction',
                entity_id=self.id,
                current=self.status.value,
                attempted=target.value,
            )
        return attrs.evolve(self, status=target, updated_at=datetime.now(timezone.utc))

    @Logger.io
    def complete(self) -> 'Transaction':
        return self._settle(TransactionStatus.COMPLETED)

    @Logger.io
    def fail(self) -> 'Transaction':
        return self._settle(TransactionStatus.FAILED)
