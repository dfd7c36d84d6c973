from decimal import ROUND_HALF_UP, Decimal
from typing import Optional
from uuid import UUID

import attrs


@attrs.define
class TicketType:
    id: UUID
    event_id: UUID
    name: str
    price: Decimal
    currency: str
    is_paid: bool
    quantity: Optional[int] = None  # None means unlimited
    quantity_sold: int = 0
    description: Optional[str] = None
    is_visible: bool = True

    @property
    def requires_payment(self) -> bool:
        return self.is_paid and self.price > 0

    @property
    def amount_minor_units(self) -> int:
        """Price in the currency's minor unit (cents), rounded half up."""
        return int((self.price * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))

    @property
    def remaining(self) -> Optional[int]:
        if self.quantity is None:
            return None
        return max(self.quantity - self.quantity_sold, 0)
