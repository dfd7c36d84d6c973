"""Registration result DTOs."""

from decimal import Decimal
from uuid import UUID

import attrs

from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.entity.ticket_entity import Ticket


@attrs.define(frozen=True)
class FreeRegistrationResult:
    """Free ticket: issued immediately, QR code included."""

    ticket: Ticket
    event: Event


@attrs.define(frozen=True)
class PaidRegistrationResult:
    """
    Paid ticket: stays pending until the payment webhook arrives.

    The caller confirms payment client side with `client_secret`.
    """

    ticket_id: UUID
    client_secret: str = attrs.field(repr=False)
    amount: int  # minor units
    currency: str
    price: Decimal
