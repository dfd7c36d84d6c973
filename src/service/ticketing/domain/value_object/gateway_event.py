from enum import StrEnum
from typing import Any, Optional

import attrs


class GatewayEventType(StrEnum):
    PAYMENT_SUCCEEDED = 'payment_intent.succeeded'
    PAYMENT_FAILED = 'payment_intent.payment_failed'


@attrs.frozen
class GatewayEvent:
    """A verified webhook event, already stripped of provider specific wrappers."""

    id: str
    type: str
    payment_intent_id: Optional[str] = None
    data: dict[str, Any] = attrs.field(factory=dict, repr=False)

    @property
    def is_handled(self) -> bool:
        return self.type in (GatewayEventType.PAYMENT_SUCCEEDED, GatewayEventType.PAYMENT_FAILED)
