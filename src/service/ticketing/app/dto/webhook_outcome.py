"""Webhook reconciliation outcome DTO."""

from enum import StrEnum
from typing import Optional
from uuid import UUID

import attrs


class WebhookOutcomeStatus(StrEnum):
    APPLIED = 'applied'
    ALREADY_PROCESSED = 'already_processed'
    IGNORED = 'ignored'
    # Payment captured for a ticket that was cancelled meanwhile
    UNFULFILLED = 'unfulfilled'


@attrs.define(frozen=True)
class WebhookOutcome:
    status: WebhookOutcomeStatus
    event_id: str
    event_type: str
    ticket_id: Optional[UUID] = None
