from datetime import datetime, timezone

import attrs


@attrs.frozen
class ProcessedWebhookEvent:
    """Marker that a provider event was applied; written once, never updated."""

    provider_event_id: str
    event_type: str
    processed_at: datetime = attrs.field(factory=lambda: datetime.now(timezone.utc))
