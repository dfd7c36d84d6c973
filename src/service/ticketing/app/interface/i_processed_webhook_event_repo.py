from abc import ABC, abstractmethod

from src.service.ticketing.domain.entity.processed_webhook_event_entity import (
    ProcessedWebhookEvent,
)


class IProcessedWebhookEventRepo(ABC):
    @abstractmethod
    async def exists(self, *, provider_event_id: str) -> bool:
        pass

    @abstractmethod
    async def add(self, *, event: ProcessedWebhookEvent) -> bool:
        """
        Record a processed provider event

        Args:
            event: Event marker to insert

        Returns:
            False when the event id was already recorded (concurrent delivery won)
        """
        pass
