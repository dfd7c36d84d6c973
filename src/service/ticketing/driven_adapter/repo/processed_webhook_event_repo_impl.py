from sqlalchemy import exists, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_processed_webhook_event_repo import (
    IProcessedWebhookEventRepo,
)
from src.service.ticketing.domain.entity.processed_webhook_event_entity import (
    ProcessedWebhookEvent,
)
from src.service.ticketing.driven_adapter.model.processed_webhook_event_model import (
    ProcessedWebhookEventModel,
)


class ProcessedWebhookEventRepoImpl(IProcessedWebhookEventRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def exists(self, *, provider_event_id: str) -> bool:
        found = await self.session.scalar(
            select(
                exists().where(ProcessedWebhookEventModel.provider_event_id == provider_event_id)
            )
        )
        return bool(found)

    @Logger.io
    async def add(self, *, event: ProcessedWebhookEvent) -> bool:
        # Blocks behind a concurrent uncommitted insert of the same id, then reports the loss
        result = await self.session.execute(
            insert(ProcessedWebhookEventModel)
            .values(
                provider_event_id=event.provider_event_id,
                event_type=event.event_type,
                processed_at=event.processed_at,
            )
            .on_conflict_do_nothing(index_elements=[ProcessedWebhookEventModel.provider_event_id])
            .returning(ProcessedWebhookEventModel.provider_event_id)
        )
        return result.scalar_one_or_none() is not None
