from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class WebhookResponse(BaseModel):
    received: bool = True
    status: str
    event_id: str
    ticket_id: Optional[UUID] = None
