from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel


class SimulatePaymentRequest(BaseModel):
    ticket_id: UUID
    simulate: Literal['success', 'failure'] = 'success'


class SimulatePaymentResponse(BaseModel):
    simulation: bool = True
    status: str
    event_id: str
    ticket_id: Optional[UUID] = None
