from typing import Literal, Optional

from pydantic import BaseModel, Field


class ReminderRequest(BaseModel):
    when: Literal['24h', '1h', 'custom'] = '24h'
    custom_message: Optional[str] = Field(default=None, max_length=1000)
    subject: Optional[str] = Field(default=None, max_length=200)


class ReminderResponse(BaseModel):
    total_attendees: int
    reminders_sent: int
    emails_sent: int
    sms_sent: int
    failed_recipients: list[str] = []
