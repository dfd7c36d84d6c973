"""Reminder broadcast result DTO."""

import attrs


@attrs.define
class ReminderResult:
    total: int = 0
    emails_sent: int = 0
    sms_sent: int = 0
    failed_recipients: list[str] = attrs.field(factory=list)

    @property
    def failed(self) -> int:
        return len(self.failed_recipients)
