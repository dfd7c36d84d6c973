from typing import Optional
from uuid import UUID

import attrs


def _normalize_email(value: str) -> str:
    return value.strip().lower()


@attrs.define
class Attendee:
    id: UUID
    name: str
    email: str = attrs.field(converter=_normalize_email)
    phone: Optional[str] = None
    company: Optional[str] = None
