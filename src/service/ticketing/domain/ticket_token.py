import re
import secrets
import string
import time
from typing import Any, Optional


TOKEN_PREFIX = 'ticket'
RANDOM_PART_LENGTH = 9
_ALPHABET = string.ascii_lowercase + string.digits
_TOKEN_PATTERN = re.compile(rf'^{TOKEN_PREFIX}_\d+_[a-z0-9]{{{RANDOM_PART_LENGTH}}}$')


class TokenGenerator:
    """
    Opaque ticket tokens: `ticket_<epoch millis>_<9 lowercase alphanumerics>`

    The token is what the QR code encodes and what gate staff scan. A valid
    shape says nothing about whether the ticket exists.
    """

    def generate(self, *, now_ms: Optional[int] = None) -> str:
        millis = now_ms if now_ms is not None else time.time_ns() // 1_000_000
        random_part = ''.join(secrets.choice(_ALPHABET) for _ in range(RANDOM_PART_LENGTH))
        return f'{TOKEN_PREFIX}_{millis}_{random_part}'

    @staticmethod
    def validate_syntax(token: Any) -> bool:
        return isinstance(token, str) and _TOKEN_PATTERN.fullmatch(token) is not None
