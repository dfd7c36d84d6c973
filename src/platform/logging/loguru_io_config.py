from contextvars import ContextVar
from enum import StrEnum
import logging
from pathlib import Path
import sys
from typing import TYPE_CHECKING

from loguru import logger as loguru_logger


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.constant.path import LOG_DIR as DEFAULT_LOG_DIR
from src.platform.logging.service_context import get_service_context


LOG_LEVEL = settings.LOG_LEVEL or ('DEBUG' if settings.DEBUG else 'INFO')
LOG_DIR = Path(settings.LOG_DIR) if settings.LOG_DIR else DEFAULT_LOG_DIR


# Keys whose values never reach a log line
SENSITIVE_KEYWORDS = {
    'password',
    'client_secret',
    'signature',
    'stripe_signature',
    'api_key',
    'secret',
    'authorization',
}
MASK = '********'

chain_start_time_var: ContextVar[float] = ContextVar('chain_start_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


def _parse_http_status_level(message: str) -> str | None:
    """
    Map an access log line to a log level by its HTTP status.

    Format: '127.0.0.1:51234 - "POST /api/checkin HTTP/1.1" 409'

    Returns:
        Log level string if an HTTP status was found, None otherwise
    """
    if ' HTTP/' not in message or '"' not in message:
        return None

    tail = message.rsplit('"', 1)[-1].replace('-', ' ').split()
    if not tail or not tail[0].isdigit():
        return None

    status_code = int(tail[0])
    if status_code >= 500:
        return 'ERROR'
    if status_code >= 400:
        return 'WARNING'
    return 'INFO'


_intercept_bound_logger = None  # Cached bound logger for InterceptHandler


def _get_intercept_bound_logger() -> 'LoguruLogger':
    global _intercept_bound_logger
    if _intercept_bound_logger is None:
        _intercept_bound_logger = loguru_logger.bind(
            **{
                ExtraField.SERVICE_CONTEXT: get_service_context(),
                ExtraField.CHAIN_START_TIME: '',
                ExtraField.CALL_TARGET: '',
            }
        )
    return _intercept_bound_logger


class InterceptHandler(logging.Handler):
    """Route stdlib logging (uvicorn, sqlalchemy, httpx, stripe) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        message = record.getMessage()

        if record.levelno <= logging.DEBUG and 'Using selector:' in message:
            return  # asyncio selector noise

        level = _parse_http_status_level(message) if record.name.startswith('uvicorn') else None
        if level is None:
            try:
                level = loguru_logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        _get_intercept_bound_logger().opt(depth=depth, exception=record.exc_info).log(
            level, message
        )


# Log format for LoguruIO decorated functions
io_log_format = ' | '.join(
    (
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        '{message}',
        '<lk>{elapsed}</>',
        f'<lk>{{extra[{ExtraField.CHAIN_START_TIME}]:<18}}</>',
    )
)


loguru_logger.remove()  # Remove default handler to avoid duplicate output and use custom format
custom_logger = loguru_logger.bind(
    **{
        ExtraField.SERVICE_CONTEXT: get_service_context(),
        ExtraField.CHAIN_START_TIME: '',
        ExtraField.CALL_TARGET: '',
    }
)

if settings.LOG_JSON:
    custom_logger.add(sys.stdout, serialize=True, level=LOG_LEVEL, enqueue=True)
else:
    custom_logger.add(sys.stdout, format=io_log_format, level=LOG_LEVEL, enqueue=True)

# Hourly files only while debugging; deployed instances ship stdout
if settings.DEBUG:
    custom_logger.add(
        str(LOG_DIR / '{time:YYYY-MM-DD_HH}.log'),
        format=io_log_format,
        rotation='1 hour',
        retention='7 days',
        compression='gz',
        enqueue=True,
        level=LOG_LEVEL,
    )

logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

# Outbound request lines carry provider account ids (Twilio SID in the URL)
for _client_logger in ('httpx', 'httpcore', 'stripe'):
    logging.getLogger(_client_logger).setLevel(logging.DEBUG if settings.DEBUG else logging.WARNING)
