from typing import List, Literal, Optional

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.platform.constant.path import ENV_EXAMPLE_FILE, ENV_FILE


_ENV_FILE = ENV_FILE if ENV_FILE.exists() else ENV_EXAMPLE_FILE


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Tenant Ticketing Core'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Logging
    LOG_LEVEL: Optional[str] = None  # defaults to DEBUG when DEBUG is on, else INFO
    LOG_JSON: bool = False  # one JSON object per line on stdout, for log shippers
    LOG_DIR: Optional[str] = None  # rotated file sink, DEBUG only

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',')]
        elif isinstance(v, list):
            return v
        return []

    # PostgreSQL
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'ticketing_core'

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        return (
            f'postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD.get_secret_value()}'
            f'@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'
        )

    # SQLAlchemy pool
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30  # seconds to wait for a connection
    DB_POOL_RECYCLE: int = 1800  # seconds before a connection is recycled
    DB_POOL_PRE_PING: bool = True

    # Payment gateway
    PAYMENT_GATEWAY: Literal['mock', 'stripe'] = 'mock'
    STRIPE_SECRET_KEY: SecretStr = SecretStr('')
    STRIPE_WEBHOOK_SECRET: SecretStr = SecretStr('')
    MOCK_WEBHOOK_SECRET: SecretStr = SecretStr('mock_webhook_secret_change_me')

    # Notifier
    NOTIFIER: Literal['mock', 'http'] = 'mock'
    SENDGRID_API_KEY: SecretStr = SecretStr('')
    SENDGRID_FROM_EMAIL: str = 'noreply@example.com'
    TWILIO_ACCOUNT_SID: str = ''
    TWILIO_AUTH_TOKEN: SecretStr = SecretStr('')
    TWILIO_FROM_NUMBER: str = ''
    NOTIFY_MAX_ATTEMPTS: int = 3
    NOTIFY_RETRY_BACKOFF_SECONDS: float = 0.5  # doubled after every failed attempt
    NOTIFY_HTTP_TIMEOUT_SECONDS: float = 10.0

    # Check-in window (per-event values on the event row take precedence)
    CHECKIN_OPENS_BEFORE_START_MINUTES: int = 120
    CHECKIN_CLOSES_AFTER_END_MINUTES: int = 0

    # Pending paid tickets older than this lose their reservation
    PENDING_TICKET_TTL_MINUTES: int = 30

    # Used to build links in reminder emails
    PUBLIC_BASE_URL: str = 'http://localhost:8000'


settings = Settings()  # type: ignore
