"""
Test Configuration and Fixtures

- Unit tests (`@pytest.mark.unit`) run against in-memory fakes, see
  test/service/ticketing/fakes.py
- Integration tests (`@pytest.mark.integration`) need PostgreSQL; they are
  skipped when the database cannot be reached
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings are read once, at import time of src.platform.config.core_setting
# =============================================================================
import os


def _early_setup_test_environment() -> None:
    os.environ['POSTGRES_DB'] = os.environ.get('TEST_POSTGRES_DB', 'ticketing_core_test_db')
    os.environ['PAYMENT_GATEWAY'] = 'mock'
    os.environ['NOTIFIER'] = 'mock'
    os.environ['DEBUG'] = 'true'
    os.environ['MOCK_WEBHOOK_SECRET'] = 'test_webhook_secret'
    os.environ['NOTIFY_RETRY_BACKOFF_SECONDS'] = '0'
    os.environ.setdefault('LOG_DIR', 'logs/test')
    os.environ.setdefault('DB_POOL_SIZE', '2')
    os.environ.setdefault('DB_POOL_MAX_OVERFLOW', '2')


_early_setup_test_environment()

import asyncio  # noqa: E402
from collections.abc import AsyncGenerator  # noqa: E402

from alembic import command  # noqa: E402
from alembic.config import Config  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import text  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402

from src.platform.config.core_setting import settings  # noqa: E402
from src.platform.constant.path import ALEMBIC_INI  # noqa: E402


_database_ready: bool | None = None


# =============================================================================
# Database Setup
# =============================================================================
async def _setup_test_database() -> None:
    db_url = settings.DATABASE_URL_ASYNC

    # Create database if not exists
    postgres_url = db_url.replace(f'/{settings.POSTGRES_DB}', '/postgres')
    engine = create_async_engine(postgres_url, isolation_level='AUTOCOMMIT')
    try:
        async with engine.begin() as conn:
            result = await conn.execute(
                text('SELECT 1 FROM pg_database WHERE datname = :name'),
                {'name': settings.POSTGRES_DB},
            )
            if not result.fetchone():
                await conn.execute(text(f'CREATE DATABASE "{settings.POSTGRES_DB}"'))
    finally:
        await engine.dispose()

    # Reset schema, then migrate
    reset_engine = create_async_engine(db_url)
    try:
        async with reset_engine.begin() as conn:
            await conn.execute(text('DROP SCHEMA public CASCADE'))
            await conn.execute(text('CREATE SCHEMA public'))
    finally:
        await reset_engine.dispose()

    # env.py runs its own event loop
    await asyncio.to_thread(command.upgrade, Config(str(ALEMBIC_INI)), 'head')


def _ensure_database() -> bool:
    global _database_ready
    if _database_ready is None:
        try:
            asyncio.run(_setup_test_database())
            _database_ready = True
        except Exception as e:
            print(f'⚠️ PostgreSQL unavailable, integration tests skipped: {e}')
            _database_ready = False
    return _database_ready


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    integration = [item for item in items if item.get_closest_marker('integration')]
    if not integration or _ensure_database():
        return

    skip = pytest.mark.skip(reason='PostgreSQL is not reachable')
    for item in integration:
        item.add_marker(skip)


async def _truncate_all_tables() -> None:
    engine = create_async_engine(settings.DATABASE_URL_ASYNC)
    try:
        async with engine.begin() as conn:
            await conn.execute(
                text(
                    'TRUNCATE processed_webhook_event, "transaction", ticket, attendee, '
                    'ticket_type, event CASCADE'
                )
            )
    finally:
        await engine.dispose()


@pytest.fixture
async def clean_database() -> AsyncGenerator[None, None]:
    """Empty tables before each integration test; engine is disposed per test loop."""
    from src.platform.database.orm_db_setting import dispose_engine

    await _truncate_all_tables()
    yield
    await dispose_engine()
