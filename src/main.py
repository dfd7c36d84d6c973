"""
Production FastAPI Application

Ticketing API plus the background task group that carries notification delivery.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import dispose_engine, get_engine
from src.platform.logging.loguru_io import Logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Ticketing] Starting up...')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Ticketing] Dependency injection wired')

    get_engine()
    Logger.base.info('🗄️  [Ticketing] Database engine ready')
    Logger.base.info(
        f'💳 [Ticketing] Payment gateway: {settings.PAYMENT_GATEWAY}, notifier: {settings.NOTIFIER}'
    )

    dispatcher = container.notification_dispatcher()
    async with anyio.create_task_group() as tg:
        dispatcher.attach_task_group(tg)
        Logger.base.info('✅ [Ticketing] Ready to serve requests')

        yield

        Logger.base.info('🛑 [Ticketing] Shutting down...')
        dispatcher.detach_task_group()
        tg.cancel_scope.cancel()

    await dispose_engine()
    Logger.base.info('🗄️  [Ticketing] Database engine disposed')

    container.unwire()
    Logger.base.info('👋 [Ticketing] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
