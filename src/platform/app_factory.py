"""
Shared FastAPI App Factory

Provides common app setup for production and test environments.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from src.platform.config.core_setting import settings
from src.platform.exception.exception_handlers import register_exception_handlers
from src.service.ticketing.driving_adapter.http_controller.checkin_controller import (
    router as checkin_router,
)
from src.service.ticketing.driving_adapter.http_controller.dev_controller import (
    router as dev_router,
)
from src.service.ticketing.driving_adapter.http_controller.registration_controller import (
    router as registration_router,
)
from src.service.ticketing.driving_adapter.http_controller.reminder_controller import (
    router as reminder_router,
)
from src.service.ticketing.driving_adapter.http_controller.ticket_controller import (
    router as ticket_router,
)
from src.service.ticketing.driving_adapter.http_controller.webhook_controller import (
    router as webhook_router,
)


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    title_suffix: str = '',
    description: str = 'Multi-tenant event ticketing core',
) -> FastAPI:
    """
    Create a configured FastAPI application.

    Args:
        lifespan: Async context manager for app lifespan (startup/shutdown)
        title_suffix: Optional suffix for app title (e.g., " (Test)")
        description: App description

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=f'{settings.PROJECT_NAME}{title_suffix}',
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    register_exception_handlers(app)

    app.include_router(registration_router, prefix='/api/register', tags=['registration'])
    app.include_router(webhook_router, prefix='/api/webhook', tags=['payment'])
    app.include_router(checkin_router, prefix='/api/checkin', tags=['check-in'])
    app.include_router(ticket_router, prefix='/api/ticket', tags=['ticket'])
    app.include_router(reminder_router, prefix='/api/event', tags=['event'])

    # Plays the payment provider; never mounted against a real gateway
    if settings.DEBUG and settings.PAYMENT_GATEWAY == 'mock':
        app.include_router(dev_router, prefix='/dev', tags=['dev'])

    _register_common_endpoints(app)

    return app


def _register_common_endpoints(app: FastAPI) -> None:
    """Register health and metrics endpoints."""

    @app.get('/health')
    async def health_check() -> dict[str, str]:
        """Health check endpoint for container orchestration."""
        return {'status': 'healthy', 'service': settings.PROJECT_NAME}

    @app.get('/metrics')
    async def get_metrics() -> PlainTextResponse:
        """Prometheus metrics endpoint."""
        return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
