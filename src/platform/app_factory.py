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
from src.platform.constant.route_constant import BOOKING_BASE, PAYMENT_BASE, SHOWTIME_BASE
from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.observability.tracing import TracingConfig
from src.service.booking.driving_adapter.http_controller.booking_controller import (
    router as booking_router,
)
from src.service.booking.driving_adapter.http_controller.payment_controller import (
    router as payment_router,
)
from src.service.booking.driving_adapter.http_controller.showtime_controller import (
    router as showtime_router,
)


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    title_suffix: str = '',
    description: str = 'Cinema seat inventory and booking API',
    service_name: str = 'popcorn-api',
) -> FastAPI:
    """
    Create a configured FastAPI application.

    Args:
        lifespan: Async context manager for app lifespan (startup/shutdown)
        title_suffix: Optional suffix for app title (e.g., " (Test)")
        description: App description
        service_name: Service name for tracing
    """
    app = FastAPI(
        title=f'{settings.PROJECT_NAME}{title_suffix}',
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    # Auto-instrument FastAPI (must be done before mounting routes)
    TracingConfig(service_name=service_name).instrument_fastapi(app=app)

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    register_exception_handlers(app)

    app.include_router(booking_router, prefix=BOOKING_BASE, tags=['booking'])
    app.include_router(showtime_router, prefix=SHOWTIME_BASE, tags=['showtime'])
    app.include_router(payment_router, prefix=PAYMENT_BASE, tags=['payment'])

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
