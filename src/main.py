"""
Production FastAPI Application

MongoDB-backed booking API plus the background expiry sweeper.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.di import Container, cleanup, container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig
from src.service.booking.app.command.complete_booking_use_case import CompleteBookingUseCase
from src.service.booking.app.command.expire_booking_use_case import ExpireBookingUseCase
from src.service.booking.app.command.sweep_bookings_use_case import SweepBookingsUseCase
from src.service.booking.driving_adapter.background.expiry_sweeper import ExpirySweeper


def build_expiry_sweeper(di: Container) -> ExpirySweeper:
    booking_command_repo = di.booking_command_repo()
    clock = di.clock()
    showtime_inventory = di.showtime_inventory()
    sweep_use_case = SweepBookingsUseCase(
        booking_command_repo=booking_command_repo,
        showtime_inventory=showtime_inventory,
        expire_booking_use_case=ExpireBookingUseCase(
            booking_command_repo=booking_command_repo,
            showtime_inventory=showtime_inventory,
            clock=clock,
        ),
        complete_booking_use_case=CompleteBookingUseCase(
            booking_command_repo=booking_command_repo, clock=clock
        ),
        clock=clock,
    )
    return ExpirySweeper(
        sweep_use_case=sweep_use_case,
        interval=di.config_service().EXPIRY_SWEEP_INTERVAL_SECONDS,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Popcorn API] Starting up...')

    tracing = TracingConfig(service_name='popcorn-api')
    tracing.setup()
    tracing.instrument_pymongo()
    Logger.base.info('📊 [Popcorn API] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Popcorn API] Dependency injection wired')

    # Fail fast when MongoDB is unreachable
    database = container.mongo_database()
    await database.ping()
    await database.ensure_indexes()
    Logger.base.info('🍃 [Popcorn API] MongoDB ready')

    async with anyio.create_task_group() as tg:
        await build_expiry_sweeper(container).start(task_group=tg)
        Logger.base.info('✅ [Popcorn API] Ready to serve requests')

        yield

        Logger.base.info('🛑 [Popcorn API] Shutting down...')
        tg.cancel_scope.cancel()

    cleanup()
    Logger.base.info('🍃 [Popcorn API] MongoDB client closed')

    tracing.shutdown()
    container.unwire()
    Logger.base.info('👋 [Popcorn API] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
