import anyio
from anyio.abc import TaskGroup

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.sweep_bookings_use_case import SweepBookingsUseCase


class ExpirySweeper:
    """Runs SweepBookingsUseCase every ``interval`` seconds inside the app task group."""

    def __init__(self, *, sweep_use_case: SweepBookingsUseCase, interval: float = 60.0) -> None:
        self.sweep_use_case = sweep_use_case
        self.interval = interval

    async def start(self, *, task_group: TaskGroup) -> None:
        task_group.start_soon(self._sweep_loop)
        Logger.base.info(f'🧹 [Sweeper] Started, interval={self.interval}s')

    async def run_once(self) -> None:
        try:
            await self.sweep_use_case.sweep()
        except Exception as e:
            # Next tick retries; one bad pass must not stop the loop
            Logger.base.error(f'❌ [Sweeper] Sweep failed: {e}')

    async def _sweep_loop(self) -> None:
        while True:
            await self.run_once()
            await anyio.sleep(self.interval)
