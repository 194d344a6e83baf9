from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.dto.seat_layout import SeatLayout
from src.service.booking.app.interface.i_showtime_inventory import IShowtimeInventory
from src.service.booking.domain.booking_errors import ShowtimeNotFoundError
from src.service.booking.domain.seat_map import build_layout


class GetSeatLayoutUseCase:
    def __init__(self, *, showtime_inventory: IShowtimeInventory) -> None:
        self.showtime_inventory = showtime_inventory

    @classmethod
    @inject
    def depends(
        cls,
        showtime_inventory: IShowtimeInventory = Depends(Provide[Container.showtime_inventory]),
    ) -> Self:
        return cls(showtime_inventory=showtime_inventory)

    @Logger.io
    async def get_seat_layout(self, *, showtime_id: str) -> SeatLayout:
        """Always built from the persisted booked_seats; never cached."""
        showtime = await self.showtime_inventory.get_showtime(showtime_id=showtime_id)
        if showtime is None:
            raise ShowtimeNotFoundError(showtime_id)
        return SeatLayout(
            showtime=showtime,
            rows=build_layout(showtime.hall, showtime.pricing, showtime.booked_seats),
        )
