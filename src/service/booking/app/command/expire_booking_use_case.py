from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.platform.types.clock import Clock
from src.service.booking.app.command.booking_transition_helper import (
    RELEASE_RETRY_GRACE,
    expire_hold,
    load_booking,
    retry_seat_release,
)
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.app.interface.i_showtime_inventory import IShowtimeInventory
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_status import BookingStatus


class ExpireBookingUseCase:
    """
    pending → expired once expires_at has passed; seats are released exactly once.

    Expiring an already expired booking whose release failed more than
    RELEASE_RETRY_GRACE ago runs the release again.
    """

    def __init__(
        self,
        *,
        booking_command_repo: IBookingCommandRepo,
        showtime_inventory: IShowtimeInventory,
        clock: Clock,
    ) -> None:
        self.booking_command_repo = booking_command_repo
        self.showtime_inventory = showtime_inventory
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        booking_command_repo: IBookingCommandRepo = Depends(
            Provide[Container.booking_command_repo]
        ),
        showtime_inventory: IShowtimeInventory = Depends(Provide[Container.showtime_inventory]),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            booking_command_repo=booking_command_repo,
            showtime_inventory=showtime_inventory,
            clock=clock,
        )

    @Logger.io
    async def expire_booking(self, *, booking_id: str) -> Booking:
        booking = await load_booking(
            booking_command_repo=self.booking_command_repo, booking_id=booking_id, user_id=None
        )
        now = self.clock()
        if booking.status == BookingStatus.EXPIRED and booking.release_overdue(
            now=now, grace=RELEASE_RETRY_GRACE
        ):
            return await retry_seat_release(
                booking_command_repo=self.booking_command_repo,
                showtime_inventory=self.showtime_inventory,
                booking=booking,
                now=now,
            )
        return await self.expire(booking=booking)

    async def expire(self, *, booking: Booking) -> Booking:
        return await expire_hold(
            booking_command_repo=self.booking_command_repo,
            showtime_inventory=self.showtime_inventory,
            booking=booking,
            now=self.clock(),
        )
