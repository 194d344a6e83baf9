from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.platform.types.clock import Clock
from src.service.booking.app.command.booking_transition_helper import (
    RELEASE_RETRY_GRACE,
    load_booking,
    persist_transition,
    retry_seat_release,
    settle_seat_release,
)
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.app.interface.i_showtime_inventory import IShowtimeInventory
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_status import BookingStatus


class CancelBookingUseCase:
    """
    Cancel a pending or confirmed booking before its showtime starts.

    Flow:
    1. Validate booking exists and the caller owns it
    2. Domain check (state machine + showtime not started)
    3. Compare-and-set the status; losing the race raises InvalidStateError
    4. Release the seats (only the winner of step 3 gets here)

    Cancelling a booking that is already cancelled, but whose release failed
    more than RELEASE_RETRY_GRACE ago, runs the release again instead of failing.
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
    async def cancel_booking(
        self, *, booking_id: str, user_id: Optional[str], reason: Optional[str] = None
    ) -> Booking:
        booking = await load_booking(
            booking_command_repo=self.booking_command_repo,
            booking_id=booking_id,
            user_id=user_id,
        )

        now = self.clock()
        if booking.status == BookingStatus.CANCELLED and booking.release_overdue(
            now=now, grace=RELEASE_RETRY_GRACE
        ):
            return await retry_seat_release(
                booking_command_repo=self.booking_command_repo,
                showtime_inventory=self.showtime_inventory,
                booking=booking,
                now=now,
            )

        cancelled = await persist_transition(
            booking_command_repo=self.booking_command_repo,
            before=booking,
            after=booking.cancel(reason=reason, now=now),
        )
        return await settle_seat_release(
            booking_command_repo=self.booking_command_repo,
            showtime_inventory=self.showtime_inventory,
            booking=cancelled,
            now=now,
        )
