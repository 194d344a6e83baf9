"""
Sweep Bookings Use Case

Batch side of the booking lifecycle:
- pending holds whose expires_at has passed → expired (seats released)
- confirmed bookings whose showtime has started → completed
- cancelled or expired bookings whose seat release failed → released again

Each booking goes through the same compare-and-set as the request path, so a
sweep racing a lazy expiry or a late confirm never releases seats twice.
Unfinished releases younger than RELEASE_RETRY_GRACE are left to the request
that owns them.
"""

from src.platform.logging.loguru_io import Logger
from src.platform.types.clock import Clock
from src.service.booking.app.command.booking_transition_helper import (
    RELEASE_RETRY_GRACE,
    retry_seat_release,
)
from src.service.booking.app.command.complete_booking_use_case import CompleteBookingUseCase
from src.service.booking.app.command.expire_booking_use_case import ExpireBookingUseCase
from src.service.booking.app.dto.sweep_result import SweepResult
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.app.interface.i_showtime_inventory import IShowtimeInventory
from src.service.booking.domain.booking_errors import InvalidStateError


class SweepBookingsUseCase:
    def __init__(
        self,
        *,
        booking_command_repo: IBookingCommandRepo,
        showtime_inventory: IShowtimeInventory,
        expire_booking_use_case: ExpireBookingUseCase,
        complete_booking_use_case: CompleteBookingUseCase,
        clock: Clock,
        batch_size: int = 100,
    ) -> None:
        self.booking_command_repo = booking_command_repo
        self.showtime_inventory = showtime_inventory
        self.expire_booking_use_case = expire_booking_use_case
        self.complete_booking_use_case = complete_booking_use_case
        self.clock = clock
        self.batch_size = batch_size

    @Logger.io
    async def sweep(self) -> SweepResult:
        now = self.clock()
        expired = completed = released = skipped = 0

        for booking in await self.booking_command_repo.list_lapsed_holds(
            now=now, limit=self.batch_size
        ):
            try:
                await self.expire_booking_use_case.expire(booking=booking)
                expired += 1
            except InvalidStateError as e:
                # Confirmed, cancelled or expired by someone else since the listing
                Logger.base.info(f'⏭️  [SWEEP] Skipped {booking.booking_ref}: {e.message}')
                skipped += 1

        for booking in await self.booking_command_repo.list_started_confirmed(
            now=now, limit=self.batch_size
        ):
            try:
                await self.complete_booking_use_case.complete(booking=booking)
                completed += 1
            except InvalidStateError as e:
                Logger.base.info(f'⏭️  [SWEEP] Skipped {booking.booking_ref}: {e.message}')
                skipped += 1

        for booking in await self.booking_command_repo.list_unreleased(
            updated_before=now - RELEASE_RETRY_GRACE, limit=self.batch_size
        ):
            try:
                await retry_seat_release(
                    booking_command_repo=self.booking_command_repo,
                    showtime_inventory=self.showtime_inventory,
                    booking=booking,
                    now=now,
                )
                released += 1
            except InvalidStateError as e:
                Logger.base.info(f'⏭️  [SWEEP] Skipped {booking.booking_ref}: {e.message}')
                skipped += 1

        if expired or completed or released:
            Logger.base.info(
                f'🧹 [SWEEP] expired={expired} completed={completed} '
                f'released={released} skipped={skipped}'
            )
        return SweepResult(expired=expired, completed=completed, released=released, skipped=skipped)
