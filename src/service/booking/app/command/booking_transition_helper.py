"""
Shared steps of the booking state machine

Every status write is a compare-and-set on the previous status, so when two
workers race (sweep vs. lazy expiry, confirm vs. cancel) exactly one of them
persists its transition and only that one releases seats. A release that
fails is retried later from the booking, which stays marked unreleased.
"""

from datetime import datetime, timedelta
from typing import Optional

import attrs

from src.platform.exception.exceptions import ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.app.interface.i_showtime_inventory import (
    IShowtimeInventory,
    SeatReleaseResult,
)
from src.service.booking.domain.booking_errors import BookingNotFoundError, InvalidStateError
from src.service.booking.domain.entity.booking_entity import Booking


# Unfinished releases younger than this may still be owned by a running request
RELEASE_RETRY_GRACE = timedelta(minutes=1)


async def persist_transition(
    *, booking_command_repo: IBookingCommandRepo, before: Booking, after: Booking
) -> Booking:
    saved = await booking_command_repo.save_transition(
        booking=after, expected_status=before.status
    )
    if not saved:
        raise InvalidStateError(
            f'Booking {before.booking_ref} is no longer {before.status.value}; '
            'it was changed by another request'
        )
    metrics.record_transition(from_status=before.status.value, to_status=after.status.value)
    Logger.base.info(
        f'🔁 [BOOKING] {after.booking_ref}: {before.status.value} → {after.status.value}'
    )
    return after


@Logger.io
async def release_booking_seats(
    *, showtime_inventory: IShowtimeInventory, booking: Booking, reason: str
) -> SeatReleaseResult:
    result = await showtime_inventory.release(
        showtime_id=booking.showtime.id, seat_ids=booking.seat_ids
    )

    if result.showtime is None:
        Logger.base.warning(
            f'⚠️  [RELEASE] Showtime {booking.showtime.id} of booking {booking.booking_ref} '
            'no longer exists; nothing to release'
        )
    elif result.missing:
        # Booking and showtime disagree. Reported, never reconciled here.
        metrics.inventory_invariant_violations.inc(len(result.missing))
        Logger.base.warning(
            f'⚠️  [INVARIANT] Booking {booking.booking_ref} holds seats {result.missing} '
            f'that showtime {booking.showtime.id} does not list as booked'
        )

    metrics.record_seats_released(reason=reason, count=len(result.released))
    return result


async def settle_seat_release(
    *,
    booking_command_repo: IBookingCommandRepo,
    showtime_inventory: IShowtimeInventory,
    booking: Booking,
    now: datetime,
) -> Booking:
    """
    Hand the seats of a cancelled or expired booking back, then mark it released.

    A failed release leaves seats_released_at unset. Once RELEASE_RETRY_GRACE
    has passed, a retried cancel or expire and the sweep run it again.
    """
    await release_booking_seats(
        showtime_inventory=showtime_inventory, booking=booking, reason=booking.status.value
    )
    await booking_command_repo.mark_seats_released(booking_id=booking.id, released_at=now)
    return booking.mark_seats_released(now=now)


async def retry_seat_release(
    *,
    booking_command_repo: IBookingCommandRepo,
    showtime_inventory: IShowtimeInventory,
    booking: Booking,
    now: datetime,
) -> Booking:
    """
    Take over an overdue release and run it.

    Raises:
        InvalidStateError: another worker released it or took it over first
    """
    taken = await booking_command_repo.take_over_release(
        booking_id=booking.id, last_updated_at=booking.updated_at, now=now
    )
    if not taken:
        raise InvalidStateError(
            f'Booking {booking.booking_ref} seat release is already being retried'
        )
    Logger.base.warning(
        f'🔁 [RELEASE] {booking.booking_ref} is {booking.status.value} but still holds '
        f'{booking.seat_ids}, retrying the release'
    )
    return await settle_seat_release(
        booking_command_repo=booking_command_repo,
        showtime_inventory=showtime_inventory,
        booking=attrs.evolve(booking, updated_at=now),
        now=now,
    )


async def expire_hold(
    *,
    booking_command_repo: IBookingCommandRepo,
    showtime_inventory: IShowtimeInventory,
    booking: Booking,
    now: datetime,
) -> Booking:
    expired = await persist_transition(
        booking_command_repo=booking_command_repo,
        before=booking,
        after=booking.expire(now=now),
    )
    return await settle_seat_release(
        booking_command_repo=booking_command_repo,
        showtime_inventory=showtime_inventory,
        booking=expired,
        now=now,
    )


async def load_booking(
    *, booking_command_repo: IBookingCommandRepo, booking_id: str, user_id: Optional[str]
) -> Booking:
    """user_id=None skips the ownership check (payment webhooks, sweeper)."""
    booking = await booking_command_repo.get_by_id(booking_id=booking_id)
    if booking is None:
        raise BookingNotFoundError(booking_id)
    if user_id is not None and booking.user_id != user_id:
        raise ForbiddenError('Booking belongs to another user')
    return booking
