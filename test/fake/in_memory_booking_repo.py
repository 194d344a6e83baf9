import asyncio
from datetime import datetime
from typing import Dict, List

import attrs

from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.booking.domain.booking_errors import DuplicateBookingRefError
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_status import BookingStatus


class InMemoryBookingRepo(IBookingCommandRepo, IBookingQueryRepo):
    """Command and query side over one dict; status writes are compare-and-set."""

    def __init__(self) -> None:
        self.bookings: Dict[str, Booking] = {}
        self.fail_create_with: Exception | None = None
        self.create_attempts = 0

    def add(self, booking: Booking) -> Booking:
        self.bookings[booking.id] = booking
        return booking

    async def create(self, *, booking: Booking) -> Booking:
        await asyncio.sleep(0)
        self.create_attempts += 1
        if self.fail_create_with is not None:
            raise self.fail_create_with
        if any(b.booking_ref == booking.booking_ref for b in self.bookings.values()):
            raise DuplicateBookingRefError(booking.booking_ref)
        self.bookings[booking.id] = booking
        return booking

    async def get_by_id(self, *, booking_id: str) -> Booking | None:
        await asyncio.sleep(0)
        return self.bookings.get(booking_id)

    async def get_by_ref(self, *, booking_ref: str) -> Booking | None:
        await asyncio.sleep(0)
        return next((b for b in self.bookings.values() if b.booking_ref == booking_ref), None)

    async def save_transition(self, *, booking: Booking, expected_status: BookingStatus) -> bool:
        await asyncio.sleep(0)
        stored = self.bookings.get(booking.id)
        if stored is None or stored.status != expected_status:
            return False
        self.bookings[booking.id] = booking
        return True

    async def list_lapsed_holds(self, *, now: datetime, limit: int = 100) -> List[Booking]:
        lapsed = [b for b in self.bookings.values() if b.is_hold_expired(now)]
        return sorted(lapsed, key=lambda b: b.expires_at or now)[:limit]

    async def list_started_confirmed(self, *, now: datetime, limit: int = 100) -> List[Booking]:
        started = [
            b
            for b in self.bookings.values()
            if b.status == BookingStatus.CONFIRMED and b.showtime.starts_at <= now
        ]
        return sorted(started, key=lambda b: b.showtime.starts_at)[:limit]

    async def mark_seats_released(self, *, booking_id: str, released_at: datetime) -> bool:
        await asyncio.sleep(0)
        stored = self.bookings.get(booking_id)
        if stored is None or stored.seats_released_at is not None:
            return False
        self.bookings[booking_id] = stored.mark_seats_released(now=released_at)
        return True

    async def take_over_release(
        self, *, booking_id: str, last_updated_at: datetime | None, now: datetime
    ) -> bool:
        await asyncio.sleep(0)
        stored = self.bookings.get(booking_id)
        if (
            stored is None
            or stored.seats_released_at is not None
            or stored.updated_at != last_updated_at
        ):
            return False
        self.bookings[booking_id] = attrs.evolve(stored, updated_at=now)
        return True

    async def list_unreleased(self, *, updated_before: datetime, limit: int = 100) -> List[Booking]:
        unreleased = [
            b
            for b in self.bookings.values()
            if b.awaits_seat_release and (b.updated_at or updated_before) <= updated_before
        ]
        return sorted(unreleased, key=lambda b: b.updated_at or updated_before)[:limit]

    async def list_by_user(self, *, user_id: str, status: str = '') -> List[Booking]:
        bookings = [
            b
            for b in self.bookings.values()
            if b.user_id == user_id and (not status or b.status.value == status)
        ]
        return sorted(bookings, key=lambda b: b.created_at or datetime.min, reverse=True)
