from datetime import date, datetime, time
from typing import Iterable, List, Optional, Tuple
import zoneinfo

import attrs

from src.service.booking.domain.booking_errors import (
    SeatsUnavailableError,
    ShowtimeNotBookableError,
)
from src.service.booking.domain.enum.showtime_status import ShowtimeStatus
from src.service.booking.domain.value_object.venue import CinemaInfo, HallConfig, TierPricing


def derive_status(current: ShowtimeStatus, available_seats: int) -> ShowtimeStatus:
    """Status projection after booked_seats changed."""
    if available_seats <= 0 and current.accepts_claims:
        return ShowtimeStatus.FULL
    if available_seats > 0 and current == ShowtimeStatus.FULL:
        return ShowtimeStatus.OPEN
    return current


@attrs.define
class Showtime:
    id: str
    movie_id: str
    movie_title: str
    cinema: CinemaInfo
    hall: HallConfig
    pricing: TierPricing
    date: date
    start_time: str  # "14:30"
    booked_seats: List[str] = attrs.field(factory=list)
    status: ShowtimeStatus = ShowtimeStatus.SCHEDULED
    poster_url: Optional[str] = None
    end_time: Optional[str] = None

    @property
    def available_seats(self) -> int:
        return self.hall.total_seats - len(self.booked_seats)

    def starts_at(self, tz_name: str = 'UTC') -> datetime:
        return datetime.combine(
            self.date, time.fromisoformat(self.start_time), tzinfo=zoneinfo.ZoneInfo(tz_name)
        )

    def conflicting_seats(self, seat_ids: Iterable[str]) -> List[str]:
        booked = set(self.booked_seats)
        return [seat_id for seat_id in seat_ids if seat_id in booked]

    def is_available(self, seat_ids: Iterable[str]) -> bool:
        return not self.conflicting_seats(seat_ids)

    def claim_seats(self, seat_ids: List[str]) -> 'Showtime':
        """All-or-nothing claim on this in-memory state; storage adapters do the same in one write."""
        if self.status.is_closed:
            raise ShowtimeNotBookableError(self.id, self.status.value)
        # A full showtime fails on the taken seats so the client can re-render
        if conflicts := self.conflicting_seats(seat_ids):
            raise SeatsUnavailableError(conflicts)
        if not self.status.accepts_claims:
            raise ShowtimeNotBookableError(self.id, self.status.value)

        booked_seats = [*self.booked_seats, *seat_ids]
        available = self.hall.total_seats - len(booked_seats)
        return attrs.evolve(
            self, booked_seats=booked_seats, status=derive_status(self.status, available)
        )

    def release_seats(self, seat_ids: Iterable[str]) -> Tuple['Showtime', List[str], List[str]]:
        """
        Remove seats from booked_seats.

        Returns:
            (new showtime, released seat ids, seat ids that were not booked)
        """
        to_release = list(dict.fromkeys(seat_ids))
        booked = set(self.booked_seats)
        released = [seat_id for seat_id in to_release if seat_id in booked]
        missing = [seat_id for seat_id in to_release if seat_id not in booked]

        remaining = [seat_id for seat_id in self.booked_seats if seat_id not in set(to_release)]
        available = self.hall.total_seats - len(remaining)
        updated = attrs.evolve(
            self, booked_seats=remaining, status=derive_status(self.status, available)
        )
        return updated, released, missing
