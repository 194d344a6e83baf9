"""
Showtime Inventory Interface

The only component allowed to mutate a showtime's booked_seats.
"""

from abc import ABC, abstractmethod
from typing import List

import attrs

from src.service.booking.domain.entity.showtime_entity import Showtime


@attrs.frozen
class SeatReleaseResult:
    showtime: Showtime | None
    released: List[str] = attrs.field(factory=list)
    missing: List[str] = attrs.field(factory=list)


class IShowtimeInventory(ABC):
    @abstractmethod
    async def get_showtime(self, *, showtime_id: str) -> Showtime | None:
        """Read current persisted state (never a cached copy)."""
        pass

    @abstractmethod
    async def check_available(self, *, showtime_id: str, seat_ids: List[str]) -> bool:
        """
        True iff none of seat_ids is currently booked.

        Raises:
            ShowtimeNotFoundError: showtime does not exist
        """
        pass

    @abstractmethod
    async def claim(self, *, showtime_id: str, seat_ids: List[str]) -> Showtime:
        """
        Atomically append seat_ids to booked_seats if none is taken yet.

        Availability check, append and the available_seats/status projection
        happen in one conditional write. All-or-nothing.

        Returns:
            Showtime state after the claim

        Raises:
            ShowtimeNotFoundError: showtime does not exist
            ShowtimeNotBookableError: showtime is cancelled/completed/full
            SeatsUnavailableError: at least one seat is already booked
        """
        pass

    @abstractmethod
    async def release(self, *, showtime_id: str, seat_ids: List[str]) -> SeatReleaseResult:
        """
        Remove seat_ids from booked_seats. Idempotent: absent seats are a no-op
        and are reported in SeatReleaseResult.missing.
        """
        pass
