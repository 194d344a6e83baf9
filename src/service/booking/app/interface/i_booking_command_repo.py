"""
Booking Command Repository Interface
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List

from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_status import BookingStatus


class IBookingCommandRepo(ABC):
    @abstractmethod
    async def create(self, *, booking: Booking) -> Booking:
        """
        Insert a new booking.

        Raises:
            DuplicateBookingRefError: booking_ref already used
            TransientStorageError: write failed
        """
        pass

    @abstractmethod
    async def get_by_id(self, *, booking_id: str) -> Booking | None:
        pass

    @abstractmethod
    async def get_by_ref(self, *, booking_ref: str) -> Booking | None:
        pass

    @abstractmethod
    async def save_transition(self, *, booking: Booking, expected_status: BookingStatus) -> bool:
        """
        Persist booking only if the stored status still equals expected_status.

        Returns:
            False when another worker moved the booking first
        """
        pass

    @abstractmethod
    async def list_lapsed_holds(self, *, now: datetime, limit: int = 100) -> List[Booking]:
        """Pending bookings whose expires_at <= now."""
        pass

    @abstractmethod
    async def list_started_confirmed(self, *, now: datetime, limit: int = 100) -> List[Booking]:
        """Confirmed bookings whose showtime starts_at <= now."""
        pass

    @abstractmethod
    async def mark_seats_released(self, *, booking_id: str, released_at: datetime) -> bool:
        """
        Record that the seats of a cancelled or expired booking were released.

        Returns:
            False when the booking was already marked
        """
        pass

    @abstractmethod
    async def list_unreleased(self, *, updated_before: datetime, limit: int = 100) -> List[Booking]:
        """Cancelled or expired bookings not yet marked released, oldest write first."""
        pass

    @abstractmethod
    async def take_over_release(
        self, *, booking_id: str, last_updated_at: datetime | None, now: datetime
    ) -> bool:
        """
        Claim an unfinished release by moving updated_at from last_updated_at to now.

        Returns:
            False when the booking was released or touched by another worker first
        """
        pass
