"""
Booking domain errors

Each error maps to one row of the booking error taxonomy; the HTTP status
code travels with the exception so the boundary does not need a lookup table.
"""

from typing import Any, Iterable

from src.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
)


class ShowtimeNotFoundError(NotFoundError):
    def __init__(self, showtime_id: str) -> None:
        self.showtime_id = showtime_id
        super().__init__(f'Showtime not found: {showtime_id}')


class BookingNotFoundError(NotFoundError):
    def __init__(self, booking_key: str) -> None:
        self.booking_key = booking_key
        super().__init__(f'Booking not found: {booking_key}')


class SeatsUnavailableError(ConflictError):
    """Claim lost: at least one requested seat is already booked."""

    def __init__(self, seat_ids: Iterable[str]) -> None:
        self.seat_ids = sorted(set(seat_ids))
        super().__init__(
            f'Seats already booked: {", ".join(self.seat_ids)}. Please choose other seats.'
        )

    def response_content(self) -> dict[str, Any]:
        return {'detail': self.message, 'unavailable_seats': self.seat_ids}


class InvalidStateError(ConflictError):
    def __init__(self, message: str) -> None:
        super().__init__(message)


class ShowtimeNotBookableError(InvalidStateError):
    def __init__(self, showtime_id: str, status: str) -> None:
        self.showtime_id = showtime_id
        self.showtime_status = status
        super().__init__(f'Showtime {showtime_id} is {status} and cannot be booked')


class CannotCancelPastError(DomainError):
    def __init__(self, booking_ref: str) -> None:
        super().__init__(f'Cannot cancel past booking {booking_ref}', 400)


class BookingValidationError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class DuplicateBookingRefError(Exception):
    """Raised by repositories when booking_ref violates the unique index."""

    def __init__(self, booking_ref: str) -> None:
        self.booking_ref = booking_ref
        super().__init__(f'Duplicate booking_ref: {booking_ref}')
