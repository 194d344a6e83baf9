"""Booking Domain Enums"""

from src.service.booking.domain.enum.booking_status import ALLOWED_TRANSITIONS, BookingStatus
from src.service.booking.domain.enum.payment import PaymentMethod, PaymentStatus
from src.service.booking.domain.enum.seat_tier import SeatTier
from src.service.booking.domain.enum.showtime_status import ShowtimeStatus

__all__ = [
    'ALLOWED_TRANSITIONS',
    'BookingStatus',
    'PaymentMethod',
    'PaymentStatus',
    'SeatTier',
    'ShowtimeStatus',
]
