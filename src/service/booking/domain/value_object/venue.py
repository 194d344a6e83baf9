from typing import Optional

import attrs

from src.service.booking.domain.booking_errors import BookingValidationError
from src.service.booking.domain.enum.seat_tier import SeatTier


MAX_HALL_ROWS = 26  # one letter per row


@attrs.frozen
class CinemaInfo:
    name: str
    location: str
    address: Optional[str] = None


@attrs.frozen
class HallConfig:
    name: str
    rows: int
    columns: int
    total_seats: int
    type: str = '2D'

    @classmethod
    def build(cls, *, name: str, rows: int, columns: int, type: str = '2D') -> 'HallConfig':
        return cls(name=name, rows=rows, columns=columns, total_seats=rows * columns, type=type)

    def __attrs_post_init__(self) -> None:
        if not 1 <= self.rows <= MAX_HALL_ROWS:
            raise BookingValidationError(f'Hall rows must be between 1 and {MAX_HALL_ROWS}')
        if self.columns < 1:
            raise BookingValidationError('Hall columns must be positive')
        if self.total_seats != self.rows * self.columns:
            raise BookingValidationError(
                f'Hall total_seats {self.total_seats} does not match '
                f'{self.rows} rows x {self.columns} columns'
            )


@attrs.frozen
class TierPricing:
    """Per-tier seat price in cents."""

    regular: int = 1000
    premium: int = 1500
    vip: int = 2500

    def __attrs_post_init__(self) -> None:
        if min(self.regular, self.premium, self.vip) < 0:
            raise BookingValidationError('Seat prices must not be negative')

    def price_for(self, tier: SeatTier) -> int:
        return getattr(self, tier.value)
