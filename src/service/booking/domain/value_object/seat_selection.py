import attrs

from src.service.booking.domain.enum.seat_tier import SeatTier


@attrs.frozen
class SeatSelection:
    id: str
    row: str
    number: int
    tier: SeatTier
    price: int
