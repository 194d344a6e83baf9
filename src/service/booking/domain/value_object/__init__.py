from src.service.booking.domain.value_object.booking_snapshot import MovieSnapshot, ShowtimeSnapshot
from src.service.booking.domain.value_object.payment_info import PaymentInfo
from src.service.booking.domain.value_object.pricing_breakdown import PricingBreakdown
from src.service.booking.domain.value_object.seat_selection import SeatSelection
from src.service.booking.domain.value_object.venue import CinemaInfo, HallConfig, TierPricing

__all__ = [
    'CinemaInfo',
    'HallConfig',
    'MovieSnapshot',
    'PaymentInfo',
    'PricingBreakdown',
    'SeatSelection',
    'ShowtimeSnapshot',
    'TierPricing',
]
