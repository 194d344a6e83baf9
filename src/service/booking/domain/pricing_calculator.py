from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from src.service.booking.domain.booking_errors import BookingValidationError
from src.service.booking.domain.value_object.pricing_breakdown import PricingBreakdown
from src.service.booking.domain.value_object.seat_selection import SeatSelection


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def compute_tax(subtotal: int, tax_rate_percent: float) -> int:
    # str() keeps 7.5 as 7.5 instead of its binary float expansion
    return round_half_up(Decimal(subtotal) * Decimal(str(tax_rate_percent)) / Decimal(100))


def compute_pricing(
    seats: Sequence[SeatSelection],
    *,
    tax_rate_percent: float,
    service_fee: int,
    discount: int = 0,
) -> PricingBreakdown:
    if tax_rate_percent < 0 or service_fee < 0 or discount < 0:
        raise BookingValidationError('Tax rate, service fee and discount must not be negative')
    if any(seat.price < 0 for seat in seats):
        raise BookingValidationError('Seat prices must not be negative')

    subtotal = sum(seat.price for seat in seats)
    tax = compute_tax(subtotal, tax_rate_percent)
    gross = subtotal + tax + service_fee
    if discount > gross:
        raise BookingValidationError(f'Discount {discount} exceeds booking amount {gross}')

    return PricingBreakdown(
        subtotal=subtotal,
        tax=tax,
        service_fee=service_fee,
        discount=discount,
        total=gross - discount,
        tax_rate_percent=tax_rate_percent,
    )


def recompute_pricing(
    seats: Sequence[SeatSelection], stored: PricingBreakdown
) -> PricingBreakdown:
    """Rebuild a stored breakdown from its seat list and the rate/fee/discount it recorded."""
    return compute_pricing(
        seats,
        tax_rate_percent=stored.tax_rate_percent,
        service_fee=stored.service_fee,
        discount=stored.discount,
    )
