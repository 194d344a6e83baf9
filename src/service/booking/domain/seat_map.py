"""
Seat Map - hall geometry to addressable seats

Pure functions of hall configuration and tier pricing. The frontend derives
the same ids, tiers and prices independently, so the rules here must stay
deterministic:

- row labels are A, B, C, ... in order
- seat id is ``{row label}{column}`` with columns numbered from 1
- the last two rows are vip, rows from the middle down are premium, the rest regular
"""

from string import ascii_uppercase
from typing import Collection, Iterable, List

import attrs

from src.service.booking.domain.booking_errors import BookingValidationError
from src.service.booking.domain.enum.seat_tier import SeatTier
from src.service.booking.domain.value_object.seat_selection import SeatSelection
from src.service.booking.domain.value_object.venue import HallConfig, TierPricing


ROW_LABELS = ascii_uppercase


@attrs.frozen
class LayoutSeat:
    id: str
    row: str
    number: int
    tier: SeatTier
    price: int
    is_booked: bool = False


@attrs.frozen
class SeatRow:
    row: str
    seats: List[LayoutSeat]


def tier_for_row(row_index: int, total_rows: int) -> SeatTier:
    if row_index >= total_rows - 2:
        return SeatTier.VIP
    if row_index >= total_rows // 2:
        return SeatTier.PREMIUM
    return SeatTier.REGULAR


def make_seat_id(row_index: int, column: int) -> str:
    return f'{ROW_LABELS[row_index]}{column}'


def seat_ids(hall: HallConfig) -> List[str]:
    return [
        make_seat_id(row_index, column)
        for row_index in range(hall.rows)
        for column in range(1, hall.columns + 1)
    ]


def build_layout(
    hall: HallConfig, pricing: TierPricing, booked_seats: Collection[str] = ()
) -> List[SeatRow]:
    booked = frozenset(booked_seats)
    layout = []
    for row_index in range(hall.rows):
        label = ROW_LABELS[row_index]
        tier = tier_for_row(row_index, hall.rows)
        price = pricing.price_for(tier)
        seats = [
            LayoutSeat(
                id=f'{label}{column}',
                row=label,
                number=column,
                tier=tier,
                price=price,
                is_booked=f'{label}{column}' in booked,
            )
            for column in range(1, hall.columns + 1)
        ]
        layout.append(SeatRow(row=label, seats=seats))
    return layout


def resolve_seat(hall: HallConfig, pricing: TierPricing, seat_id: str) -> SeatSelection:
    """Parse a seat id and attach the tier and price this hall assigns to it."""
    label, number_part = seat_id[:1], seat_id[1:]
    row_index = ROW_LABELS.find(label) if label else -1
    if row_index < 0 or row_index >= hall.rows or not number_part.isdigit():
        raise BookingValidationError(f'Seat {seat_id!r} does not exist in hall {hall.name}')
    number = int(number_part)
    if not 1 <= number <= hall.columns or number_part != str(number):
        raise BookingValidationError(f'Seat {seat_id!r} does not exist in hall {hall.name}')

    tier = tier_for_row(row_index, hall.rows)
    return SeatSelection(
        id=seat_id, row=label, number=number, tier=tier, price=pricing.price_for(tier)
    )


def resolve_seats(
    hall: HallConfig, pricing: TierPricing, requested: Iterable[str]
) -> List[SeatSelection]:
    return [resolve_seat(hall, pricing, seat_id) for seat_id in requested]
