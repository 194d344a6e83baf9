from typing import List

from pydantic import BaseModel

from src.service.booking.app.dto.seat_layout import SeatLayout


class LayoutSeatResponse(BaseModel):
    id: str
    row: str
    number: int
    tier: str
    price: int
    is_booked: bool


class SeatRowResponse(BaseModel):
    row: str
    seats: List[LayoutSeatResponse]


class HallResponse(BaseModel):
    name: str
    type: str
    rows: int
    columns: int
    total_seats: int


class TierPricingResponse(BaseModel):
    regular: int
    premium: int
    vip: int


class SeatLayoutResponse(BaseModel):
    showtime_id: str
    movie_title: str
    hall: HallResponse
    pricing: TierPricingResponse
    booked_seats: List[str]
    available_seats: int
    status: str
    layout: List[SeatRowResponse]

    @classmethod
    def from_layout(cls, seat_layout: SeatLayout) -> 'SeatLayoutResponse':
        showtime = seat_layout.showtime
        return cls(
            showtime_id=showtime.id,
            movie_title=showtime.movie_title,
            hall=HallResponse(
                name=showtime.hall.name,
                type=showtime.hall.type,
                rows=showtime.hall.rows,
                columns=showtime.hall.columns,
                total_seats=showtime.hall.total_seats,
            ),
            pricing=TierPricingResponse(
                regular=showtime.pricing.regular,
                premium=showtime.pricing.premium,
                vip=showtime.pricing.vip,
            ),
            booked_seats=list(showtime.booked_seats),
            available_seats=showtime.available_seats,
            status=showtime.status.value,
            layout=[
                SeatRowResponse(
                    row=row.row,
                    seats=[
                        LayoutSeatResponse(
                            id=seat.id,
                            row=seat.row,
                            number=seat.number,
                            tier=seat.tier.value,
                            price=seat.price,
                            is_booked=seat.is_booked,
                        )
                        for seat in row.seats
                    ],
                )
                for row in seat_layout.rows
            ],
        )
