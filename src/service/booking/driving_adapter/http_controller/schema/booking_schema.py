from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.payment import PaymentMethod


class SeatRequest(BaseModel):
    id: str
    row: Optional[str] = None
    number: Optional[int] = None
    tier: Optional[str] = None
    price: Optional[int] = None  # cents, as displayed to the customer


class BookingCreateRequest(BaseModel):
    showtime_id: str
    seats: List[SeatRequest]
    contact_email: str
    contact_phone: Optional[str] = None
    payment_method: PaymentMethod = PaymentMethod.STRIPE
    discount: int = Field(default=0, ge=0)

    model_config = {
        'json_schema_extra': {
            'example': {
                'showtime_id': '0192c1d2-7a3e-7b55-9f0a-0c1d2e3f4a5b',
                'seats': [
                    {'id': 'F5', 'tier': 'premium', 'price': 1500},
                    {'id': 'F6', 'tier': 'premium', 'price': 1500},
                ],
                'contact_email': 'guest@example.com',
                'payment_method': 'stripe',
            }
        }
    }


class ConfirmBookingRequest(BaseModel):
    payment_reference: str

    model_config = {'json_schema_extra': {'example': {'payment_reference': 'pi_3Nv1x2abc'}}}


class CancelBookingRequest(BaseModel):
    reason: Optional[str] = None


class SeatResponse(BaseModel):
    id: str
    row: str
    number: int
    tier: str
    price: int


class PricingResponse(BaseModel):
    subtotal: int
    tax: int
    service_fee: int
    discount: int
    total: int
    tax_rate_percent: float


class PaymentInfoResponse(BaseModel):
    method: str
    status: str
    payment_reference: Optional[str] = None
    paid_at: Optional[datetime] = None


class MovieSnapshotResponse(BaseModel):
    id: str
    title: str
    poster_url: Optional[str] = None


class ShowtimeSnapshotResponse(BaseModel):
    id: str
    date: date
    start_time: str
    starts_at: datetime
    cinema: str
    hall: str
    hall_type: str


class BookingResponse(BaseModel):
    id: str
    booking_ref: str
    user_id: str
    status: str
    movie: MovieSnapshotResponse
    showtime: ShowtimeSnapshotResponse
    seats: List[SeatResponse]
    pricing: PricingResponse
    payment: PaymentInfoResponse
    contact_email: str
    contact_phone: Optional[str] = None
    expires_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, booking: Booking) -> 'BookingResponse':
        return cls(
            id=booking.id,
            booking_ref=booking.booking_ref,
            user_id=booking.user_id,
            status=booking.status.value,
            movie=MovieSnapshotResponse(
                id=booking.movie.id,
                title=booking.movie.title,
                poster_url=booking.movie.poster_url,
            ),
            showtime=ShowtimeSnapshotResponse(
                id=booking.showtime.id,
                date=booking.showtime.date,
                start_time=booking.showtime.start_time,
                starts_at=booking.showtime.starts_at,
                cinema=booking.showtime.cinema,
                hall=booking.showtime.hall,
                hall_type=booking.showtime.hall_type,
            ),
            seats=[
                SeatResponse(
                    id=seat.id,
                    row=seat.row,
                    number=seat.number,
                    tier=seat.tier.value,
                    price=seat.price,
                )
                for seat in booking.seats
            ],
            pricing=PricingResponse(
                subtotal=booking.pricing.subtotal,
                tax=booking.pricing.tax,
                service_fee=booking.pricing.service_fee,
                discount=booking.pricing.discount,
                total=booking.pricing.total,
                tax_rate_percent=booking.pricing.tax_rate_percent,
            ),
            payment=PaymentInfoResponse(
                method=booking.payment.method.value,
                status=booking.payment.status.value,
                payment_reference=booking.payment.payment_reference,
                paid_at=booking.payment.paid_at,
            ),
            contact_email=booking.contact_email,
            contact_phone=booking.contact_phone,
            expires_at=booking.expires_at,
            cancelled_at=booking.cancelled_at,
            cancellation_reason=booking.cancellation_reason,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )
