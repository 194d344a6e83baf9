from datetime import datetime, timedelta
from typing import List, Optional

import attrs

from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.booking_errors import (
    BookingValidationError,
    CannotCancelPastError,
    InvalidStateError,
)
from src.service.booking.domain.enum.booking_status import BookingStatus
from src.service.booking.domain.enum.payment import PaymentMethod, PaymentStatus
from src.service.booking.domain.pricing_calculator import recompute_pricing
from src.service.booking.domain.value_object.booking_snapshot import (
    MovieSnapshot,
    ShowtimeSnapshot,
)
from src.service.booking.domain.value_object.payment_info import PaymentInfo
from src.service.booking.domain.value_object.pricing_breakdown import PricingBreakdown
from src.service.booking.domain.value_object.seat_selection import SeatSelection


DEFAULT_CANCELLATION_REASON = 'User requested cancellation'


@attrs.define
class Booking:
    id: str
    booking_ref: str
    user_id: str
    movie: MovieSnapshot
    showtime: ShowtimeSnapshot
    seats: List[SeatSelection]
    pricing: PricingBreakdown
    payment: PaymentInfo
    contact_email: str
    status: BookingStatus = BookingStatus.PENDING
    contact_phone: Optional[str] = None
    expires_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Set once the seats of a cancelled or expired booking are back on the showtime
    seats_released_at: Optional[datetime] = None

    @property
    def seat_ids(self) -> List[str]:
        return [seat.id for seat in self.seats]

    @classmethod
    def create(
        cls,
        *,
        id: str,
        booking_ref: str,
        user_id: str,
        movie: MovieSnapshot,
        showtime: ShowtimeSnapshot,
        seats: List[SeatSelection],
        pricing: PricingBreakdown,
        contact_email: str,
        contact_phone: Optional[str],
        payment_method: PaymentMethod,
        paid_on_creation: bool,
        hold_minutes: int,
        now: datetime,
    ) -> 'Booking':
        if not seats:
            raise BookingValidationError('A booking needs at least one seat')
        if not pricing.is_balanced():
            raise BookingValidationError('Pricing total does not add up')

        if paid_on_creation:
            status = BookingStatus.CONFIRMED
            payment = PaymentInfo(method=payment_method, status=PaymentStatus.COMPLETED, paid_at=now)
            expires_at = None
        else:
            status = BookingStatus.PENDING
            payment = PaymentInfo(method=payment_method, status=PaymentStatus.PENDING)
            expires_at = now + timedelta(minutes=hold_minutes)

        return cls(
            id=id,
            booking_ref=booking_ref,
            user_id=user_id,
            movie=movie,
            showtime=showtime,
            seats=list(seats),
            pricing=pricing,
            payment=payment,
            contact_email=contact_email,
            contact_phone=contact_phone,
            status=status,
            expires_at=expires_at,
            created_at=now,
            updated_at=now,
        )

    def _require_transition(self, target: BookingStatus) -> None:
        if not self.status.can_transition_to(target):
            raise InvalidStateError(
                f'Booking {self.booking_ref} cannot go from {self.status.value} to {target.value}'
            )

    def is_hold_expired(self, now: datetime) -> bool:
        return (
            self.status == BookingStatus.PENDING
            and self.expires_at is not None
            and self.expires_at <= now
        )

    @property
    def awaits_seat_release(self) -> bool:
        """Cancelled or expired, but the seats were never handed back."""
        return (
            self.status in (BookingStatus.CANCELLED, BookingStatus.EXPIRED)
            and self.seats_released_at is None
        )

    def release_overdue(self, *, now: datetime, grace: timedelta) -> bool:
        """Still unreleased after grace, so the request that owned the release gave up."""
        return self.awaits_seat_release and (self.updated_at or now) <= now - grace

    def mark_seats_released(self, *, now: datetime) -> 'Booking':
        return attrs.evolve(self, seats_released_at=now)

    def pricing_matches_seats(self) -> bool:
        return recompute_pricing(self.seats, self.pricing) == self.pricing

    @Logger.io
    def confirm(self, *, payment_reference: str, now: datetime) -> 'Booking':
        self._require_transition(BookingStatus.CONFIRMED)
        return attrs.evolve(
            self,
            status=BookingStatus.CONFIRMED,
            payment=attrs.evolve(
                self.payment,
                status=PaymentStatus.COMPLETED,
                payment_reference=payment_reference,
                paid_at=now,
            ),
            expires_at=None,
            updated_at=now,
        )

    @Logger.io
    def cancel(self, *, reason: Optional[str], now: datetime) -> 'Booking':
        self._require_transition(BookingStatus.CANCELLED)
        if self.showtime.starts_at <= now:
            raise CannotCancelPastError(self.booking_ref)

        payment = self.payment
        if payment.status == PaymentStatus.COMPLETED:
            payment = attrs.evolve(payment, status=PaymentStatus.REFUNDED)
        return attrs.evolve(
            self,
            status=BookingStatus.CANCELLED,
            payment=payment,
            cancelled_at=now,
            cancellation_reason=reason or DEFAULT_CANCELLATION_REASON,
            expires_at=None,
            updated_at=now,
        )

    @Logger.io
    def expire(self, *, now: datetime) -> 'Booking':
        self._require_transition(BookingStatus.EXPIRED)
        if not self.is_hold_expired(now):
            raise InvalidStateError(f'Booking {self.booking_ref} hold has not lapsed yet')
        return attrs.evolve(self, status=BookingStatus.EXPIRED, updated_at=now)

    @Logger.io
    def complete(self, *, now: datetime) -> 'Booking':
        self._require_transition(BookingStatus.COMPLETED)
        if self.showtime.starts_at > now:
            raise InvalidStateError(f'Booking {self.booking_ref} showtime has not started yet')
        return attrs.evolve(self, status=BookingStatus.COMPLETED, updated_at=now)
