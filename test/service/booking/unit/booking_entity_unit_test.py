from datetime import datetime, timedelta
from typing import Callable

import pytest

from src.service.booking.domain.booking_errors import (
    BookingValidationError,
    CannotCancelPastError,
    InvalidStateError,
)
from src.service.booking.domain.entity.booking_entity import (
    DEFAULT_CANCELLATION_REASON,
    Booking,
)
from src.service.booking.domain.enum.booking_status import ALLOWED_TRANSITIONS, BookingStatus
from src.service.booking.domain.enum.payment import PaymentMethod, PaymentStatus
from test.factory import SHOWTIME_STARTS_AT, T0, build_booking


S = BookingStatus
ALLOWED = {
    (S.PENDING, S.CONFIRMED),
    (S.PENDING, S.CANCELLED),
    (S.PENDING, S.EXPIRED),
    (S.CONFIRMED, S.CANCELLED),
    (S.CONFIRMED, S.COMPLETED),
}

# Each target is reached through its own method, called at a time that satisfies
# the method's clock precondition so only the state machine can reject it.
TRANSITIONS: dict[BookingStatus, Callable[[Booking], Booking]] = {
    S.CONFIRMED: lambda b: b.confirm(payment_reference='pi_123', now=T0),
    S.CANCELLED: lambda b: b.cancel(reason=None, now=T0),
    S.EXPIRED: lambda b: b.expire(now=T0 + timedelta(minutes=16)),
    S.COMPLETED: lambda b: b.complete(now=SHOWTIME_STARTS_AT + timedelta(minutes=1)),
}


@pytest.mark.unit
class TestBookingStateMachine:
    @pytest.mark.parametrize('source', list(BookingStatus))
    @pytest.mark.parametrize('target', list(TRANSITIONS))
    def test_transition_table(self, source: BookingStatus, target: BookingStatus) -> None:
        booking = build_booking(status=source)

        if (source, target) in ALLOWED:
            assert TRANSITIONS[target](booking).status == target
        else:
            with pytest.raises(InvalidStateError):
                TRANSITIONS[target](booking)

    def test_every_status_has_a_transition_entry(self) -> None:
        assert set(ALLOWED_TRANSITIONS) == set(BookingStatus)

    @pytest.mark.parametrize('status', [S.COMPLETED, S.CANCELLED, S.EXPIRED])
    def test_terminal_states(self, status: BookingStatus) -> None:
        assert status.is_terminal

    def test_transitions_return_new_booking_and_keep_original(self) -> None:
        booking = build_booking(status=S.PENDING)

        confirmed = booking.confirm(payment_reference='pi_123', now=T0)

        assert booking.status == S.PENDING
        assert confirmed.status == S.CONFIRMED


@pytest.mark.unit
class TestBookingCreate:
    def test_unpaid_booking_is_a_pending_hold(self) -> None:
        template = build_booking()

        booking = Booking.create(
            id='b-1',
            booking_ref='PC-20260301-ZZZZZ',
            user_id='user-1',
            movie=template.movie,
            showtime=template.showtime,
            seats=template.seats,
            pricing=template.pricing,
            contact_email='guest@example.com',
            contact_phone=None,
            payment_method=PaymentMethod.STRIPE,
            paid_on_creation=False,
            hold_minutes=15,
            now=T0,
        )

        assert booking.status == S.PENDING
        assert booking.expires_at == T0 + timedelta(minutes=15)
        assert booking.payment.status == PaymentStatus.PENDING
        assert booking.created_at == booking.updated_at == T0

    def test_paid_booking_is_confirmed_without_hold(self) -> None:
        template = build_booking()

        booking = Booking.create(
            id='b-1',
            booking_ref='PC-20260301-ZZZZZ',
            user_id='user-1',
            movie=template.movie,
            showtime=template.showtime,
            seats=template.seats,
            pricing=template.pricing,
            contact_email='guest@example.com',
            contact_phone='+1 555 0100',
            payment_method=PaymentMethod.FREE,
            paid_on_creation=True,
            hold_minutes=15,
            now=T0,
        )

        assert booking.status == S.CONFIRMED
        assert booking.expires_at is None
        assert booking.payment.status == PaymentStatus.COMPLETED
        assert booking.payment.paid_at == T0

    def test_booking_without_seats_is_rejected(self) -> None:
        template = build_booking()

        with pytest.raises(BookingValidationError):
            Booking.create(
                id='b-1',
                booking_ref='PC-20260301-ZZZZZ',
                user_id='user-1',
                movie=template.movie,
                showtime=template.showtime,
                seats=[],
                pricing=template.pricing,
                contact_email='guest@example.com',
                contact_phone=None,
                payment_method=PaymentMethod.STRIPE,
                paid_on_creation=False,
                hold_minutes=15,
                now=T0,
            )

    def test_stored_pricing_matches_its_seats(self) -> None:
        assert build_booking(seat_ids=['A1', 'F5', 'J15']).pricing_matches_seats()


@pytest.mark.unit
class TestBookingTransitions:
    def test_confirm_records_payment_and_clears_hold(self) -> None:
        booking = build_booking(status=S.PENDING)
        now = T0 + timedelta(minutes=3)

        confirmed = booking.confirm(payment_reference='pi_123', now=now)

        assert confirmed.expires_at is None
        assert confirmed.payment.status == PaymentStatus.COMPLETED
        assert confirmed.payment.payment_reference == 'pi_123'
        assert confirmed.payment.paid_at == now
        assert confirmed.updated_at == now

    def test_cancel_confirmed_marks_payment_refunded(self) -> None:
        cancelled = build_booking(status=S.CONFIRMED).cancel(reason='Plans changed', now=T0)

        assert cancelled.status == S.CANCELLED
        assert cancelled.payment.status == PaymentStatus.REFUNDED
        assert cancelled.cancellation_reason == 'Plans changed'
        assert cancelled.cancelled_at == T0

    def test_cancel_without_reason_uses_default(self) -> None:
        cancelled = build_booking(status=S.PENDING).cancel(reason=None, now=T0)

        assert cancelled.cancellation_reason == DEFAULT_CANCELLATION_REASON
        assert cancelled.payment.status == PaymentStatus.PENDING

    @pytest.mark.parametrize('status', [S.PENDING, S.CONFIRMED])
    def test_cannot_cancel_once_showtime_started(self, status: BookingStatus) -> None:
        booking = build_booking(status=status, expires_at=SHOWTIME_STARTS_AT + timedelta(hours=1))

        with pytest.raises(CannotCancelPastError):
            booking.cancel(reason=None, now=SHOWTIME_STARTS_AT)

    def test_expire_before_hold_lapses_is_rejected(self) -> None:
        booking = build_booking(status=S.PENDING)

        with pytest.raises(InvalidStateError, match='not lapsed'):
            booking.expire(now=T0 + timedelta(minutes=14))

    def test_hold_lapses_exactly_at_expires_at(self) -> None:
        booking = build_booking(status=S.PENDING)
        expires_at: datetime = booking.expires_at  # type: ignore[assignment]

        assert not booking.is_hold_expired(expires_at - timedelta(seconds=1))
        assert booking.is_hold_expired(expires_at)

    def test_complete_before_showtime_is_rejected(self) -> None:
        booking = build_booking(status=S.CONFIRMED)

        with pytest.raises(InvalidStateError, match='not started'):
            booking.complete(now=SHOWTIME_STARTS_AT - timedelta(minutes=1))


@pytest.mark.unit
class TestSeatReleaseTracking:
    @pytest.mark.parametrize('status', [S.CANCELLED, S.EXPIRED])
    def test_terminal_booking_without_release_awaits_it(self, status: BookingStatus) -> None:
        booking = build_booking(status=status, seats_released=False)

        assert booking.awaits_seat_release
        assert not booking.mark_seats_released(now=T0).awaits_seat_release

    @pytest.mark.parametrize('status', [S.PENDING, S.CONFIRMED, S.COMPLETED])
    def test_live_or_completed_booking_never_awaits_release(self, status: BookingStatus) -> None:
        assert not build_booking(status=status).awaits_seat_release

    def test_release_is_overdue_only_after_grace(self) -> None:
        booking = build_booking(status=S.CANCELLED, created_at=T0, seats_released=False)
        grace = timedelta(minutes=1)

        assert not booking.release_overdue(now=T0 + timedelta(seconds=59), grace=grace)
        assert booking.release_overdue(now=T0 + timedelta(minutes=1), grace=grace)
