from typing import Any

from fastapi.testclient import TestClient
import pytest

from src.platform.constant.route_constant import (
    BOOKING_CANCEL,
    BOOKING_CONFIRM,
    BOOKING_CREATE,
    BOOKING_GET,
    BOOKING_GET_BY_REF,
    BOOKING_MY_BOOKINGS,
)
from src.platform.exception.exceptions import TransientStorageError
from src.service.booking.domain.enum.booking_status import BookingStatus
from test.factory import SHOWTIME_ID, build_booking, build_showtime
from test.fake.fixed_clock import FixedClock
from test.fake.in_memory_booking_repo import InMemoryBookingRepo
from test.fake.in_memory_showtime_inventory import InMemoryShowtimeInventory


def _create_payload(*seat_ids: str, **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        'showtime_id': SHOWTIME_ID,
        'seats': [{'id': seat_id} for seat_id in seat_ids],
        'contact_email': 'guest@example.com',
        'payment_method': 'stripe',
    }
    payload.update(overrides)
    return payload


@pytest.mark.api
class TestCreateBookingApi:
    def test_create_returns_pending_booking(
        self,
        client: TestClient,
        overridden_container: Any,
        auth_headers: dict[str, str],
        inventory: InMemoryShowtimeInventory,
    ) -> None:
        """
        Given: an open showtime with F5 and F6 free
        When: the user books both seats
        Then: 201 with a pending booking, totals in cents and the seats taken
        """
        # Act
        response = client.post(
            BOOKING_CREATE, json=_create_payload('F5', 'F6'), headers=auth_headers
        )

        # Assert
        assert response.status_code == 201
        body = response.json()
        assert body['status'] == 'pending'
        assert body['user_id'] == 'user-1'
        assert body['booking_ref'].startswith('PC-20260301-')
        assert [seat['id'] for seat in body['seats']] == ['F5', 'F6']
        assert body['pricing'] == {
            'subtotal': 3000,
            'tax': 150,
            'service_fee': 100,
            'discount': 0,
            'total': 3250,
            'tax_rate_percent': 5.0,
        }
        assert body['movie']['title'] == 'The Grand Premiere'
        assert body['showtime']['date'] == '2026-03-05'
        assert body['expires_at'] is not None
        assert inventory.booked(SHOWTIME_ID) == ['F5', 'F6']

    def test_taken_seat_returns_409_with_seat_list(
        self,
        client: TestClient,
        overridden_container: Any,
        auth_headers: dict[str, str],
        inventory: InMemoryShowtimeInventory,
    ) -> None:
        inventory.add(build_showtime(booked_seats=['F5']))

        response = client.post(
            BOOKING_CREATE, json=_create_payload('F5', 'F6'), headers=auth_headers
        )

        assert response.status_code == 409
        assert response.json()['unavailable_seats'] == ['F5']
        assert inventory.booked(SHOWTIME_ID) == ['F5']

    def test_full_showtime_returns_409_with_seat_list(
        self,
        client: TestClient,
        overridden_container: Any,
        auth_headers: dict[str, str],
        inventory: InMemoryShowtimeInventory,
    ) -> None:
        inventory.add(build_showtime(rows=2, columns=2))
        filled = client.post(
            BOOKING_CREATE, json=_create_payload('A1', 'A2', 'B1', 'B2'), headers=auth_headers
        )
        assert filled.status_code == 201

        response = client.post(BOOKING_CREATE, json=_create_payload('A1'), headers=auth_headers)

        assert response.status_code == 409
        assert response.json()['unavailable_seats'] == ['A1']

    def test_unknown_showtime_returns_404(
        self, client: TestClient, overridden_container: Any, auth_headers: dict[str, str]
    ) -> None:
        response = client.post(
            BOOKING_CREATE,
            json=_create_payload('F5', showtime_id='missing'),
            headers=auth_headers,
        )

        assert response.status_code == 404

    @pytest.mark.parametrize(
        'payload',
        [
            pytest.param(_create_payload(), id='no seats'),
            pytest.param(_create_payload('F5', 'F5'), id='duplicate seats'),
            pytest.param(_create_payload('F5', contact_email='nope'), id='bad email'),
            pytest.param(_create_payload('F5', discount=-1), id='negative discount'),
            pytest.param({'showtime_id': SHOWTIME_ID}, id='missing fields'),
        ],
    )
    def test_invalid_request_returns_400(
        self,
        client: TestClient,
        overridden_container: Any,
        auth_headers: dict[str, str],
        payload: dict[str, Any],
    ) -> None:
        response = client.post(BOOKING_CREATE, json=payload, headers=auth_headers)

        assert response.status_code == 400

    def test_anonymous_request_returns_401(
        self, client: TestClient, overridden_container: Any
    ) -> None:
        response = client.post(BOOKING_CREATE, json=_create_payload('F5'))

        assert response.status_code == 401
        assert response.headers['WWW-Authenticate'] == 'Bearer'

    def test_garbage_token_returns_401(
        self, client: TestClient, overridden_container: Any
    ) -> None:
        response = client.post(
            BOOKING_CREATE,
            json=_create_payload('F5'),
            headers={'Authorization': 'Bearer not-a-jwt'},
        )

        assert response.status_code == 401
        assert response.json()['detail'] == 'Invalid token'


@pytest.mark.api
class TestBookingLifecycleApi:
    @pytest.fixture
    def pending_booking(
        self, inventory: InMemoryShowtimeInventory, booking_repo: InMemoryBookingRepo
    ) -> None:
        inventory.add(build_showtime(booked_seats=['F5', 'F6']))
        booking_repo.add(build_booking())

    def test_confirm_then_cancel(
        self,
        client: TestClient,
        overridden_container: Any,
        auth_headers: dict[str, str],
        pending_booking: None,
        inventory: InMemoryShowtimeInventory,
    ) -> None:
        confirmed = client.put(
            BOOKING_CONFIRM.format(booking_id='booking-1'),
            json={'payment_reference': 'pi_123'},
            headers=auth_headers,
        )
        cancelled = client.put(
            BOOKING_CANCEL.format(booking_id='booking-1'),
            json={'reason': 'Plans changed'},
            headers=auth_headers,
        )

        assert confirmed.status_code == 200
        assert confirmed.json()['payment']['status'] == 'completed'
        assert cancelled.status_code == 200
        assert cancelled.json()['status'] == 'cancelled'
        assert cancelled.json()['payment']['status'] == 'refunded'
        assert cancelled.json()['cancellation_reason'] == 'Plans changed'
        assert inventory.booked(SHOWTIME_ID) == []

    def test_cancel_without_body_uses_default_reason(
        self,
        client: TestClient,
        overridden_container: Any,
        auth_headers: dict[str, str],
        pending_booking: None,
    ) -> None:
        response = client.put(BOOKING_CANCEL.format(booking_id='booking-1'), headers=auth_headers)

        assert response.status_code == 200
        assert response.json()['cancellation_reason'] == 'User requested cancellation'

    def test_confirm_cancelled_booking_returns_409(
        self,
        client: TestClient,
        overridden_container: Any,
        auth_headers: dict[str, str],
        booking_repo: InMemoryBookingRepo,
    ) -> None:
        booking_repo.add(build_booking(status=BookingStatus.CANCELLED))

        response = client.put(
            BOOKING_CONFIRM.format(booking_id='booking-1'),
            json={'payment_reference': 'pi_123'},
            headers=auth_headers,
        )

        assert response.status_code == 409

    def test_confirm_after_hold_lapsed_returns_409_and_expires(
        self,
        client: TestClient,
        overridden_container: Any,
        auth_headers: dict[str, str],
        pending_booking: None,
        booking_repo: InMemoryBookingRepo,
        clock: FixedClock,
    ) -> None:
        clock.advance(minutes=16)

        response = client.put(
            BOOKING_CONFIRM.format(booking_id='booking-1'),
            json={'payment_reference': 'pi_123'},
            headers=auth_headers,
        )

        assert response.status_code == 409
        assert booking_repo.bookings['booking-1'].status == BookingStatus.EXPIRED

    def test_someone_elses_booking_returns_403(
        self,
        client: TestClient,
        overridden_container: Any,
        other_user_headers: dict[str, str],
        pending_booking: None,
    ) -> None:
        response = client.get(
            BOOKING_GET.format(booking_id='booking-1'), headers=other_user_headers
        )

        assert response.status_code == 403

    def test_unknown_booking_returns_404(
        self, client: TestClient, overridden_container: Any, auth_headers: dict[str, str]
    ) -> None:
        response = client.get(BOOKING_GET.format(booking_id='nope'), headers=auth_headers)

        assert response.status_code == 404

    def test_lookup_by_ref(
        self,
        client: TestClient,
        overridden_container: Any,
        auth_headers: dict[str, str],
        pending_booking: None,
    ) -> None:
        response = client.get(
            BOOKING_GET_BY_REF.format(booking_ref='pc-20260301-ab123'), headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()['id'] == 'booking-1'

    def test_my_bookings_with_status_filter(
        self,
        client: TestClient,
        overridden_container: Any,
        auth_headers: dict[str, str],
        pending_booking: None,
        booking_repo: InMemoryBookingRepo,
    ) -> None:
        booking_repo.add(
            build_booking(id='booking-2', booking_ref='PC-2', status=BookingStatus.CONFIRMED)
        )

        everything = client.get(BOOKING_MY_BOOKINGS, headers=auth_headers)
        confirmed = client.get(
            BOOKING_MY_BOOKINGS, params={'booking_status': 'confirmed'}, headers=auth_headers
        )
        unknown = client.get(
            BOOKING_MY_BOOKINGS, params={'booking_status': 'refunded'}, headers=auth_headers
        )

        assert {b['id'] for b in everything.json()} == {'booking-1', 'booking-2'}
        assert [b['id'] for b in confirmed.json()] == ['booking-2']
        assert unknown.status_code == 400


@pytest.mark.api
class TestStorageFailureApi:
    def test_failed_persist_returns_503_and_frees_seats(
        self,
        client: TestClient,
        overridden_container: Any,
        auth_headers: dict[str, str],
        inventory: InMemoryShowtimeInventory,
        booking_repo: InMemoryBookingRepo,
    ) -> None:
        booking_repo.fail_create_with = TransientStorageError('Booking insert failed')

        response = client.post(BOOKING_CREATE, json=_create_payload('F5'), headers=auth_headers)

        assert response.status_code == 503
        assert response.headers['Retry-After'] == '1'
        assert inventory.booked(SHOWTIME_ID) == []
