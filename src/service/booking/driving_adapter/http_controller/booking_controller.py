from typing import List

from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.booking.app.command.confirm_booking_use_case import ConfirmBookingUseCase
from src.service.booking.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.booking.app.dto.requested_seat import RequestedSeat
from src.service.booking.app.query.get_booking_use_case import GetBookingUseCase
from src.service.booking.app.query.list_bookings_use_case import ListBookingsUseCase
from src.service.booking.driving_adapter.http_controller.auth.current_user import (
    get_current_user,
)
from src.service.booking.driving_adapter.http_controller.auth.jwt_auth import CurrentUser
from src.service.booking.driving_adapter.http_controller.schema.booking_schema import (
    BookingCreateRequest,
    BookingResponse,
    CancelBookingRequest,
    ConfirmBookingRequest,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_booking(
    request: BookingCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    use_case: CreateBookingUseCase = Depends(CreateBookingUseCase.depends),
) -> BookingResponse:
    with tracer.start_as_current_span('controller.create_booking') as span:
        span.set_attribute('showtime.id', request.showtime_id)
        span.set_attribute('user.id', current_user.id)

        booking = await use_case.create_booking(
            user_id=current_user.id,
            showtime_id=request.showtime_id,
            seats=[
                RequestedSeat(id=seat.id, tier=seat.tier, price=seat.price)
                for seat in request.seats
            ],
            contact_email=request.contact_email,
            contact_phone=request.contact_phone,
            payment_method=request.payment_method,
            discount=request.discount,
        )

        span.set_attribute('booking.id', booking.id)
        return BookingResponse.from_entity(booking)


@router.get('/my')
@Logger.io
async def list_my_bookings(
    booking_status: str = '',
    current_user: CurrentUser = Depends(get_current_user),
    use_case: ListBookingsUseCase = Depends(ListBookingsUseCase.depends),
) -> List[BookingResponse]:
    bookings = await use_case.list_user_bookings(user_id=current_user.id, status=booking_status)
    return [BookingResponse.from_entity(booking) for booking in bookings]


@router.get('/ref/{booking_ref}')
@Logger.io
async def get_booking_by_ref(
    booking_ref: str,
    current_user: CurrentUser = Depends(get_current_user),
    use_case: GetBookingUseCase = Depends(GetBookingUseCase.depends),
) -> BookingResponse:
    booking = await use_case.get_booking_by_ref(booking_ref=booking_ref, user_id=current_user.id)
    return BookingResponse.from_entity(booking)


@router.get('/{booking_id}')
@Logger.io
async def get_booking(
    booking_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    use_case: GetBookingUseCase = Depends(GetBookingUseCase.depends),
) -> BookingResponse:
    booking = await use_case.get_booking(booking_id=booking_id, user_id=current_user.id)
    return BookingResponse.from_entity(booking)


@router.put('/{booking_id}/confirm')
@Logger.io
async def confirm_booking(
    booking_id: str,
    request: ConfirmBookingRequest,
    current_user: CurrentUser = Depends(get_current_user),
    use_case: ConfirmBookingUseCase = Depends(ConfirmBookingUseCase.depends),
) -> BookingResponse:
    booking = await use_case.confirm_booking(
        booking_id=booking_id,
        payment_reference=request.payment_reference,
        user_id=current_user.id,
    )
    return BookingResponse.from_entity(booking)


@router.put('/{booking_id}/cancel')
@Logger.io
async def cancel_booking(
    booking_id: str,
    request: CancelBookingRequest | None = None,
    current_user: CurrentUser = Depends(get_current_user),
    use_case: CancelBookingUseCase = Depends(CancelBookingUseCase.depends),
) -> BookingResponse:
    booking = await use_case.cancel_booking(
        booking_id=booking_id,
        user_id=current_user.id,
        reason=request.reason if request else None,
    )
    return BookingResponse.from_entity(booking)
