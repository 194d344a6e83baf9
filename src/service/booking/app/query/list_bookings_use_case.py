from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.booking.domain.booking_errors import BookingValidationError
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_status import BookingStatus


class ListBookingsUseCase:
    def __init__(self, *, booking_query_repo: IBookingQueryRepo) -> None:
        self.booking_query_repo = booking_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        booking_query_repo: IBookingQueryRepo = Depends(Provide[Container.booking_query_repo]),
    ) -> Self:
        return cls(booking_query_repo=booking_query_repo)

    @Logger.io
    async def list_user_bookings(self, *, user_id: str, status: str = '') -> List[Booking]:
        if status and status not in {s.value for s in BookingStatus}:
            raise BookingValidationError(f'Unknown booking status: {status}')
        return await self.booking_query_repo.list_by_user(user_id=user_id, status=status)
