from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.platform.types.clock import Clock
from src.service.booking.app.command.booking_transition_helper import expire_hold
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.app.interface.i_showtime_inventory import IShowtimeInventory
from src.service.booking.domain.booking_errors import BookingNotFoundError, InvalidStateError
from src.service.booking.domain.entity.booking_entity import Booking


class GetBookingUseCase:
    """
    Read one booking by id or booking_ref.

    A pending booking past its hold is expired before it is returned, so
    readers never see a stale ``pending``.
    """

    def __init__(
        self,
        *,
        booking_command_repo: IBookingCommandRepo,
        showtime_inventory: IShowtimeInventory,
        clock: Clock,
    ) -> None:
        self.booking_command_repo = booking_command_repo
        self.showtime_inventory = showtime_inventory
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        booking_command_repo: IBookingCommandRepo = Depends(
            Provide[Container.booking_command_repo]
        ),
        showtime_inventory: IShowtimeInventory = Depends(Provide[Container.showtime_inventory]),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            booking_command_repo=booking_command_repo,
            showtime_inventory=showtime_inventory,
            clock=clock,
        )

    @Logger.io
    async def get_booking(self, *, booking_id: str, user_id: str) -> Booking:
        booking = await self.booking_command_repo.get_by_id(booking_id=booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return await self._visible_to(booking=booking, user_id=user_id)

    @Logger.io
    async def get_booking_by_ref(self, *, booking_ref: str, user_id: str) -> Booking:
        booking = await self.booking_command_repo.get_by_ref(booking_ref=booking_ref.upper())
        if booking is None:
            raise BookingNotFoundError(booking_ref)
        return await self._visible_to(booking=booking, user_id=user_id)

    async def _visible_to(self, *, booking: Booking, user_id: str) -> Booking:
        if booking.user_id != user_id:
            raise ForbiddenError('Booking belongs to another user')

        now = self.clock()
        if not booking.is_hold_expired(now):
            return booking
        try:
            return await expire_hold(
                booking_command_repo=self.booking_command_repo,
                showtime_inventory=self.showtime_inventory,
                booking=booking,
                now=now,
            )
        except InvalidStateError:
            # Another worker moved it first; show whatever it stored
            fresh = await self.booking_command_repo.get_by_id(booking_id=booking.id)
            if fresh is None:
                raise BookingNotFoundError(booking.id)
            return fresh
