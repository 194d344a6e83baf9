from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.platform.types.clock import Clock
from src.service.booking.app.command.booking_transition_helper import (
    load_booking,
    persist_transition,
)
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.domain.entity.booking_entity import Booking


class CompleteBookingUseCase:
    """confirmed → completed once the showtime has started. Seats stay booked."""

    def __init__(self, *, booking_command_repo: IBookingCommandRepo, clock: Clock) -> None:
        self.booking_command_repo = booking_command_repo
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        booking_command_repo: IBookingCommandRepo = Depends(
            Provide[Container.booking_command_repo]
        ),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(booking_command_repo=booking_command_repo, clock=clock)

    @Logger.io
    async def complete_booking(self, *, booking_id: str) -> Booking:
        booking = await load_booking(
            booking_command_repo=self.booking_command_repo, booking_id=booking_id, user_id=None
        )
        return await self.complete(booking=booking)

    async def complete(self, *, booking: Booking) -> Booking:
        return await persist_transition(
            booking_command_repo=self.booking_command_repo,
            before=booking,
            after=booking.complete(now=self.clock()),
        )
