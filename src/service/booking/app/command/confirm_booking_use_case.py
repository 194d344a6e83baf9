from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.platform.types.clock import Clock
from src.service.booking.app.command.booking_transition_helper import (
    expire_hold,
    load_booking,
    persist_transition,
)
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.app.interface.i_showtime_inventory import IShowtimeInventory
from src.service.booking.domain.booking_errors import BookingValidationError, InvalidStateError
from src.service.booking.domain.entity.booking_entity import Booking


class ConfirmBookingUseCase:
    """
    pending → confirmed after payment succeeded.

    A hold that already lapsed is expired on the spot (seats go back to the
    showtime) and the confirm is rejected.
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
    async def confirm_booking(
        self, *, booking_id: str, payment_reference: str, user_id: Optional[str] = None
    ) -> Booking:
        if not payment_reference or not payment_reference.strip():
            raise BookingValidationError('payment_reference is required')

        booking = await load_booking(
            booking_command_repo=self.booking_command_repo,
            booking_id=booking_id,
            user_id=user_id,
        )

        now = self.clock()
        if booking.is_hold_expired(now):
            await expire_hold(
                booking_command_repo=self.booking_command_repo,
                showtime_inventory=self.showtime_inventory,
                booking=booking,
                now=now,
            )
            raise InvalidStateError(
                f'Booking {booking.booking_ref} hold expired before payment was confirmed'
            )

        return await persist_transition(
            booking_command_repo=self.booking_command_repo,
            before=booking,
            after=booking.confirm(payment_reference=payment_reference.strip(), now=now),
        )
