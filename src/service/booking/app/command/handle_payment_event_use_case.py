from typing import Optional, Self

from fastapi import Depends

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.confirm_booking_use_case import ConfirmBookingUseCase
from src.service.booking.domain.booking_errors import BookingValidationError, InvalidStateError
from src.service.booking.domain.entity.booking_entity import Booking


PAYMENT_SUCCEEDED = 'payment_intent.succeeded'
PAYMENT_FAILED = 'payment_intent.payment_failed'


class HandlePaymentEventUseCase:
    """
    Payment processor callbacks.

    - succeeded: confirm the booking (same path as an explicit confirm)
    - failed: nothing to do, the hold lapses on its own

    Processors redeliver until they get a 2xx, so a success for a booking that
    is no longer pending is acknowledged and logged instead of failing.
    """

    def __init__(self, *, confirm_booking_use_case: ConfirmBookingUseCase) -> None:
        self.confirm_booking_use_case = confirm_booking_use_case

    @classmethod
    def depends(
        cls,
        confirm_booking_use_case: ConfirmBookingUseCase = Depends(ConfirmBookingUseCase.depends),
    ) -> Self:
        return cls(confirm_booking_use_case=confirm_booking_use_case)

    @Logger.io
    async def handle(
        self, *, event_type: str, booking_id: str, payment_reference: str
    ) -> Optional[Booking]:
        if event_type == PAYMENT_SUCCEEDED:
            try:
                return await self.confirm_booking_use_case.confirm_booking(
                    booking_id=booking_id, payment_reference=payment_reference
                )
            except InvalidStateError as e:
                Logger.base.warning(
                    f'⚠️  [PAYMENT] Success for booking {booking_id} not applied: {e.message}'
                )
                return None

        if event_type == PAYMENT_FAILED:
            Logger.base.info(
                f'💳 [PAYMENT] Payment failed for booking {booking_id}; hold left to expire'
            )
            return None

        raise BookingValidationError(f'Unsupported payment event type: {event_type}')
