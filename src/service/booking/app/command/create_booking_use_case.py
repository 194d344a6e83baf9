import time
from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
import uuid_utils

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import TransientStorageError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.platform.types.clock import Clock
from src.service.booking.app.dto.requested_seat import RequestedSeat
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.app.interface.i_showtime_inventory import IShowtimeInventory
from src.service.booking.domain.booking_errors import (
    BookingValidationError,
    DuplicateBookingRefError,
    SeatsUnavailableError,
    ShowtimeNotBookableError,
    ShowtimeNotFoundError,
)
from src.service.booking.domain.booking_ref_generator import BookingReferenceGenerator
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.showtime_entity import Showtime
from src.service.booking.domain.enum.payment import PaymentMethod
from src.service.booking.domain.pricing_calculator import compute_pricing
from src.service.booking.domain.seat_map import resolve_seats
from src.service.booking.domain.value_object.booking_snapshot import (
    MovieSnapshot,
    ShowtimeSnapshot,
)
from src.service.booking.domain.value_object.pricing_breakdown import PricingBreakdown
from src.service.booking.domain.value_object.seat_selection import SeatSelection


class CreateBookingUseCase:
    """
    Create booking - claim seats first, then persist

    Flow:
    1. Validate request shape (non-empty, unique seats, seat cap, contact email)
    2. Load showtime, resolve seat ids to tier/price, reject stale client prices
       and seats that are already taken
    3. Claim seats atomically on the showtime (losers get SeatsUnavailableError)
    4. Build booking with movie/showtime snapshots and a fresh booking_ref
    5. Persist; on any failure after step 3 the claimed seats are released again

    A booking paid with ``free`` (or any booking when AUTO_CONFIRM_BOOKINGS is on)
    is confirmed on creation; everything else is a pending hold.
    """

    def __init__(
        self,
        *,
        showtime_inventory: IShowtimeInventory,
        booking_command_repo: IBookingCommandRepo,
        booking_ref_generator: BookingReferenceGenerator,
        settings: Settings,
        clock: Clock,
    ) -> None:
        self.showtime_inventory = showtime_inventory
        self.booking_command_repo = booking_command_repo
        self.booking_ref_generator = booking_ref_generator
        self.settings = settings
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        showtime_inventory: IShowtimeInventory = Depends(Provide[Container.showtime_inventory]),
        booking_command_repo: IBookingCommandRepo = Depends(
            Provide[Container.booking_command_repo]
        ),
        booking_ref_generator: BookingReferenceGenerator = Depends(
            Provide[Container.booking_ref_generator]
        ),
        settings: Settings = Depends(Provide[Container.config_service]),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            showtime_inventory=showtime_inventory,
            booking_command_repo=booking_command_repo,
            booking_ref_generator=booking_ref_generator,
            settings=settings,
            clock=clock,
        )

    @Logger.io
    async def create_booking(
        self,
        *,
        user_id: str,
        showtime_id: str,
        seats: List[RequestedSeat],
        contact_email: str,
        contact_phone: Optional[str] = None,
        payment_method: PaymentMethod = PaymentMethod.STRIPE,
        discount: int = 0,
    ) -> Booking:
        with self.tracer.start_as_current_span(
            'use_case.create_booking',
            attributes={'showtime.id': showtime_id, 'booking.seat_count': len(seats)},
        ):
            seat_ids = self._validate_request(
                user_id=user_id, seats=seats, contact_email=contact_email
            )

            showtime = await self.showtime_inventory.get_showtime(showtime_id=showtime_id)
            if showtime is None:
                raise ShowtimeNotFoundError(showtime_id)
            if showtime.status.is_closed:
                raise ShowtimeNotBookableError(showtime_id, showtime.status.value)

            selections = resolve_seats(showtime.hall, showtime.pricing, seat_ids)
            self._verify_client_prices(requested=seats, resolved=selections)
            if conflicts := showtime.conflicting_seats(seat_ids):
                metrics.record_seat_claim(result='conflict', duration=0.0)
                raise SeatsUnavailableError(conflicts)

            # Pure computation; bad discounts fail here before anything is written
            pricing = compute_pricing(
                selections,
                tax_rate_percent=self.settings.TAX_RATE_PERCENT,
                service_fee=self.settings.SERVICE_FEE,
                discount=discount,
            )

            claimed = await self._claim(showtime_id=showtime_id, seat_ids=seat_ids)

            try:
                booking = await self._persist_with_unique_ref(
                    user_id=user_id,
                    showtime=claimed,
                    seats=selections,
                    pricing=pricing,
                    contact_email=contact_email.strip(),
                    contact_phone=contact_phone,
                    payment_method=payment_method,
                )
            except BaseException:
                await self._compensate(showtime_id=showtime_id, seat_ids=seat_ids)
                raise

            Logger.base.info(
                f'🎟️  [CREATE-BOOKING] {booking.booking_ref} ({booking.status.value}) '
                f'user={user_id} showtime={showtime_id} seats={seat_ids} total={pricing.total}'
            )
            return booking

    def _validate_request(
        self, *, user_id: str, seats: List[RequestedSeat], contact_email: str
    ) -> List[str]:
        if not user_id:
            raise BookingValidationError('user_id is required')
        if not seats:
            raise BookingValidationError('Select at least one seat')
        if len(seats) > self.settings.MAX_SEATS_PER_BOOKING:
            raise BookingValidationError(
                f'At most {self.settings.MAX_SEATS_PER_BOOKING} seats can be booked at once'
            )

        seat_ids = [seat.id.strip().upper() for seat in seats]
        duplicates = sorted({seat_id for seat_id in seat_ids if seat_ids.count(seat_id) > 1})
        if duplicates:
            raise BookingValidationError(f'Duplicate seats in request: {", ".join(duplicates)}')

        email = (contact_email or '').strip()
        if '@' not in email or email.startswith('@') or email.endswith('@'):
            raise BookingValidationError('A valid contact email is required')
        return seat_ids

    @staticmethod
    def _verify_client_prices(
        *, requested: List[RequestedSeat], resolved: List[SeatSelection]
    ) -> None:
        for seat, selection in zip(requested, resolved):
            if seat.tier is not None and seat.tier != selection.tier.value:
                raise BookingValidationError(
                    f'Seat {selection.id} is {selection.tier.value}, not {seat.tier}'
                )
            if seat.price is not None and seat.price != selection.price:
                raise BookingValidationError(
                    f'Price for seat {selection.id} is {selection.price}, not {seat.price}'
                )

    async def _claim(self, *, showtime_id: str, seat_ids: List[str]) -> Showtime:
        started = time.perf_counter()
        try:
            claimed = await self.showtime_inventory.claim(
                showtime_id=showtime_id, seat_ids=seat_ids
            )
        except SeatsUnavailableError:
            metrics.record_seat_claim(result='conflict', duration=time.perf_counter() - started)
            raise
        except ShowtimeNotBookableError:
            metrics.record_seat_claim(
                result='not_bookable', duration=time.perf_counter() - started
            )
            raise
        metrics.record_seat_claim(result='claimed', duration=time.perf_counter() - started)
        return claimed

    async def _persist_with_unique_ref(
        self,
        *,
        user_id: str,
        showtime: Showtime,
        seats: List[SeatSelection],
        pricing: PricingBreakdown,
        contact_email: str,
        contact_phone: Optional[str],
        payment_method: PaymentMethod,
    ) -> Booking:
        now = self.clock()
        movie = MovieSnapshot(
            id=showtime.movie_id, title=showtime.movie_title, poster_url=showtime.poster_url
        )
        showtime_snapshot = ShowtimeSnapshot(
            id=showtime.id,
            date=showtime.date,
            start_time=showtime.start_time,
            starts_at=showtime.starts_at(self.settings.SHOWTIME_TIMEZONE),
            cinema=showtime.cinema.name,
            hall=showtime.hall.name,
            hall_type=showtime.hall.type,
        )
        paid_on_creation = (
            payment_method == PaymentMethod.FREE or self.settings.AUTO_CONFIRM_BOOKINGS
        )

        for attempt in range(1, self.settings.BOOKING_REF_MAX_ATTEMPTS + 1):
            booking = Booking.create(
                id=str(uuid_utils.uuid7()),
                booking_ref=self.booking_ref_generator.generate(now),
                user_id=user_id,
                movie=movie,
                showtime=showtime_snapshot,
                seats=seats,
                pricing=pricing,
                contact_email=contact_email,
                contact_phone=contact_phone,
                payment_method=payment_method,
                paid_on_creation=paid_on_creation,
                hold_minutes=self.settings.BOOKING_HOLD_MINUTES,
                now=now,
            )
            try:
                return await self.booking_command_repo.create(booking=booking)
            except DuplicateBookingRefError as e:
                metrics.booking_ref_collisions.inc()
                Logger.base.warning(
                    f'⚠️  [CREATE-BOOKING] {e.booking_ref} already taken '
                    f'(attempt {attempt}/{self.settings.BOOKING_REF_MAX_ATTEMPTS})'
                )

        raise TransientStorageError('Could not allocate a unique booking reference, retry later')

    async def _compensate(self, *, showtime_id: str, seat_ids: List[str]) -> None:
        Logger.base.warning(
            f'↩️  [CREATE-BOOKING] Persist failed, releasing claimed seats {seat_ids} '
            f'on showtime {showtime_id}'
        )
        try:
            result = await self.showtime_inventory.release(
                showtime_id=showtime_id, seat_ids=seat_ids
            )
        except Exception as e:
            # Original failure is re-raised by the caller; this one is only reported.
            Logger.base.error(
                f'❌ [CREATE-BOOKING] Compensating release failed for {seat_ids} '
                f'on showtime {showtime_id}: {e}'
            )
            return
        metrics.record_seats_released(reason='compensation', count=len(result.released))
