"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.booking.app.command import (
    cancel_booking_use_case,
    complete_booking_use_case,
    confirm_booking_use_case,
    create_booking_use_case,
    expire_booking_use_case,
)
from src.service.booking.app.query import (
    get_booking_use_case,
    get_seat_layout_use_case,
    list_bookings_use_case,
)
from src.service.booking.driving_adapter.http_controller import payment_controller
from src.service.booking.driving_adapter.http_controller.auth import current_user


WIRE_MODULES: list[ModuleType] = [
    create_booking_use_case,
    confirm_booking_use_case,
    cancel_booking_use_case,
    expire_booking_use_case,
    complete_booking_use_case,
    get_booking_use_case,
    get_seat_layout_use_case,
    list_bookings_use_case,
    payment_controller,
    current_user,
]
