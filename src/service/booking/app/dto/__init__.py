from src.service.booking.app.dto.requested_seat import RequestedSeat
from src.service.booking.app.dto.seat_layout import SeatLayout
from src.service.booking.app.dto.sweep_result import SweepResult

__all__ = ['RequestedSeat', 'SeatLayout', 'SweepResult']
