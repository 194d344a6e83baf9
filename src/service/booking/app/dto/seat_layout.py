from typing import List

import attrs

from src.service.booking.domain.entity.showtime_entity import Showtime
from src.service.booking.domain.seat_map import SeatRow


@attrs.frozen
class SeatLayout:
    showtime: Showtime
    rows: List[SeatRow]
