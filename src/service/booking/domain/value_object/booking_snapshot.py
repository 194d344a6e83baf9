"""
Denormalized copies taken when a booking is created.

Later catalog edits never reach these; historical bookings keep what the
customer actually bought.
"""

from datetime import date, datetime
from typing import Optional

import attrs


@attrs.frozen
class MovieSnapshot:
    id: str
    title: str
    poster_url: Optional[str] = None


@attrs.frozen
class ShowtimeSnapshot:
    id: str
    date: date
    start_time: str
    starts_at: datetime
    cinema: str
    hall: str
    hall_type: str
