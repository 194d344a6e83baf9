import attrs


@attrs.frozen
class SweepResult:
    expired: int = 0
    completed: int = 0
    released: int = 0  # unfinished releases of cancelled or expired bookings
    skipped: int = 0
