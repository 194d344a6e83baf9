from enum import StrEnum


class ShowtimeStatus(StrEnum):
    SCHEDULED = 'scheduled'
    OPEN = 'open'
    FULL = 'full'
    CANCELLED = 'cancelled'
    COMPLETED = 'completed'

    @property
    def accepts_claims(self) -> bool:
        return self in (ShowtimeStatus.SCHEDULED, ShowtimeStatus.OPEN)

    @property
    def is_closed(self) -> bool:
        """No further bookings regardless of which seats are free."""
        return self in (ShowtimeStatus.CANCELLED, ShowtimeStatus.COMPLETED)
