from datetime import datetime, timezone
import secrets
from string import ascii_uppercase, digits
from typing import Optional


BOOKING_REF_PREFIX = 'PC'
BOOKING_REF_ALPHABET = ascii_uppercase + digits
BOOKING_REF_SUFFIX_LENGTH = 5


class BookingReferenceGenerator:
    """
    Human-readable booking references: ``PC-YYYYMMDD-XXXXX``

    36^5 suffixes per day makes collisions rare, not impossible; callers
    regenerate on a uniqueness violation.
    """

    def generate(self, now: Optional[datetime] = None) -> str:
        created = now or datetime.now(timezone.utc)
        suffix = ''.join(
            secrets.choice(BOOKING_REF_ALPHABET) for _ in range(BOOKING_REF_SUFFIX_LENGTH)
        )
        return f'{BOOKING_REF_PREFIX}-{created:%Y%m%d}-{suffix}'
