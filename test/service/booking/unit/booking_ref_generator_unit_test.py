from datetime import datetime, timezone
import re

import pytest

from src.service.booking.domain.booking_ref_generator import BookingReferenceGenerator


@pytest.mark.unit
class TestBookingReferenceGenerator:
    def test_reference_format_uses_creation_date(self) -> None:
        ref = BookingReferenceGenerator().generate(datetime(2026, 3, 1, 23, 59, tzinfo=timezone.utc))

        assert re.fullmatch(r'PC-20260301-[A-Z0-9]{5}', ref)

    def test_references_vary(self) -> None:
        generator = BookingReferenceGenerator()
        refs = {generator.generate() for _ in range(50)}

        assert len(refs) > 1
