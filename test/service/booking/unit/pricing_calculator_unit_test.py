import pytest

from src.service.booking.domain.booking_errors import BookingValidationError
from src.service.booking.domain.enum.seat_tier import SeatTier
from src.service.booking.domain.pricing_calculator import compute_pricing, recompute_pricing
from src.service.booking.domain.value_object.seat_selection import SeatSelection


def _seat(seat_id: str, price: int) -> SeatSelection:
    return SeatSelection(
        id=seat_id, row=seat_id[0], number=int(seat_id[1:]), tier=SeatTier.VIP, price=price
    )


@pytest.mark.unit
class TestPricingCalculator:
    def test_two_vip_seats_with_tax_and_service_fee(self) -> None:
        """
        Given: J1 and J2 at 2000 cents, 5% tax, 100 cents service fee
        Then: subtotal 4000, tax 200, total 4300
        """
        pricing = compute_pricing(
            [_seat('J1', 2000), _seat('J2', 2000)], tax_rate_percent=5, service_fee=100
        )

        assert pricing.subtotal == 4000
        assert pricing.tax == 200
        assert pricing.service_fee == 100
        assert pricing.discount == 0
        assert pricing.total == 4300
        assert pricing.is_balanced()

    def test_tax_rounds_half_up_to_whole_cents(self) -> None:
        # 1010 * 5% = 50.5
        pricing = compute_pricing([_seat('A1', 1010)], tax_rate_percent=5, service_fee=0)

        assert pricing.tax == 51
        assert pricing.total == 1061

    def test_fractional_rate(self) -> None:
        # 1000 * 7.5% = 75 exactly
        pricing = compute_pricing([_seat('A1', 1000)], tax_rate_percent=7.5, service_fee=0)

        assert pricing.tax == 75

    def test_discount_is_subtracted_from_total(self) -> None:
        pricing = compute_pricing(
            [_seat('A1', 1000)], tax_rate_percent=5, service_fee=100, discount=150
        )

        assert pricing.total == 1000 + 50 + 100 - 150
        assert pricing.is_balanced()

    def test_discount_larger_than_amount_is_rejected(self) -> None:
        with pytest.raises(BookingValidationError, match='exceeds'):
            compute_pricing([_seat('A1', 100)], tax_rate_percent=0, service_fee=0, discount=101)

    @pytest.mark.parametrize(
        'tax_rate, service_fee, discount', [(-1, 0, 0), (5, -1, 0), (5, 0, -1)]
    )
    def test_negative_inputs_are_rejected(
        self, tax_rate: float, service_fee: int, discount: int
    ) -> None:
        with pytest.raises(BookingValidationError):
            compute_pricing(
                [_seat('A1', 1000)],
                tax_rate_percent=tax_rate,
                service_fee=service_fee,
                discount=discount,
            )

    def test_recompute_from_stored_seats_reproduces_breakdown(self) -> None:
        seats = [_seat('J1', 2000), _seat('J2', 2000), _seat('J3', 1337)]
        stored = compute_pricing(seats, tax_rate_percent=8.25, service_fee=75, discount=20)

        assert recompute_pricing(seats, stored) == stored
