import attrs


@attrs.frozen
class PricingBreakdown:
    """All amounts are integer cents."""

    subtotal: int
    tax: int
    service_fee: int
    discount: int
    total: int
    tax_rate_percent: float

    def is_balanced(self) -> bool:
        return self.total == self.subtotal + self.tax + self.service_fee - self.discount
