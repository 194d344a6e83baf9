from prometheus_client import Counter, Histogram


class BookingMetrics:
    """
    Seat inventory and booking lifecycle metrics

    Labels stay low-cardinality: no showtime or booking ids.
    """

    def __init__(self) -> None:
        # ========== Seat Inventory Metrics ==========
        self.seat_claims = Counter(
            'seat_claims_total',
            'Seat claim attempts',
            ['result'],  # claimed/conflict/not_bookable
        )

        self.seat_claim_duration = Histogram(
            'seat_claim_duration_seconds',
            'Atomic seat claim duration',
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
        )

        self.seats_released = Counter(
            'seats_released_total',
            'Seats returned to inventory',
            ['reason'],  # cancelled/expired/compensation
        )

        self.inventory_invariant_violations = Counter(
            'inventory_invariant_violations_total',
            'Booking seats missing from the showtime booked set at release time',
        )

        # ========== Booking Lifecycle Metrics ==========
        self.booking_transitions = Counter(
            'booking_transitions_total',
            'Booking state transitions',
            ['from_status', 'to_status'],
        )

        self.booking_ref_collisions = Counter(
            'booking_ref_collisions_total',
            'Booking reference uniqueness violations that forced a retry',
        )

    # ========== Helper Methods ==========

    def record_seat_claim(self, *, result: str, duration: float) -> None:
        self.seat_claims.labels(result=result).inc()
        self.seat_claim_duration.observe(duration)

    def record_seats_released(self, *, reason: str, count: int) -> None:
        self.seats_released.labels(reason=reason).inc(count)

    def record_transition(self, *, from_status: str, to_status: str) -> None:
        self.booking_transitions.labels(from_status=from_status, to_status=to_status).inc()


# Global metrics instance
metrics = BookingMetrics()
