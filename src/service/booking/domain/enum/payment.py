from enum import StrEnum


class PaymentMethod(StrEnum):
    STRIPE = 'stripe'
    CASH = 'cash'
    FREE = 'free'


class PaymentStatus(StrEnum):
    PENDING = 'pending'
    COMPLETED = 'completed'
    FAILED = 'failed'
    REFUNDED = 'refunded'
