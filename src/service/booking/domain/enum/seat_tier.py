from enum import StrEnum


class SeatTier(StrEnum):
    REGULAR = 'regular'
    PREMIUM = 'premium'
    VIP = 'vip'
