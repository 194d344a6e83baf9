from abc import ABC, abstractmethod
from typing import List

from src.service.booking.domain.entity.booking_entity import Booking


class IBookingQueryRepo(ABC):
    @abstractmethod
    async def list_by_user(self, *, user_id: str, status: str = '') -> List[Booking]:
        """Bookings of one user, newest first; empty status means all."""
        pass
