from typing import Any, Dict, List

from pymongo import DESCENDING

from src.platform.database.mongo_errors import storage_errors
from src.platform.database.mongo_setting import BOOKING_COLLECTION, MongoDatabase
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.driven_adapter.repo.document_mapper import booking_from_document


MAX_LISTED_BOOKINGS = 200


class BookingQueryRepoImpl(IBookingQueryRepo):
    def __init__(self, *, database: MongoDatabase) -> None:
        self.database = database

    @Logger.io
    async def list_by_user(self, *, user_id: str, status: str = '') -> List[Booking]:
        query: Dict[str, Any] = {'user_id': user_id}
        if status:
            query['status'] = status

        with storage_errors('Booking list'):
            cursor = (
                self.database.db[BOOKING_COLLECTION]
                .find(query)
                .sort('created_at', DESCENDING)
                .limit(MAX_LISTED_BOOKINGS)
            )
            docs = await cursor.to_list(length=MAX_LISTED_BOOKINGS)
        return [booking_from_document(doc) for doc in docs]
