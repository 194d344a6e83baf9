"""
Booking Command Repository (MongoDB)

Status writes are compare-and-set on the stored status: ``replace_one`` with
``{'_id': id, 'status': expected}`` only matches while nobody else has moved
the booking.
"""

from datetime import datetime
from typing import Any, List

from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from src.platform.database.mongo_errors import storage_errors
from src.platform.database.mongo_setting import BOOKING_COLLECTION, MongoDatabase
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.domain.booking_errors import DuplicateBookingRefError
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_status import BookingStatus
from src.service.booking.driven_adapter.repo.document_mapper import (
    booking_from_document,
    booking_to_document,
)


RELEASING_STATUSES = [BookingStatus.CANCELLED.value, BookingStatus.EXPIRED.value]


class BookingCommandRepoImpl(IBookingCommandRepo):
    def __init__(self, *, database: MongoDatabase) -> None:
        self.database = database

    @property
    def _collection(self) -> Any:
        return self.database.db[BOOKING_COLLECTION]

    @Logger.io
    async def create(self, *, booking: Booking) -> Booking:
        with storage_errors('Booking insert'):
            try:
                await self._collection.insert_one(booking_to_document(booking))
            except DuplicateKeyError as e:
                raise DuplicateBookingRefError(booking.booking_ref) from e
        return booking

    @Logger.io
    async def get_by_id(self, *, booking_id: str) -> Booking | None:
        with storage_errors('Booking read'):
            doc = await self._collection.find_one({'_id': booking_id})
        return booking_from_document(doc) if doc else None

    @Logger.io
    async def get_by_ref(self, *, booking_ref: str) -> Booking | None:
        with storage_errors('Booking read'):
            doc = await self._collection.find_one({'booking_ref': booking_ref})
        return booking_from_document(doc) if doc else None

    @Logger.io
    async def save_transition(self, *, booking: Booking, expected_status: BookingStatus) -> bool:
        with storage_errors('Booking update'):
            result = await self._collection.replace_one(
                {'_id': booking.id, 'status': expected_status.value},
                booking_to_document(booking),
            )
        return result.matched_count == 1

    @Logger.io
    async def list_lapsed_holds(self, *, now: datetime, limit: int = 100) -> List[Booking]:
        with storage_errors('Lapsed hold scan'):
            cursor = (
                self._collection.find(
                    {'status': BookingStatus.PENDING.value, 'expires_at': {'$lte': now}}
                )
                .sort('expires_at', ASCENDING)
                .limit(limit)
            )
            docs = await cursor.to_list(length=limit)
        return [booking_from_document(doc) for doc in docs]

    @Logger.io
    async def list_started_confirmed(self, *, now: datetime, limit: int = 100) -> List[Booking]:
        with storage_errors('Started booking scan'):
            cursor = (
                self._collection.find(
                    {'status': BookingStatus.CONFIRMED.value, 'showtime.starts_at': {'$lte': now}}
                )
                .sort('showtime.starts_at', ASCENDING)
                .limit(limit)
            )
            docs = await cursor.to_list(length=limit)
        return [booking_from_document(doc) for doc in docs]

    @Logger.io
    async def mark_seats_released(self, *, booking_id: str, released_at: datetime) -> bool:
        with storage_errors('Booking release mark'):
            result = await self._collection.update_one(
                {'_id': booking_id, 'seats_released_at': None},
                {'$set': {'seats_released_at': released_at}},
            )
        return result.modified_count == 1

    @Logger.io
    async def list_unreleased(self, *, updated_before: datetime, limit: int = 100) -> List[Booking]:
        with storage_errors('Unreleased booking scan'):
            cursor = (
                self._collection.find(
                    {
                        'status': {'$in': RELEASING_STATUSES},
                        'seats_released_at': None,
                        'updated_at': {'$lte': updated_before},
                    }
                )
                .sort('updated_at', ASCENDING)
                .limit(limit)
            )
            docs = await cursor.to_list(length=limit)
        return [booking_from_document(doc) for doc in docs]

    @Logger.io
    async def take_over_release(
        self, *, booking_id: str, last_updated_at: datetime | None, now: datetime
    ) -> bool:
        with storage_errors('Booking release takeover'):
            result = await self._collection.update_one(
                {'_id': booking_id, 'seats_released_at': None, 'updated_at': last_updated_at},
                {'$set': {'updated_at': now}},
            )
        return result.modified_count == 1
