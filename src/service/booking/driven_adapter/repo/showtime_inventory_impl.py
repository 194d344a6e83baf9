"""
Showtime Inventory (MongoDB)

Seat claims and releases are single ``find_one_and_update`` calls with an
aggregation-pipeline update: the availability check lives in the filter and
booked_seats, available_seats and status are rewritten in the same document
write. Two overlapping claims can never both match the filter.
"""

from typing import Any, Dict, List

from pymongo import ReturnDocument

from src.platform.database.mongo_errors import storage_errors
from src.platform.database.mongo_setting import SHOWTIME_COLLECTION, MongoDatabase
from src.platform.exception.exceptions import TransientStorageError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_showtime_inventory import (
    IShowtimeInventory,
    SeatReleaseResult,
)
from src.service.booking.domain.booking_errors import (
    SeatsUnavailableError,
    ShowtimeNotBookableError,
    ShowtimeNotFoundError,
)
from src.service.booking.domain.entity.showtime_entity import Showtime
from src.service.booking.domain.enum.showtime_status import ShowtimeStatus
from src.service.booking.driven_adapter.repo.document_mapper import showtime_from_document


CLAIM_MAX_ATTEMPTS = 3
CLAIMABLE_STATUSES = [s.value for s in ShowtimeStatus if s.accepts_claims]

_RECOUNT_AVAILABLE: Dict[str, Any] = {
    '$set': {
        'available_seats': {'$subtract': ['$hall.total_seats', {'$size': '$booked_seats'}]},
        'updated_at': '$$NOW',
    }
}


def _claim_pipeline(seat_ids: List[str]) -> List[Dict[str, Any]]:
    return [
        {
            '$set': {
                'booked_seats': {
                    '$concatArrays': [
                        {'$ifNull': ['$booked_seats', []]},
                        {'$literal': seat_ids},
                    ]
                }
            }
        },
        _RECOUNT_AVAILABLE,
        {
            '$set': {
                'status': {
                    '$cond': [
                        {'$lte': ['$available_seats', 0]},
                        ShowtimeStatus.FULL.value,
                        '$status',
                    ]
                }
            }
        },
    ]


def _release_pipeline(seat_ids: List[str]) -> List[Dict[str, Any]]:
    return [
        {
            '$set': {
                'booked_seats': {
                    '$filter': {
                        'input': {'$ifNull': ['$booked_seats', []]},
                        'as': 'seat',
                        'cond': {'$not': [{'$in': ['$$seat', {'$literal': seat_ids}]}]},
                    }
                }
            }
        },
        _RECOUNT_AVAILABLE,
        {
            '$set': {
                'status': {
                    '$cond': [
                        {
                            '$and': [
                                {'$eq': ['$status', ShowtimeStatus.FULL.value]},
                                {'$gt': ['$available_seats', 0]},
                            ]
                        },
                        ShowtimeStatus.OPEN.value,
                        '$status',
                    ]
                }
            }
        },
    ]


class ShowtimeInventoryImpl(IShowtimeInventory):
    def __init__(self, *, database: MongoDatabase) -> None:
        self.database = database

    @property
    def _collection(self) -> Any:
        return self.database.db[SHOWTIME_COLLECTION]

    @Logger.io
    async def get_showtime(self, *, showtime_id: str) -> Showtime | None:
        with storage_errors('Showtime read'):
            doc = await self._collection.find_one({'_id': showtime_id})
        return showtime_from_document(doc) if doc else None

    @Logger.io
    async def check_available(self, *, showtime_id: str, seat_ids: List[str]) -> bool:
        showtime = await self.get_showtime(showtime_id=showtime_id)
        if showtime is None:
            raise ShowtimeNotFoundError(showtime_id)
        return showtime.is_available(seat_ids)

    @Logger.io
    async def claim(self, *, showtime_id: str, seat_ids: List[str]) -> Showtime:
        for _ in range(CLAIM_MAX_ATTEMPTS):
            with storage_errors('Seat claim'):
                doc = await self._collection.find_one_and_update(
                    {
                        '_id': showtime_id,
                        'booked_seats': {'$nin': seat_ids},
                        'status': {'$in': CLAIMABLE_STATUSES},
                    },
                    _claim_pipeline(seat_ids),
                    return_document=ReturnDocument.AFTER,
                )
            if doc is not None:
                return showtime_from_document(doc)

            # Filter did not match; find out which condition failed
            current = await self.get_showtime(showtime_id=showtime_id)
            if current is None:
                raise ShowtimeNotFoundError(showtime_id)
            if current.status.is_closed:
                raise ShowtimeNotBookableError(showtime_id, current.status.value)
            if conflicts := current.conflicting_seats(seat_ids):
                raise SeatsUnavailableError(conflicts)
            if not current.status.accepts_claims:
                raise ShowtimeNotBookableError(showtime_id, current.status.value)
            # Seats were freed between the write and the re-read
            Logger.base.info(f'🔄 [INVENTORY] Claim on {showtime_id} raced a release, retrying')

        raise TransientStorageError(f'Seat claim on showtime {showtime_id} kept racing, retry')

    @Logger.io
    async def release(self, *, showtime_id: str, seat_ids: List[str]) -> SeatReleaseResult:
        with storage_errors('Seat release'):
            before = await self._collection.find_one_and_update(
                {'_id': showtime_id},
                _release_pipeline(seat_ids),
                return_document=ReturnDocument.BEFORE,
            )
        if before is None:
            return SeatReleaseResult(showtime=None, released=[], missing=list(seat_ids))

        updated, released, missing = showtime_from_document(before).release_seats(seat_ids)
        return SeatReleaseResult(showtime=updated, released=released, missing=missing)
