"""
MongoDB connection management (Motor)

One AsyncIOMotorClient per process; repositories receive the database handle
through the DI container and address collections by name.
"""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, IndexModel

from src.platform.config.core_setting import Settings
from src.platform.logging.loguru_io import Logger


SHOWTIME_COLLECTION = 'showtimes'
BOOKING_COLLECTION = 'bookings'


class MongoDatabase:
    def __init__(self, *, settings: Settings) -> None:
        self._settings = settings
        self._client: AsyncIOMotorClient | None = None

    @property
    def client(self) -> AsyncIOMotorClient:
        if self._client is None:
            self._client = AsyncIOMotorClient(
                self._settings.MONGODB_URL,
                serverSelectionTimeoutMS=self._settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
                tz_aware=True,
            )
        return self._client

    @property
    def db(self) -> AsyncIOMotorDatabase:
        return self.client[self._settings.MONGODB_DB_NAME]

    async def ping(self) -> None:
        await self.client.admin.command('ping')

    @Logger.io
    async def ensure_indexes(self) -> None:
        await self.db[BOOKING_COLLECTION].create_indexes(
            [
                IndexModel([('booking_ref', ASCENDING)], unique=True, name='uniq_booking_ref'),
                IndexModel([('user_id', ASCENDING), ('created_at', DESCENDING)]),
                IndexModel([('showtime.id', ASCENDING)]),
                IndexModel([('status', ASCENDING), ('expires_at', ASCENDING)]),
                IndexModel([('status', ASCENDING), ('showtime.starts_at', ASCENDING)]),
                IndexModel(
                    [
                        ('status', ASCENDING),
                        ('seats_released_at', ASCENDING),
                        ('updated_at', ASCENDING),
                    ]
                ),
            ]
        )
        await self.db[SHOWTIME_COLLECTION].create_indexes(
            [
                IndexModel([('movie_id', ASCENDING), ('date', ASCENDING)]),
                IndexModel([('status', ASCENDING)]),
            ]
        )
        Logger.base.info('🗂️  [Mongo] Indexes ensured')

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
