from collections.abc import AsyncIterator

from pymongo.errors import ServerSelectionTimeoutError
import pytest

from src.platform.config.core_setting import Settings
from src.platform.database.mongo_setting import (
    BOOKING_COLLECTION,
    SHOWTIME_COLLECTION,
    MongoDatabase,
)
from src.service.booking.driven_adapter.repo.booking_command_repo_impl import (
    BookingCommandRepoImpl,
)
from src.service.booking.driven_adapter.repo.booking_query_repo_impl import BookingQueryRepoImpl
from src.service.booking.driven_adapter.repo.document_mapper import showtime_to_document
from src.service.booking.driven_adapter.repo.showtime_inventory_impl import ShowtimeInventoryImpl
from test.factory import build_showtime


@pytest.fixture
async def mongo_database() -> AsyncIterator[MongoDatabase]:
    """Fresh collections per test; skipped when no MongoDB answers at MONGODB_URL."""
    database = MongoDatabase(
        settings=Settings(
            MONGODB_DB_NAME='popcorn_integration_test', MONGODB_SERVER_SELECTION_TIMEOUT_MS=1000
        )
    )
    try:
        await database.ping()
    except ServerSelectionTimeoutError:
        database.close()
        pytest.skip('MongoDB is not reachable')

    await database.db.drop_collection(SHOWTIME_COLLECTION)
    await database.db.drop_collection(BOOKING_COLLECTION)
    await database.ensure_indexes()
    await database.db[SHOWTIME_COLLECTION].insert_one(showtime_to_document(build_showtime()))

    yield database

    await database.db.drop_collection(SHOWTIME_COLLECTION)
    await database.db.drop_collection(BOOKING_COLLECTION)
    database.close()


@pytest.fixture
def showtime_inventory(mongo_database: MongoDatabase) -> ShowtimeInventoryImpl:
    return ShowtimeInventoryImpl(database=mongo_database)


@pytest.fixture
def booking_command_repo(mongo_database: MongoDatabase) -> BookingCommandRepoImpl:
    return BookingCommandRepoImpl(database=mongo_database)


@pytest.fixture
def booking_query_repo(mongo_database: MongoDatabase) -> BookingQueryRepoImpl:
    return BookingQueryRepoImpl(database=mongo_database)
