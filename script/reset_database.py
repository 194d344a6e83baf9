#!/usr/bin/env python3
"""
Database Reset Script
Reset the MongoDB database used by the booking API

Features:
1. Drop Collections - wipe showtimes and bookings
2. Ensure Indexes - recreate the unique booking_ref index and the sweep indexes

Notes:
- This script only resets database structure, does not seed data
- To seed demo showtimes, run `python script/seed_data.py`
"""

import asyncio

from src.platform.config.core_setting import settings
from src.platform.database.mongo_setting import (
    BOOKING_COLLECTION,
    SHOWTIME_COLLECTION,
    MongoDatabase,
)


async def drop_collections(database: MongoDatabase) -> None:
    print(f'MongoDB URL: {settings.MONGODB_URL}')
    print(f'Database name: {settings.MONGODB_DB_NAME}')

    for collection in (SHOWTIME_COLLECTION, BOOKING_COLLECTION):
        await database.db.drop_collection(collection)
        print(f"   ✅ Collection '{collection}' dropped")


async def main():
    print('🔄 Starting database reset...')
    print('=' * 50)

    database = MongoDatabase(settings=settings)
    try:
        await database.ping()

        print('🗑️ Dropping collections...')
        await drop_collections(database)
        print()

        print('🏗️ Creating indexes...')
        await database.ensure_indexes()
        print()

        print('=' * 50)
        print('✅ Database reset completed!')
        print('💡 To seed demo data, run: python script/seed_data.py')

    except Exception as e:
        print(f'❌ Reset failed: {e}')
        exit(1)

    finally:
        database.close()


if __name__ == '__main__':
    asyncio.run(main())
