#!/usr/bin/env python3
"""
Database Seed Script
Populate demo showtimes into MongoDB

Features:
1. Create Showtimes - a week of screenings across two halls, all seats free
2. Issue Demo Token - print a bearer token for a demo user

Notes:
- Run `python script/reset_database.py` first for a clean database
- Tokens normally come from the identity provider; this one is for local testing only
"""

import asyncio
from dataclasses import dataclass
from datetime import date, timedelta

import uuid_utils

from src.platform.config.core_setting import settings
from src.platform.database.mongo_setting import SHOWTIME_COLLECTION, MongoDatabase
from src.service.booking.domain.entity.showtime_entity import Showtime
from src.service.booking.domain.enum.showtime_status import ShowtimeStatus
from src.service.booking.domain.value_object.venue import CinemaInfo, HallConfig, TierPricing
from src.service.booking.driven_adapter.repo.document_mapper import showtime_to_document
from src.service.booking.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


DEMO_USER_ID = 'demo-user'
DEMO_USER_EMAIL = 'demo@popcorn.test'
SEED_DAYS = 7


@dataclass
class MovieConfig:
    """Movie seed configuration"""

    id: str
    title: str
    poster_url: str
    start_times: list[str]


@dataclass
class HallSeed:
    name: str
    type: str
    rows: int
    columns: int
    pricing: TierPricing


MOVIES = [
    MovieConfig(
        id='movie-grand-premiere',
        title='The Grand Premiere',
        poster_url='https://cdn.popcorn.test/posters/grand-premiere.jpg',
        start_times=['14:30', '19:30'],
    ),
    MovieConfig(
        id='movie-midnight-run',
        title='Midnight Run',
        poster_url='https://cdn.popcorn.test/posters/midnight-run.jpg',
        start_times=['22:00'],
    ),
]

HALLS = [
    HallSeed(
        name='Hall 1',
        type='IMAX',
        rows=10,
        columns=15,
        pricing=TierPricing(regular=1200, premium=1800, vip=2800),
    ),
    HallSeed(name='Hall 2', type='2D', rows=8, columns=12, pricing=TierPricing()),
]

CINEMA = CinemaInfo(name='Popcorn Downtown', location='Downtown', address='1 Main Street')


def build_showtimes(start: date) -> list[Showtime]:
    showtimes = []
    for day in range(SEED_DAYS):
        for movie, hall in zip(MOVIES, HALLS):
            for start_time in movie.start_times:
                showtimes.append(
                    Showtime(
                        id=str(uuid_utils.uuid7()),
                        movie_id=movie.id,
                        movie_title=movie.title,
                        poster_url=movie.poster_url,
                        cinema=CINEMA,
                        hall=HallConfig.build(
                            name=hall.name, rows=hall.rows, columns=hall.columns, type=hall.type
                        ),
                        pricing=hall.pricing,
                        date=start + timedelta(days=day),
                        start_time=start_time,
                        status=ShowtimeStatus.OPEN,
                    )
                )
    return showtimes


async def create_showtimes(database: MongoDatabase) -> list[Showtime]:
    print(f'🎬 Creating showtimes for the next {SEED_DAYS} days...')
    showtimes = build_showtimes(date.today())
    await database.db[SHOWTIME_COLLECTION].insert_many(
        [showtime_to_document(showtime) for showtime in showtimes]
    )
    print(f'   ✅ Created {len(showtimes)} showtimes')
    return showtimes


async def verify_data(database: MongoDatabase) -> None:
    print('🔍 Verifying seeded data...')
    count = await database.db[SHOWTIME_COLLECTION].count_documents({})
    print(f'   Showtime count: {count}')
    print('   ✅ Data verification completed!')


async def main():
    print('🌱 Starting data seeding...')
    print('=' * 50)

    database = MongoDatabase(settings=settings)
    try:
        await database.ping()
        await database.ensure_indexes()
        showtimes = await create_showtimes(database)
        await verify_data(database)

        token = JwtAuth(settings=settings).create_jwt_token(
            user_id=DEMO_USER_ID, email=DEMO_USER_EMAIL
        )

        print()
        print('=' * 50)
        print('🌱 Data seeding completed!')
        print(f'🎟️  Try: GET /api/showtime/{showtimes[0].id}/seats')
        print(f'🔑 Demo token for {DEMO_USER_ID}:')
        print(f'   Authorization: Bearer {token}')

    except Exception as e:
        print(f'❌ Seeding failed: {e}')
        exit(1)

    finally:
        database.close()


if __name__ == '__main__':
    asyncio.run(main())
