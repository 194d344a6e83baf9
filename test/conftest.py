"""
Test Configuration and Fixtures

- Unit tests (test/**/unit/): in-memory adapters, no MongoDB
- API tests (test/**/api/): TestClient against the test app with container overrides
- Integration tests (test/**/integration/): real MongoDB, skipped when unreachable
"""

# Environment must be set before any src module reads settings at import time
import os


os.environ.setdefault('MONGODB_DB_NAME', 'popcorn_test')
os.environ.setdefault('LOG_TO_FILE', 'false')
os.environ.setdefault('SERVICE_NAME', 'popcorn-api-test')

from collections.abc import Generator  # noqa: E402
from typing import Any  # noqa: E402

from dependency_injector import providers  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402

from src.platform.config.core_setting import Settings  # noqa: E402
from src.platform.config.di import container  # noqa: E402
from test.fake.fixed_clock import FixedClock  # noqa: E402
from test.fake.in_memory_booking_repo import InMemoryBookingRepo  # noqa: E402
from test.fake.in_memory_showtime_inventory import InMemoryShowtimeInventory  # noqa: E402
from test.factory import T0, build_showtime  # noqa: E402


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(T0)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        TAX_RATE_PERCENT=5.0,
        SERVICE_FEE=100,
        BOOKING_HOLD_MINUTES=15,
        MAX_SEATS_PER_BOOKING=10,
        BOOKING_REF_MAX_ATTEMPTS=5,
        AUTO_CONFIRM_BOOKINGS=False,
        SHOWTIME_TIMEZONE='UTC',
        PAYMENT_WEBHOOK_SECRET=None,
    )


@pytest.fixture
def inventory() -> InMemoryShowtimeInventory:
    return InMemoryShowtimeInventory([build_showtime()])


@pytest.fixture
def booking_repo() -> InMemoryBookingRepo:
    return InMemoryBookingRepo()


# =============================================================================
# API fixtures
# =============================================================================
@pytest.fixture(scope='session')
def client() -> Generator[TestClient, None, None]:
    from test.test_main import app

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def overridden_container(
    inventory: InMemoryShowtimeInventory,
    booking_repo: InMemoryBookingRepo,
    clock: FixedClock,
    test_settings: Settings,
) -> Generator[Any, None, None]:
    container.showtime_inventory.override(providers.Object(inventory))
    container.booking_command_repo.override(providers.Object(booking_repo))
    container.booking_query_repo.override(providers.Object(booking_repo))
    container.clock.override(providers.Object(clock))
    container.config_service.override(providers.Object(test_settings))
    yield container
    container.reset_override()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    token = container.jwt_auth().create_jwt_token(user_id='user-1', email='guest@example.com')
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def other_user_headers() -> dict[str, str]:
    token = container.jwt_auth().create_jwt_token(user_id='user-2')
    return {'Authorization': f'Bearer {token}'}
