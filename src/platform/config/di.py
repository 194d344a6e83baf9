"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.mongo_setting import MongoDatabase
from src.platform.types.clock import utc_now
from src.service.booking.domain.booking_ref_generator import BookingReferenceGenerator
from src.service.booking.driven_adapter.repo.booking_command_repo_impl import (
    BookingCommandRepoImpl,
)
from src.service.booking.driven_adapter.repo.booking_query_repo_impl import BookingQueryRepoImpl
from src.service.booking.driven_adapter.repo.showtime_inventory_impl import ShowtimeInventoryImpl
from src.service.booking.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Time source (tests override with a fixed clock)
    clock = providers.Object(utc_now)

    # Database (one Motor client per process)
    mongo_database = providers.Singleton(MongoDatabase, settings=config_service)

    # Repositories (stateless, share the Motor client)
    showtime_inventory = providers.Singleton(ShowtimeInventoryImpl, database=mongo_database)
    booking_command_repo = providers.Singleton(BookingCommandRepoImpl, database=mongo_database)
    booking_query_repo = providers.Singleton(BookingQueryRepoImpl, database=mongo_database)

    # Domain services
    booking_ref_generator = providers.Singleton(BookingReferenceGenerator)

    # Auth service
    jwt_auth = providers.Singleton(JwtAuth, settings=config_service)


container = Container()


def cleanup() -> None:
    container.mongo_database().close()
    container.reset_singletons()
