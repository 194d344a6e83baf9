"""
Loguru sinks for the booking API

Every line carries the writing process (API worker or sweeper), the
``@Logger.io`` call target and the elapsed time of the current call chain.
Standard-library loggers (uvicorn, pymongo, opentelemetry) are routed through
the same sinks.
"""

from contextvars import ContextVar
from enum import StrEnum
import logging
import sys
from typing import TYPE_CHECKING

from loguru import logger as loguru_logger


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import Settings, settings
from src.platform.logging.service_context import get_service_context


# Matched case-insensitively against argument names and `key=value` text
SENSITIVE_KEYWORDS = {
    'token',
    'authorization',
    'secret',
    'contact_phone',
}

# Library loggers that only add noise below WARNING
QUIET_LOGGERS = ('pymongo', 'motor', 'uvicorn.access')

chain_start_time_var: ContextVar[float] = ContextVar('chain_start_time', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth', default=0)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


def _default_extra() -> dict[str, str]:
    return {
        ExtraField.SERVICE_CONTEXT: get_service_context(),
        ExtraField.CHAIN_START_TIME: '',
        ExtraField.CALL_TARGET: '',
    }


class InterceptHandler(logging.Handler):
    """Forward stdlib records to loguru, keeping the original caller location."""

    def __init__(self) -> None:
        super().__init__()
        self._logger: 'LoguruLogger' = loguru_logger.bind(**_default_extra())

    def emit(self, record: logging.LogRecord) -> None:
        if record.name.startswith(QUIET_LOGGERS) and record.levelno < logging.WARNING:
            return

        try:
            level: str | int = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        self._logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


io_log_format = ' | '.join(
    (
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        '{message}',
        '<lk>{elapsed}</>',
        f'<lk>{{extra[{ExtraField.CHAIN_START_TIME}]:<18}}</>',
    )
)


def configure_logging(config: Settings) -> 'LoguruLogger':
    """Install the stdout sink (and the hourly file sink when LOG_TO_FILE is set)."""
    loguru_logger.remove()
    bound = loguru_logger.bind(**_default_extra())
    level = 'DEBUG' if config.DEBUG else 'INFO'

    if config.LOG_JSON:
        bound.add(sys.stdout, level=level, serialize=True, enqueue=True)
    else:
        bound.add(sys.stdout, format=io_log_format, level=level, enqueue=True)

    if config.LOG_TO_FILE:
        bound.add(
            str(config.LOG_DIR / '{time:YYYY-MM-DD_HH}.log'),
            format=io_log_format,
            rotation='1 hour',
            retention=config.LOG_RETENTION,
            compression='gz',
            enqueue=True,
            level=level,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    return bound


custom_logger = configure_logging(settings)
