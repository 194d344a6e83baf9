"""
HTTP mapping for errors raised by use cases

CustomBaseError subclasses carry their own status code and body. 401 answers
advertise the bearer scheme and 503 answers tell the client when to retry.
"""

from typing import Any, Callable, Coroutine

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response

from src.platform.exception.exceptions import (
    AuthenticationError,
    CustomBaseError,
    TransientStorageError,
)
from src.platform.logging.loguru_io import Logger


ExceptionHandler = Callable[[Request, Exception], Coroutine[Any, Any, Response]]

RETRY_AFTER_SECONDS = 1


def _error_headers(error: CustomBaseError) -> dict[str, str] | None:
    if isinstance(error, AuthenticationError):
        return {'WWW-Authenticate': 'Bearer'}
    if isinstance(error, TransientStorageError):
        return {'Retry-After': str(RETRY_AFTER_SECONDS)}
    return None


async def custom_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = exc if isinstance(exc, CustomBaseError) else CustomBaseError(str(exc))
    return JSONResponse(
        status_code=error.status_code,
        content=error.response_content(),
        headers=_error_headers(error),
    )


async def value_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={'detail': str(exc)})


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Malformed bodies are 400 like every other client error, not FastAPI's 422."""
    error = exc if isinstance(exc, RequestValidationError) else RequestValidationError([])
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={'detail': jsonable_encoder(error.errors())},
    )


async def general_500_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    Logger.base.error(
        f'💥 [HTTP] Unhandled {type(exc).__name__} on {request.method} {request.url.path}'
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={'detail': 'Internal server error'},
    )


EXCEPTION_HANDLERS: dict[type[Exception], ExceptionHandler] = {
    CustomBaseError: custom_error_handler,
    ValueError: value_error_handler,
    RequestValidationError: validation_error_handler,
    Exception: general_500_exception_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
