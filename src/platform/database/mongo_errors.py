from contextlib import contextmanager
from typing import Iterator

from pymongo.errors import PyMongoError

from src.platform.exception.exceptions import TransientStorageError


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Driver failures (timeouts, lost primary, write errors) surface as TransientStorageError."""
    try:
        yield
    except PyMongoError as e:
        raise TransientStorageError(f'{operation} failed: {e}') from e
