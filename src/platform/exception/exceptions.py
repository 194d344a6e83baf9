from typing import Any


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int = 500) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def response_content(self) -> dict[str, Any]:
        return {'detail': self.message}


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class ForbiddenError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class AuthenticationError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


class TransientStorageError(CustomBaseError):
    """Storage write or read failed; safe for the client to retry the whole request."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 503)
