"""Error kinds raised by services and dependencies.

Handlers raise one of the ``AppError`` subclasses below; ``main`` turns them
into ``{"detail": ...}`` JSON responses with the matching status code. Only
``InfrastructureError`` is logged as a fault.
"""

import enum

from fastapi import status


class ErrorKind(str, enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    UNAUTHORIZED = "unauthorized"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    INFRASTRUCTURE = "infrastructure"


class AppError(Exception):
    """Base class for expected request failures."""

    kind: ErrorKind = ErrorKind.INFRASTRUCTURE
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, **extra):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"detail": self.message, **self.extra}


class UnauthenticatedError(AppError):
    kind = ErrorKind.UNAUTHENTICATED
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class UnauthorizedError(AppError):
    kind = ErrorKind.UNAUTHORIZED
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class ValidationError(AppError):
    kind = ErrorKind.VALIDATION
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InfrastructureError(AppError):
    kind = ErrorKind.INFRASTRUCTURE
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"
