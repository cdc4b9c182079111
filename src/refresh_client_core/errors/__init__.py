"""Error mapping for ordinary (non-auth) API failures."""

from refresh_client_core.errors.exceptions import (
    APIError,
    BadRequestError,
    ClientError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ServerError,
    UnauthorizedError,
)
from refresh_client_core.errors.handler import error_message, exception_class_for, raise_for_status

__all__ = [
    "APIError",
    "BadRequestError",
    "ClientError",
    "ConflictError",
    "ForbiddenError",
    "NotFoundError",
    "RateLimitError",
    "ServerError",
    "UnauthorizedError",
    "error_message",
    "exception_class_for",
    "raise_for_status",
]
