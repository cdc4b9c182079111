"""Map HTTP error responses to exceptions."""

import httpx

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

STATUS_EXCEPTIONS: dict[int, type[APIError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    429: RateLimitError,
}

# JSON fields APIs commonly use for a human-readable error, in lookup order
MESSAGE_FIELDS = ("message", "error", "detail")


def exception_class_for(status_code: int) -> type[APIError]:
    """Return the exception class for an HTTP status code."""
    if status_code in STATUS_EXCEPTIONS:
        return STATUS_EXCEPTIONS[status_code]
    if 400 <= status_code < 500:
        return ClientError
    if 500 <= status_code < 600:
        return ServerError
    return APIError


def error_message(response: httpx.Response) -> str:
    """Build an exception message from an error response.

    Prefers a ``message``/``error``/``detail`` string from a JSON body and
    falls back to the first 200 characters of the body text.
    """
    status_code = response.status_code
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        for field in MESSAGE_FIELDS:
            value = data.get(field)
            if isinstance(value, str) and value:
                return f"HTTP {status_code}: {value}"

    text = response.text[:200]
    return f"HTTP {status_code}: {text}" if text else f"HTTP {status_code}"


def raise_for_status(response: httpx.Response) -> None:
    """Raise the matching APIError subclass for a non-2xx response.

    Args:
        response: HTTP response object. Streamed responses must be read first.

    Raises:
        APIError subclass based on status code
    """
    if response.is_success:
        return

    exc_class = exception_class_for(response.status_code)
    message = error_message(response)

    if exc_class is RateLimitError:
        retry_after = None
        try:
            retry_after = int(response.headers["retry-after"])
        except (KeyError, ValueError):
            pass
        raise RateLimitError(
            message,
            retry_after=retry_after,
            status_code=response.status_code,
            response=response,
        )

    raise exc_class(message, status_code=response.status_code, response=response)
