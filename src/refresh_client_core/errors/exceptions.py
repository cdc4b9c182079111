"""Structured exceptions for non-auth API errors.

These pass through the bearer transport untouched; AuthenticatedClient raises
them for non-2xx responses. The exception message is the ``message`` field of
the API's JSON error body (``error`` and ``detail`` are accepted too), so
``str(e)`` is what the server told the user, e.g. ``"Task not found"``.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class APIError(Exception):
    """A non-2xx response from the API.

    Attributes:
        status_code: HTTP status of the response, if known
        response: The httpx response, for callers that need the full body

    Example:
        ```python
        try:
            await client.delete("task/42")
        except APIError as e:
            show_toast(str(e))  # the server's "message" text
        ```
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: "httpx.Response | None" = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class ClientError(APIError):
    """The API refused the request (4xx); retrying it unchanged will not help."""

    pass


class BadRequestError(ClientError):
    """400: the payload failed server-side validation, e.g. a task without a title."""

    pass


class UnauthorizedError(ClientError):
    """401 seen outside the bearer pipeline.

    Requests sent through AuthenticatedClient never raise this: a 401 either
    triggers a token refresh or ends in AuthenticationExpiredError.
    """

    pass


class ForbiddenError(ClientError):
    """403: the token is valid but does not grant access to the resource."""

    pass


class NotFoundError(ClientError):
    """404: the addressed record does not exist."""

    pass


class ConflictError(ClientError):
    """409: the change clashes with the record's current state."""

    pass


class RateLimitError(ClientError):
    """429: too many requests.

    ``retry_after`` holds the Retry-After header in seconds when the server
    sent one. The client does not wait and retry by itself.
    """

    def __init__(self, message: str, retry_after: int | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class ServerError(APIError):
    """5xx: the API failed while handling the request."""

    pass
