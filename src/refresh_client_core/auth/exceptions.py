"""Exceptions for credential storage, token refresh and authentication.

The refresh failures are kept as separate kinds so callers and tests can tell
a missing refresh token apart from one the server rejected.

Example:
    ```python
    from refresh_client_core.auth.exceptions import AuthenticationExpiredError

    try:
        response = await client.get("auth/profile")
    except AuthenticationExpiredError:
        show_login_screen()
    ```
"""


class CredentialError(Exception):
    """Base exception for credential-related errors.

    All credential-specific exceptions inherit from this class,
    making it easy to catch any credential-related error.
    """

    pass


class StorageUnavailableError(CredentialError):
    """Raised by a credential store when it cannot read or write tokens."""

    pass


class RefreshError(CredentialError):
    """Base exception for a failed attempt to obtain a new access token."""

    pass


class NoRefreshCredentialError(RefreshError):
    """Raised when no refresh token is on record.

    The refresh endpoint is never called in this case.
    """

    def __init__(self, message: str = "No refresh token available"):
        super().__init__(message)


class RefreshRejectedError(RefreshError):
    """Raised when the refresh endpoint rejects the refresh token.

    Attributes:
        status_code: HTTP status returned by the refresh endpoint.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class RefreshUnreachableError(RefreshError):
    """Raised when the refresh endpoint cannot be reached (connect error, timeout)."""

    pass


class RefreshResponseError(RefreshError):
    """Raised when the refresh endpoint answers with something unusable.

    Covers unexpected status codes and bodies without an access token.

    Attributes:
        status_code: HTTP status returned by the refresh endpoint, if any.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationExpiredError(CredentialError):
    """Terminal authentication failure surfaced to the application.

    Raised when a refresh failed, or when a request still gets 401 after
    being replayed with a freshly refreshed token. The application should
    send the user back through login.

    Attributes:
        cause: The error that ended the refresh, usually a RefreshError, or
            None when the replayed request itself was rejected.

    Example:
        ```python
        try:
            await client.post("task/createTask", json=payload)
        except AuthenticationExpiredError as e:
            if isinstance(e.cause, NoRefreshCredentialError):
                print("Never logged in")
        ```
    """

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause
