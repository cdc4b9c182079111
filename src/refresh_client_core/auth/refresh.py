"""Refresh endpoint client: exchange a refresh token for a new access token.

The endpoint uses its own httpx client, never the authenticated transport, so
a 401 from the refresh call cannot trigger another refresh.

Example:
    ```python
    endpoint = HTTPRefreshEndpoint("https://api.example.com/api/")
    pair = await endpoint.refresh(refresh_token)
    print(pair.access_token)
    ```
"""

import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import httpx

from refresh_client_core.auth.exceptions import (
    RefreshRejectedError,
    RefreshResponseError,
    RefreshUnreachableError,
)
from refresh_client_core.errors.handler import error_message, exception_class_for

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_PATH = "auth/refreshToken"

# Status codes meaning the refresh token itself is invalid or expired
REJECTED_STATUS_CODES: frozenset[int] = frozenset([401, 403])


@dataclass(frozen=True)
class TokenPair:
    """Tokens returned by a successful refresh.

    ``refresh_token`` is None when the server did not rotate it.
    """

    access_token: str
    refresh_token: str | None = None


@runtime_checkable
class RefreshEndpoint(Protocol):
    """Remote operation minting a new access token."""

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Exchange ``refresh_token`` for new tokens.

        Raises:
            RefreshRejectedError: The refresh token is invalid or expired.
            RefreshUnreachableError: Transport failure or timeout.
            RefreshResponseError: Any other unusable answer.
        """
        ...


class HTTPRefreshEndpoint:
    """POST ``{"refreshToken": ...}`` to the API's refresh route.

    Expects a body of the form
    ``{"data": {"accessToken": "...", "refreshToken": "..."}}`` where
    ``refreshToken`` is optional.

    Args:
        base_url: API base URL the refresh path is resolved against
        path: Refresh route relative to ``base_url``
        timeout: Seconds before the call fails as unreachable
        transport: Optional transport, e.g. httpx.MockTransport in tests
    """

    def __init__(
        self,
        base_url: str,
        *,
        path: str = DEFAULT_REFRESH_PATH,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.path = path
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def refresh(self, refresh_token: str) -> TokenPair:
        try:
            response = await self._client.post(self.path, json={"refreshToken": refresh_token})
        except httpx.TransportError as e:
            raise RefreshUnreachableError(f"Refresh endpoint unreachable: {e!r}") from e
        except httpx.RequestError as e:
            raise RefreshResponseError(f"Refresh request failed: {e!r}") from e

        status_code = response.status_code
        if status_code in REJECTED_STATUS_CODES:
            raise RefreshRejectedError(error_message(response), status_code=status_code)

        if not response.is_success:
            cause = exception_class_for(status_code)(
                error_message(response), status_code=status_code, response=response
            )
            raise RefreshResponseError(str(cause), status_code=status_code) from cause

        return self._parse_tokens(response)

    def _parse_tokens(self, response: httpx.Response) -> TokenPair:
        try:
            body = response.json()
        except ValueError as e:
            raise RefreshResponseError("Refresh response is not JSON", status_code=response.status_code) from e

        data = body.get("data") if isinstance(body, dict) else None
        access_token = data.get("accessToken") if isinstance(data, dict) else None
        if not access_token:
            raise RefreshResponseError("No access token in response", status_code=response.status_code)

        return TokenPair(access_token=access_token, refresh_token=data.get("refreshToken") or None)
