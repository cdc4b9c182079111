"""Bearer authentication transport with transparent token refresh.

## Flow

1. Read the access token through the gateway and set
   ``Authorization: Bearer <token>``. No token means the request goes out
   unauthenticated.
2. Any response other than 401, and any transport exception, is handed back
   unchanged.
3. On 401 the request is flagged as retried, the coordinator supplies a new
   token (refreshing once for all concurrent callers), and the same request
   is sent again with the new header.
4. A 401 on a request that was already retried is terminal:
   AuthenticationExpiredError, no second refresh.
5. If the refresh fails, both tokens are cleared and
   AuthenticationExpiredError is raised with the refresh error as cause.

## Example

```python
import httpx

from refresh_client_core.auth.coordinator import RefreshCoordinator
from refresh_client_core.transport.auth import BearerRefreshTransport

transport = BearerRefreshTransport(
    wrapped_transport=httpx.AsyncHTTPTransport(),
    gateway=gateway,
    coordinator=RefreshCoordinator(gateway, endpoint),
)

async with httpx.AsyncClient(transport=transport, base_url=base_url) as client:
    response = await client.get("task/getTasks")
```
"""

import logging

import httpx

from refresh_client_core.auth.coordinator import RefreshCoordinator
from refresh_client_core.auth.exceptions import AuthenticationExpiredError
from refresh_client_core.auth.store import CredentialGateway

logger = logging.getLogger(__name__)

# Request extension flag marking a request already replayed after a refresh
RETRY_FLAG = "auth_retry"


def bearer(token: str) -> str:
    return f"Bearer {token}"


class BearerRefreshTransport(httpx.AsyncBaseTransport):
    """Transport that injects bearer tokens and recovers from expiry once.

    Args:
        wrapped_transport: The underlying transport that does the I/O
        gateway: Source of the current access token; cleared on terminal failure
        coordinator: Shared single-flight refresh coordinator
    """

    UNAUTHORIZED_STATUS_CODE = 401

    def __init__(
        self,
        *,
        wrapped_transport: httpx.AsyncBaseTransport,
        gateway: CredentialGateway,
        coordinator: RefreshCoordinator,
    ) -> None:
        self._wrapped_transport = wrapped_transport
        self._gateway = gateway
        self._coordinator = coordinator

    async def __aenter__(self):
        """Enter async context, delegating to wrapped transport."""
        await self._wrapped_transport.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context, delegating to wrapped transport."""
        await self._wrapped_transport.__aexit__(exc_type, exc_val, exc_tb)

    async def aclose(self) -> None:
        await self._wrapped_transport.aclose()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Send the request with a bearer token, refreshing once on 401.

        Raises:
            AuthenticationExpiredError: Refresh failed, or the replayed request
                was rejected again.
        """
        token = await self._gateway.get_access_token()
        if token:
            request.headers["Authorization"] = bearer(token)
        else:
            logger.debug(f"No access token, sending {request.method} {request.url} unauthenticated")

        # Buffer the body so the request can be replayed
        await request.aread()
        response = await self._wrapped_transport.handle_async_request(request)

        if response.status_code != self.UNAUTHORIZED_STATUS_CODE:
            return response
        return await self._recover(request, response)

    async def _recover(self, request: httpx.Request, response: httpx.Response) -> httpx.Response:
        await response.aclose()

        if request.extensions.get(RETRY_FLAG):
            logger.warning(f"Request {request.method} {request.url} rejected after token refresh")
            raise AuthenticationExpiredError("Request rejected with a freshly refreshed token")

        request.extensions[RETRY_FLAG] = True
        logger.debug(f"Request {request.method} {request.url} got 401, waiting for token refresh")

        try:
            new_token = await self._coordinator.obtain_refreshed_credential()
        except Exception as e:
            await self._gateway.clear_tokens()
            raise AuthenticationExpiredError(f"Session expired: {e}", cause=e) from e

        request.headers["Authorization"] = bearer(new_token)
        retry_response = await self._wrapped_transport.handle_async_request(request)

        if retry_response.status_code == self.UNAUTHORIZED_STATUS_CODE:
            return await self._recover(request, retry_response)
        return retry_response
