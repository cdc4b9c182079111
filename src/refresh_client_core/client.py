"""Application-facing authenticated client."""

from dataclasses import dataclass
from typing import Any

import httpx

from refresh_client_core.auth.coordinator import RefreshCoordinator
from refresh_client_core.auth.refresh import HTTPRefreshEndpoint, RefreshEndpoint
from refresh_client_core.auth.store import CredentialGateway, CredentialStore, InMemoryCredentialStore
from refresh_client_core.config import ClientSettings
from refresh_client_core.errors.handler import raise_for_status
from refresh_client_core.transport.auth import BearerRefreshTransport


@dataclass
class ApiRequest:
    """A request to send through the authenticated pipeline."""

    method: str
    path: str
    json: Any = None
    headers: dict[str, str] | None = None
    params: dict[str, Any] | None = None


class AuthenticatedClient:
    """HTTP client that attaches bearer tokens and refreshes them on expiry.

    All requests made through one client share one RefreshCoordinator, so a
    burst of 401s produces a single refresh call.

    Args:
        settings: Connection settings; read from the environment when omitted
        store: Token store; defaults to an in-memory store seeded from the environment
        refresh_endpoint: Refresh operation; defaults to HTTPRefreshEndpoint
            on ``settings.refresh_path``
        transport: Innermost transport doing the I/O (httpx.MockTransport in tests)
        raise_for_status: Raise APIError subclasses for non-2xx responses

    Example:
        ```python
        async with AuthenticatedClient(ClientSettings(base_url=BASE_URL)) as client:
            await client.set_credentials(login["accessToken"], login["refreshToken"])
            tasks = (await client.get("task/getTasks")).json()
        ```
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        *,
        store: CredentialStore | None = None,
        refresh_endpoint: RefreshEndpoint | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        raise_for_status: bool = True,
    ) -> None:
        self.settings = settings or ClientSettings.from_env()
        self.raise_for_status = raise_for_status

        self.gateway = CredentialGateway(store or InMemoryCredentialStore.from_env(self.settings.env_prefix))
        self._owns_endpoint = refresh_endpoint is None
        self.refresh_endpoint = refresh_endpoint or HTTPRefreshEndpoint(
            self.settings.base_url,
            path=self.settings.refresh_path,
            timeout=self.settings.timeout,
            transport=transport,
        )
        self.coordinator = RefreshCoordinator(self.gateway, self.refresh_endpoint)

        self._http = httpx.AsyncClient(
            base_url=self.settings.base_url,
            timeout=self.settings.timeout,
            headers={"Content-Type": "application/json"},
            transport=BearerRefreshTransport(
                wrapped_transport=transport or httpx.AsyncHTTPTransport(),
                gateway=self.gateway,
                coordinator=self.coordinator,
            ),
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()
        if self._owns_endpoint:
            await self.refresh_endpoint.aclose()

    async def set_credentials(self, access_token: str, refresh_token: str | None = None) -> bool:
        """Store tokens obtained from login."""
        return await self.gateway.set_tokens(access_token, refresh_token)

    async def clear_credentials(self) -> bool:
        """Forget both tokens (logout)."""
        return await self.gateway.clear_tokens()

    async def send(self, request: ApiRequest) -> httpx.Response:
        """Send a request with bearer auth.

        Returns:
            The response, after a transparent refresh and replay if needed.

        Raises:
            AuthenticationExpiredError: The session could not be recovered.
            APIError: Non-2xx response, when ``raise_for_status`` is enabled.
            httpx.TransportError: Network failures, unchanged.
        """
        response = await self._http.request(
            request.method,
            request.path,
            json=request.json,
            headers=request.headers,
            params=request.params,
        )
        if self.raise_for_status:
            raise_for_status(response)
        return response

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        return await self.send(ApiRequest(method=method.upper(), path=path, **kwargs))

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, json: Any = None, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", path, json=json, **kwargs)

    async def put(self, path: str, json: Any = None, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", path, json=json, **kwargs)

    async def patch(self, path: str, json: Any = None, **kwargs: Any) -> httpx.Response:
        return await self.request("PATCH", path, json=json, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", path, **kwargs)
