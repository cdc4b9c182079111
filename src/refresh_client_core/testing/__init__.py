"""Testing utilities for code built on the authenticated client.

FakeAuthServer is an in-process API for httpx.MockTransport: it accepts a
set of valid access tokens, serves the refresh route, and counts everything.
Its ``gate`` lets a test hold the refresh call open while more requests pile
up behind it.

Example:
    ```python
    server = FakeAuthServer(valid_tokens={"T1"}, next_access_token="T2")
    client = AuthenticatedClient(
        ClientSettings(base_url=server.base_url),
        store=InMemoryCredentialStore("expired", "R1"),
        transport=httpx.MockTransport(server.handler),
    )
    ```
"""

import asyncio
import json

import httpx

from refresh_client_core.auth.refresh import DEFAULT_REFRESH_PATH, TokenPair

__all__ = ["FakeAuthServer", "RecordingRefreshEndpoint"]


class FakeAuthServer:
    """Mock API that requires bearer tokens and exposes a refresh route.

    Attributes:
        valid_tokens: Access tokens the API currently accepts
        refresh_calls: Number of requests that reached the refresh route
        seen_tokens: ``(path, bearer token or None)`` for each API request
        refresh_status: Status the refresh route answers with (200 by default)
        gate: Event the refresh route waits on before answering
    """

    def __init__(
        self,
        *,
        valid_tokens: set[str] | None = None,
        valid_refresh_tokens: set[str] | None = None,
        next_access_token: str = "fresh-access",
        next_refresh_token: str | None = None,
        base_url: str = "https://api.example.com/api/",
        refresh_path: str = DEFAULT_REFRESH_PATH,
    ) -> None:
        self.valid_tokens = set(valid_tokens or ())
        self.valid_refresh_tokens = set(valid_refresh_tokens or ())
        self.next_access_token = next_access_token
        self.next_refresh_token = next_refresh_token
        self.base_url = base_url
        self.refresh_url_path = httpx.URL(base_url).join(refresh_path).path
        self.refresh_status = 200
        self.refresh_calls = 0
        self.seen_tokens: list[tuple[str, str | None]] = []
        self.gate = asyncio.Event()
        self.gate.set()

    async def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == self.refresh_url_path:
            return await self._refresh(request)

        header = request.headers.get("Authorization", "")
        token = header.removeprefix("Bearer ") if header.startswith("Bearer ") else None
        self.seen_tokens.append((request.url.path, token))

        if token not in self.valid_tokens:
            return httpx.Response(401, json={"message": "Token expired"})
        return httpx.Response(200, json={"path": request.url.path, "token": token})

    async def _refresh(self, request: httpx.Request) -> httpx.Response:
        self.refresh_calls += 1
        await self.gate.wait()

        if self.refresh_status != 200:
            return httpx.Response(self.refresh_status, json={"message": "Refresh failed"})

        refresh_token = json.loads(request.content).get("refreshToken")
        if self.valid_refresh_tokens and refresh_token not in self.valid_refresh_tokens:
            return httpx.Response(401, json={"message": "Invalid refresh token"})

        self.valid_tokens = {self.next_access_token}
        data = {"accessToken": self.next_access_token}
        if self.next_refresh_token:
            data["refreshToken"] = self.next_refresh_token
        return httpx.Response(200, json={"data": data})


class RecordingRefreshEndpoint:
    """RefreshEndpoint fake with a scripted outcome.

    Args:
        result: TokenPair to return, or exception instance to raise
        gate: Optional event awaited before answering
    """

    def __init__(self, result: TokenPair | Exception, gate: asyncio.Event | None = None) -> None:
        self.result = result
        self.gate = gate
        self.calls: list[str] = []

    async def refresh(self, refresh_token: str) -> TokenPair:
        self.calls.append(refresh_token)
        if self.gate is not None:
            await self.gate.wait()
        if isinstance(self.result, Exception):
            raise self.result
        return self.result
