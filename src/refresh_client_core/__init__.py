"""Refresh Client Core - authenticated async HTTP client with token refresh.

This library wraps httpx so that every request carries a bearer token and an
expired token is refreshed exactly once, no matter how many requests hit the
401 at the same time:
- Credential gateway over pluggable token stores
- Single-flight refresh coordinator that queues concurrent callers
- Bearer transport that replays requests after a refresh
- Status-code based error mapping for ordinary API failures

Example:
    ```python
    from refresh_client_core.client import AuthenticatedClient
    from refresh_client_core.config import ClientSettings

    settings = ClientSettings.from_env(prefix="MY_API")

    async with AuthenticatedClient(settings) as client:
        await client.set_credentials(access_token, refresh_token)
        response = await client.get("task/getTasks")
    ```
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
