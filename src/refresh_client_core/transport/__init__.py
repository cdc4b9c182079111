"""Transport layers for the authenticated client.

Transport layers wrap another httpx transport, so they compose with any
other middleware transport:

    BearerRefreshTransport -> (your transports) -> httpx.AsyncHTTPTransport

Example:
    ```python
    from refresh_client_core.transport import BearerRefreshTransport

    transport = BearerRefreshTransport(
        wrapped_transport=httpx.AsyncHTTPTransport(),
        gateway=gateway,
        coordinator=coordinator,
    )
    ```
"""

from refresh_client_core.transport.auth import RETRY_FLAG, BearerRefreshTransport

__all__ = ["RETRY_FLAG", "BearerRefreshTransport"]
