"""Authentication components.

This module provides:
- Token stores and the fail-safe CredentialGateway
- The refresh endpoint client
- The single-flight RefreshCoordinator
- Settings resolution from explicit values, environment and .env

Example:
    ```python
    from refresh_client_core.auth import CredentialGateway, InMemoryCredentialStore

    gateway = CredentialGateway(InMemoryCredentialStore(access_token, refresh_token))
    ```
"""

from refresh_client_core.auth.coordinator import RefreshCoordinator, RefreshState
from refresh_client_core.auth.credentials import CredentialResolver, MissingValueError
from refresh_client_core.auth.exceptions import (
    AuthenticationExpiredError,
    CredentialError,
    NoRefreshCredentialError,
    RefreshError,
    RefreshRejectedError,
    RefreshResponseError,
    RefreshUnreachableError,
    StorageUnavailableError,
)
from refresh_client_core.auth.refresh import HTTPRefreshEndpoint, RefreshEndpoint, TokenPair
from refresh_client_core.auth.store import (
    CredentialGateway,
    CredentialStore,
    FileCredentialStore,
    InMemoryCredentialStore,
)

__all__ = [
    "AuthenticationExpiredError",
    "CredentialError",
    "CredentialGateway",
    "CredentialResolver",
    "CredentialStore",
    "FileCredentialStore",
    "HTTPRefreshEndpoint",
    "InMemoryCredentialStore",
    "MissingValueError",
    "NoRefreshCredentialError",
    "RefreshCoordinator",
    "RefreshEndpoint",
    "RefreshError",
    "RefreshRejectedError",
    "RefreshResponseError",
    "RefreshState",
    "RefreshUnreachableError",
    "StorageUnavailableError",
    "TokenPair",
]
