"""Token stores and the gateway the client core reads them through.

A store is the persistence boundary: it may be backed by memory, a file or
an OS keychain, and any of its operations may fail with
StorageUnavailableError. The core never talks to a store directly; it goes
through CredentialGateway, which turns storage failures into "no token".
"""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Protocol, runtime_checkable

from refresh_client_core.auth.credentials import CredentialResolver
from refresh_client_core.auth.exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)


@runtime_checkable
class CredentialStore(Protocol):
    """Persistence for the access token and refresh token."""

    async def get_access_token(self) -> str | None: ...

    async def get_refresh_token(self) -> str | None: ...

    async def set_tokens(self, access_token: str, refresh_token: str | None = None) -> None:
        """Store a new access token; keep the current refresh token when ``refresh_token`` is None."""
        ...

    async def clear_tokens(self) -> None: ...


class InMemoryCredentialStore:
    """Process-local token store."""

    def __init__(self, access_token: str | None = None, refresh_token: str | None = None):
        self._access_token = access_token
        self._refresh_token = refresh_token

    @classmethod
    def from_env(cls, prefix: str = "API", resolver: CredentialResolver | None = None) -> "InMemoryCredentialStore":
        """Seed the store from ``<PREFIX>_ACCESS_TOKEN`` and ``<PREFIX>_REFRESH_TOKEN``."""
        resolver = resolver or CredentialResolver()
        return cls(
            access_token=resolver.resolve(env_var_name=f"{prefix}_ACCESS_TOKEN"),
            refresh_token=resolver.resolve(env_var_name=f"{prefix}_REFRESH_TOKEN"),
        )

    async def get_access_token(self) -> str | None:
        return self._access_token

    async def get_refresh_token(self) -> str | None:
        return self._refresh_token

    async def set_tokens(self, access_token: str, refresh_token: str | None = None) -> None:
        self._access_token = access_token
        if refresh_token:
            self._refresh_token = refresh_token

    async def clear_tokens(self) -> None:
        self._access_token = None
        self._refresh_token = None


class FileCredentialStore:
    """Token store backed by a JSON file readable only by the owner.

    File format: ``{"access_token": "...", "refresh_token": "..."}``.
    File I/O runs in a worker thread so it does not stall the event loop.
    """

    def __init__(self, path: str | Path):
        self.path = Path(os.path.expanduser(str(path)))

    def _read(self) -> dict[str, str]:
        try:
            raw = self.path.read_text()
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageUnavailableError(f"Cannot read token file {self.path}: {e}") from e

        try:
            data = json.loads(raw) if raw.strip() else {}
        except ValueError as e:
            raise StorageUnavailableError(f"Token file {self.path} is not valid JSON") from e
        if not isinstance(data, dict):
            raise StorageUnavailableError(f"Token file {self.path} does not hold an object")
        return data

    def _write(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            # O_CREAT mode only applies to new files
            os.chmod(self.path, 0o600)
            with os.fdopen(fd, "w") as fh:
                json.dump(data, fh)
        except OSError as e:
            raise StorageUnavailableError(f"Cannot write token file {self.path}: {e}") from e

    def _update(self, access_token: str, refresh_token: str | None) -> None:
        data = self._read()
        data["access_token"] = access_token
        if refresh_token:
            data["refresh_token"] = refresh_token
        self._write(data)

    def _remove(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageUnavailableError(f"Cannot remove token file {self.path}: {e}") from e

    async def get_access_token(self) -> str | None:
        return (await asyncio.to_thread(self._read)).get("access_token")

    async def get_refresh_token(self) -> str | None:
        return (await asyncio.to_thread(self._read)).get("refresh_token")

    async def set_tokens(self, access_token: str, refresh_token: str | None = None) -> None:
        await asyncio.to_thread(self._update, access_token, refresh_token)

    async def clear_tokens(self) -> None:
        await asyncio.to_thread(self._remove)


class CredentialGateway:
    """Fail-safe access to a CredentialStore.

    Storage failures are logged and reported as an absent token (getters) or
    as ``False`` (setters), so a broken store degrades into unauthenticated
    requests instead of crashing the caller.
    """

    def __init__(self, store: CredentialStore):
        self._store = store

    @property
    def store(self) -> CredentialStore:
        return self._store

    async def get_access_token(self) -> str | None:
        try:
            return await self._store.get_access_token()
        except StorageUnavailableError as e:
            logger.warning(f"Error getting access token: {e}")
            return None

    async def get_refresh_token(self) -> str | None:
        try:
            return await self._store.get_refresh_token()
        except StorageUnavailableError as e:
            logger.warning(f"Error getting refresh token: {e}")
            return None

    async def set_tokens(self, access_token: str, refresh_token: str | None = None) -> bool:
        try:
            await self._store.set_tokens(access_token, refresh_token)
        except StorageUnavailableError as e:
            logger.warning(f"Error while saving tokens: {e}")
            return False
        return True

    async def clear_tokens(self) -> bool:
        try:
            await self._store.clear_tokens()
        except StorageUnavailableError as e:
            logger.warning(f"Error clearing tokens: {e}")
            return False
        return True
