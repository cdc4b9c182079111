"""Pytest configuration and shared fixtures for refresh-client-core tests."""

import asyncio

import httpx
import pytest

from refresh_client_core.auth.store import CredentialGateway, InMemoryCredentialStore
from refresh_client_core.client import AuthenticatedClient
from refresh_client_core.config import ClientSettings
from refresh_client_core.testing import FakeAuthServer


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear test-related environment variables before each test.

    This prevents test pollution when testing settings and token resolution.
    """
    import os

    test_prefixes = ("TEST_", "API_")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture
def wait_until():
    """Poll a condition while letting other tasks run."""

    async def _wait(predicate, timeout: float = 2.0):
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("condition not reached in time")
            await asyncio.sleep(0.001)

    return _wait


@pytest.fixture
def server():
    """Fake API accepting T1 until a refresh mints T2."""
    return FakeAuthServer(valid_tokens={"T1"}, next_access_token="T2")


@pytest.fixture
def store():
    return InMemoryCredentialStore(access_token="T1", refresh_token="R1")


@pytest.fixture
def gateway(store):
    return CredentialGateway(store)


@pytest.fixture
async def client(server, store):
    async with AuthenticatedClient(
        ClientSettings(base_url=server.base_url),
        store=store,
        transport=httpx.MockTransport(server.handler),
    ) as client:
        yield client
