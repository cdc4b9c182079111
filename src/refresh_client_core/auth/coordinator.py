"""Single-flight token refresh.

Many requests can hit a 401 at the same moment. The RefreshCoordinator makes
sure only one of them calls the refresh endpoint; every other caller that
arrives while that call is outstanding is queued and receives the very same
outcome once it settles.

How it works:
- Every caller gets its own future and is appended to the pending list.
- The first caller (state IDLE) flips the state to REFRESHING and starts the
  refresh in a separate task.
- When the refresh settles the state goes back to IDLE and the pending list
  is swapped for an empty one and drained: all futures get the same token or
  the same exception.

Check-and-enqueue contains no ``await``, so on a single event loop no other
task can run between reading the state and joining the queue.

Example:
    ```python
    coordinator = RefreshCoordinator(gateway, HTTPRefreshEndpoint(base_url))

    # From any number of concurrent tasks:
    token = await coordinator.obtain_refreshed_credential()
    ```
"""

import asyncio
import enum
import logging

from refresh_client_core.auth.exceptions import NoRefreshCredentialError
from refresh_client_core.auth.refresh import RefreshEndpoint
from refresh_client_core.auth.store import CredentialGateway

logger = logging.getLogger(__name__)


class RefreshState(enum.Enum):
    IDLE = "idle"
    REFRESHING = "refreshing"


class RefreshCoordinator:
    """Ensure at most one refresh endpoint call is in flight.

    The coordinator is the only writer of its state and pending list. It is
    bound to the event loop it is first used on.

    Args:
        gateway: Where the refresh token is read and new tokens are saved
        endpoint: The remote refresh operation
    """

    def __init__(self, gateway: CredentialGateway, endpoint: RefreshEndpoint) -> None:
        self._gateway = gateway
        self._endpoint = endpoint
        self._state = RefreshState.IDLE
        self._pending: list[asyncio.Future[str]] = []
        self._refresh_task: asyncio.Task[None] | None = None
        self.refresh_count = 0

    @property
    def state(self) -> RefreshState:
        return self._state

    @property
    def pending_count(self) -> int:
        """Number of callers waiting on the current refresh."""
        return len(self._pending)

    async def obtain_refreshed_credential(self) -> str:
        """Return a freshly minted access token.

        Starts a refresh if none is running, otherwise waits for the running
        one. Cancelling the calling task only withdraws this caller; the
        refresh keeps going for everybody else.

        Returns:
            The new access token, already persisted through the gateway.

        Raises:
            RefreshError: The refresh failed; every waiter gets the same exception.
        """
        waiter: asyncio.Future[str] = asyncio.get_running_loop().create_future()
        self._pending.append(waiter)

        if self._state is RefreshState.IDLE:
            self._state = RefreshState.REFRESHING
            self._refresh_task = asyncio.create_task(self._run_refresh())
        else:
            logger.debug(f"Refresh in progress, queued caller ({len(self._pending)} waiting)")

        return await waiter

    async def _run_refresh(self) -> None:
        token: str | None = None
        error: BaseException | None = None
        try:
            token = await self._refresh()
        except Exception as e:
            error = e
        except asyncio.CancelledError as e:
            error = e
            raise
        finally:
            self._settle(token, error)

    async def _refresh(self) -> str:
        refresh_token = await self._gateway.get_refresh_token()
        if not refresh_token:
            logger.warning("Token refresh failed: no refresh token available")
            raise NoRefreshCredentialError()

        self.refresh_count += 1
        logger.debug("Calling refresh endpoint (refresh token: ***)")
        try:
            pair = await self._endpoint.refresh(refresh_token)
        except Exception as e:
            logger.warning(f"Token refresh failed: {e!r}")
            raise

        if not await self._gateway.set_tokens(pair.access_token, pair.refresh_token or refresh_token):
            logger.warning("Refreshed access token was not persisted")
        logger.info("Access token refreshed")
        return pair.access_token

    def _settle(self, token: str | None, error: BaseException | None) -> None:
        self._state = RefreshState.IDLE
        self._refresh_task = None
        waiters, self._pending = self._pending, []

        for waiter in waiters:
            if waiter.done():
                continue
            if isinstance(error, asyncio.CancelledError):
                waiter.cancel()
            elif error is not None:
                waiter.set_exception(error)
            else:
                waiter.set_result(token)

        logger.debug(f"Refresh settled, released {len(waiters)} caller(s)")
