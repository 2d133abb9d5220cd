"""
Short-lived admin credential for the Identity Directory.

The admin API needs a bearer token from the client-credentials grant.
Tokens live for a few minutes; AdminTokenHolder caches one and refreshes
it under a lock once it is about to expire, so concurrent requests on
the same worker fetch at most one new token.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

# Refresh this many seconds before the directory says the token expires
EXPIRY_BUFFER_SECONDS = 30


@dataclass(frozen=True)
class AdminToken:
    """An access token and the monotonic time after which it must be refreshed."""

    access_token: str
    refresh_after: float


class AdminTokenHolder:
    """
    Mutex-guarded cache for the directory admin token.

    Args:
        fetch: Callable returning (access_token, expires_in_seconds)
        clock: Monotonic clock, injectable for tests
    """

    def __init__(
        self,
        fetch: Callable[[], tuple[str, int]],
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetch = fetch
        self._clock = clock
        self._lock = threading.Lock()
        self._token: AdminToken | None = None

    def get(self) -> str:
        """Return a valid access token, fetching a new one if needed."""
        with self._lock:
            if self._token is None or self._clock() >= self._token.refresh_after:
                access_token, expires_in = self._fetch()
                self._token = AdminToken(
                    access_token=access_token,
                    refresh_after=self._clock() + max(expires_in - EXPIRY_BUFFER_SECONDS, 0),
                )
            return self._token.access_token

    def invalidate(self) -> None:
        """Drop the cached token (e.g. after the directory rejects it)."""
        with self._lock:
            self._token = None
