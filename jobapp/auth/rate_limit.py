"""
Login rate limiting.

Attempts are counted per client origin in fixed windows. Counters live in
a CounterStore so the in-process default can be replaced by a shared store
when running more than one server instance.
"""

import logging
import threading
import time
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class RateLimitExceeded(Exception):
    """Raised when a client has used up its attempts for the current window."""

    def __init__(self, retry_after: int):
        self.retry_after = retry_after
        super().__init__("Too many login attempts. Please try again later.")


class CounterStore(Protocol):
    def hit(self, key: str, window_seconds: int, now: float) -> tuple[int, float]:
        """
        Atomically count one attempt for key.

        Returns the attempt count in the current window and the time at
        which that window resets.
        """
        ...

    def reset(self, key: str) -> None:
        ...


class InMemoryCounterStore:
    """
    Process-local counters; lost on restart, not shared across instances.

    Expired counters are dropped every purge_every hits, so the map only
    holds origins seen within roughly one window.
    """

    def __init__(self, purge_every: int = 100):
        self._lock = threading.Lock()
        self._counters: dict[str, tuple[int, float]] = {}
        self.purge_every = purge_every
        self._hits_since_purge = 0

    def _drop_expired(self, now: float) -> int:
        stale = [k for k, (_, reset_at) in self._counters.items() if now >= reset_at]
        for key in stale:
            del self._counters[key]
        return len(stale)

    def hit(self, key: str, window_seconds: int, now: float) -> tuple[int, float]:
        with self._lock:
            self._hits_since_purge += 1
            if self._hits_since_purge >= self.purge_every:
                self._hits_since_purge = 0
                self._drop_expired(now)
            count, reset_at = self._counters.get(key, (0, 0.0))
            if now >= reset_at:
                count, reset_at = 0, now + window_seconds
            count += 1
            self._counters[key] = (count, reset_at)
            return count, reset_at

    def reset(self, key: str) -> None:
        with self._lock:
            self._counters.pop(key, None)

    def purge(self, now: Optional[float] = None) -> int:
        """Drop counters whose window has passed."""
        now = time.time() if now is None else now
        with self._lock:
            return self._drop_expired(now)

    def __len__(self) -> int:
        with self._lock:
            return len(self._counters)


class LoginRateLimiter:
    """Allows max_attempts login attempts per origin per window."""

    def __init__(
        self,
        store: CounterStore,
        max_attempts: int = 5,
        window_seconds: int = 60,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self._clock = clock

    def check(self, origin: str) -> None:
        """
        Record an attempt from origin.

        Raises:
            RateLimitExceeded: once the origin exceeds max_attempts in the window
        """
        now = self._clock()
        count, reset_at = self.store.hit(f"login:{origin}", self.window_seconds, now)
        if count > self.max_attempts:
            logger.warning(f"Login rate limit exceeded for {origin}")
            raise RateLimitExceeded(retry_after=max(1, int(reset_at - now)))

    def reset(self, origin: str) -> None:
        self.store.reset(f"login:{origin}")
