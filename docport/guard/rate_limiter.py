import threading
import time
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    retry_after_seconds: float = 0.0


class RateLimitStore(ABC):
    """Counts requests per key inside a rolling time window."""

    @abstractmethod
    def hit(self, key: str, limit: int, window_seconds: float) -> RateLimitDecision:
        """Record one request for ``key`` unless that would exceed ``limit``.

        Checking and recording must be a single atomic step so concurrent
        callers can never overshoot the ceiling.
        """

    @abstractmethod
    def reset(self, key: str | None = None) -> None:
        """Forget one key, or every key when none is given."""


class InMemoryRateLimitStore(RateLimitStore):
    """Sliding-window log kept in process memory.

    Rejected requests are not recorded, so a caller that keeps retrying
    regains capacity as soon as its oldest accepted request leaves the window.
    Keys whose requests have all expired are dropped by a sweep that runs at
    most once per window.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._lock = threading.Lock()
        self._longest_window = 0.0
        self._next_sweep = 0.0

    def __len__(self) -> int:
        """Number of keys currently tracked."""
        with self._lock:
            return len(self._hits)

    def hit(self, key: str, limit: int, window_seconds: float) -> RateLimitDecision:
        with self._lock:
            now = self._clock()
            self._longest_window = max(self._longest_window, window_seconds)
            if now >= self._next_sweep:
                self._sweep(now)

            timestamps = self._hits.setdefault(key, deque())
            while timestamps and timestamps[0] <= now - window_seconds:
                timestamps.popleft()

            if len(timestamps) >= limit:
                retry_after = timestamps[0] + window_seconds - now if timestamps else window_seconds
                return RateLimitDecision(False, 0, max(retry_after, 0.0))

            timestamps.append(now)
            return RateLimitDecision(True, limit - len(timestamps))

    def reset(self, key: str | None = None) -> None:
        with self._lock:
            if key is None:
                self._hits.clear()
            else:
                self._hits.pop(key, None)

    def _sweep(self, now: float) -> None:
        # caller holds the lock
        cutoff = now - self._longest_window
        expired = [key for key, ts in self._hits.items() if not ts or ts[-1] <= cutoff]
        for key in expired:
            del self._hits[key]
        self._next_sweep = now + self._longest_window
