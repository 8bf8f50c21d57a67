import threading
import time
from typing import Callable, Dict, Tuple


class RateLimiter:
    """
    Fixed-window request counter keyed by client.

    The first hit opens a window of `window_seconds`; up to `limit` hits are
    allowed inside it. The clock is injectable so tests can move time.
    """

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        # key -> (count, reset_at)
        self._entries: Dict[str, Tuple[int, float]] = {}

    def is_limited(self, key: str) -> bool:
        """Record a hit for `key` and report whether it exceeds the limit."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or now > entry[1]:
                self._entries[key] = (1, now + self.window_seconds)
                return False

            count, reset_at = entry
            if count >= self.limit:
                return True

            self._entries[key] = (count + 1, reset_at)
            return False

    def remaining(self, key: str) -> int:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or now > entry[1]:
                return self.limit
            return max(0, self.limit - entry[0])

    def prune(self) -> int:
        """Drop expired windows; returns how many were removed"""
        now = self._clock()
        with self._lock:
            expired = [key for key, (_, reset_at) in self._entries.items() if now > reset_at]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def reset(self):
        with self._lock:
            self._entries.clear()
