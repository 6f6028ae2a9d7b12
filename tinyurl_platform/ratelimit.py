"""
Fixed-window rate limiting for the create endpoint.

Each client key (usually the remote IP) gets `limit` requests per window.
Counters live in process memory, so limits apply per worker. For a shared limit
across workers, back this with Redis INCR + EXPIRE on a key like
"rl:{client}:{window}".

Only the current window's counters are kept; they are dropped when the window
rolls over, so memory is bounded by the clients seen in one window.
"""

import threading
import time
from typing import Callable, Dict, Optional


class FixedWindowRateLimiter:
    def __init__(self, limit: int, window_seconds: int = 60, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            limit (int): Requests allowed per window; 0 or negative disables limiting.
            window_seconds (int): Window length in seconds.
            clock (Callable[[], float]): Monotonic time source in seconds.
        """
        self.limit = limit
        self.window_seconds = window_seconds
        self.clock = clock
        self._window: Optional[int] = None
        self._counts: Dict[str, int] = {}  # client -> requests in the current window
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.limit > 0

    @property
    def tracked_clients(self) -> int:
        return len(self._counts)

    def try_acquire(self, client: str) -> bool:
        """Consume one request for `client`; False when its window is already full."""
        if not self.enabled:
            return True
        window = int(self.clock() // self.window_seconds)
        with self._lock:
            if window != self._window:
                self._window = window
                self._counts.clear()
            count = self._counts.get(client, 0)
            if count >= self.limit:
                return False
            self._counts[client] = count + 1
            return True

    def reset(self) -> None:
        with self._lock:
            self._window = None
            self._counts.clear()
