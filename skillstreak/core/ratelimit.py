"""
Fixed-window rate limiter for run submissions.

- In-memory, keyed by user_id.
- One window per key; the window restarts once 60 seconds have elapsed.
"""

import threading
import time
from typing import Callable, Dict, Tuple


class FixedWindowLimiter:
    def __init__(self, limit_per_minute: int, time_fn: Callable[[], float] = time.monotonic):
        self.limit = max(1, limit_per_minute)
        self.time_fn = time_fn
        self.windows: Dict[str, Tuple[float, int]] = {}
        self._lock = threading.Lock()

    def allow(self, key: str) -> bool:
        with self._lock:
            now = self.time_fn()
            window_start, count = self.windows.get(key, (now, 0))
            if now - window_start >= 60:
                window_start, count = now, 0
            if count >= self.limit:
                self.windows[key] = (window_start, count)
                return False
            self.windows[key] = (window_start, count + 1)
            return True

    def reset(self) -> None:
        with self._lock:
            self.windows.clear()
