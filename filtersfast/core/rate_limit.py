from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class RateLimiter(Protocol):
    def check(self, key: str) -> bool:
        """Count one request for `key`; return False when it must be rejected."""
        ...


@dataclass
class _Window:
    count: int
    reset_at: float


class InMemoryRateLimiter:
    """
    Fixed-window request counter keyed by caller identifier.

    State is process-local: counters are not shared between workers and are
    lost on restart. Deployments running several instances should inject a
    limiter backed by a shared store instead.
    """

    def __init__(
        self,
        *,
        max_requests: int,
        window_seconds: float,
        sweep_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max(1, int(max_requests))
        self.window_seconds = max(1.0, float(window_seconds))
        self.sweep_seconds = max(1.0, float(sweep_seconds))
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: dict[str, _Window] = {}
        self._next_sweep_at = clock() + self.sweep_seconds

    def check(self, key: str) -> bool:
        now = self._clock()
        with self._lock:
            if now >= self._next_sweep_at:
                self._sweep(now)

            window = self._windows.get(key)
            if window is None or now > window.reset_at:
                self._windows[key] = _Window(count=1, reset_at=now + self.window_seconds)
                return True

            if window.count >= self.max_requests:
                logger.warning("rate_limit_exceeded key=%s count=%s", key, window.count)
                return False

            window.count += 1
            return True

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._windows)

    def _sweep(self, now: float) -> None:
        expired = [key for key, window in self._windows.items() if now > window.reset_at]
        for key in expired:
            del self._windows[key]
        self._next_sweep_at = now + self.sweep_seconds
