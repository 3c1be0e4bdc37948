from __future__ import annotations

import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable


@dataclass
class _Window:
    started_at: float
    count: int = 0


class RateLimiter:
    """Fixed-window request counter keyed by client address.

    Expired windows are dropped once more than ``max_tracked`` clients are
    being tracked, so memory stays bounded by the clients active within one
    window.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        max_tracked: int = 1024,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.max_tracked = max_tracked
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = Lock()

    def __len__(self) -> int:
        return len(self._windows)

    def _expired(self, window: _Window, now: float) -> bool:
        return now - window.started_at >= self.window_seconds

    def _sweep(self, now: float) -> None:
        stale = [key for key, window in self._windows.items() if self._expired(window, now)]
        for key in stale:
            del self._windows[key]

    def allow(self, key: str) -> bool:
        if self.max_requests <= 0:
            return True
        now = self._clock()
        with self._lock:
            window = self._windows.get(key)
            if window is None or self._expired(window, now):
                if len(self._windows) >= self.max_tracked:
                    self._sweep(now)
                window = _Window(started_at=now)
                self._windows[key] = window
            window.count += 1
            return window.count <= self.max_requests
