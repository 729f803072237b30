"""Per-caller sliding-window admission control."""
from __future__ import annotations
import logging
import threading
import time
from collections import deque
from typing import Protocol

LOGGER = logging.getLogger("sellpoint.pipeline.rate_limit")

class AdmissionPolicy(Protocol):
    def admit(self, identity: str, now: float | None = None) -> bool:
        ...


class SlidingWindowRateLimiter:
    """
    Admit at most ``limit`` requests per identity within a trailing window.

    State is process-local and lives until restart; a multi-process
    deployment needs an ``AdmissionPolicy`` backed by a shared store.

    Args:
        limit: Admissions allowed per window.
        window_seconds: Window length in seconds.
        clock: Time source, monotonic by default.
    """

    def __init__(self, limit: int = 5, window_seconds: float = 60.0, clock=time.monotonic) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, deque[float]] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, identity: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(identity)
            if lock is None:
                lock = self._locks[identity] = threading.Lock()
                self._windows[identity] = deque()
            return lock

    def admit(self, identity: str, now: float | None = None) -> bool:
        """Prune expired entries, then record ``now`` if below the limit."""
        with self._lock_for(identity):
            if now is None:
                now = self._clock()
            window = self._windows[identity]
            while window and now - window[0] >= self.window_seconds:
                window.popleft()
            if len(window) >= self.limit:
                LOGGER.info("Rate limit hit for %s (%d in window)", identity, len(window))
                return False
            window.append(now)
            return True

