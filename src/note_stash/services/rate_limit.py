"""Fixed-window request throttling keyed by client identity."""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, replace
from functools import lru_cache
from threading import Lock

from note_stash.core.settings import settings

__all__ = ["RateLimiter", "RateWindow", "get_rate_limiter"]

logger = logging.getLogger(__name__)


@dataclass
class RateWindow:
    """Request count for one key inside one fixed window."""

    count: int
    reset_at: float


class RateLimiter:
    """In-process fixed-window limiter.

    Each key gets a window that starts on its first request and lasts
    ``window_seconds``. Requests inside the window increment the count and are
    admitted while the count stays at or below ``limit``. The first request
    after the window closes replaces the entry with a fresh count of one.

    The whole create/rollover/increment decision runs under a single lock, so
    concurrent callers on the same key never lose an increment or create two
    entries. The map is capped at ``max_keys``: stale windows are dropped
    first, then the least recently touched keys.
    """

    def __init__(
        self,
        limit: int,
        window_seconds: float = 60.0,
        *,
        max_keys: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if limit < 1:
            raise ValueError("limit must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        if max_keys < 1:
            raise ValueError("max_keys must be at least 1")
        self.limit = limit
        self.window_seconds = window_seconds
        self.max_keys = max_keys
        self._clock = clock
        self._windows: OrderedDict[str, RateWindow] = OrderedDict()
        self._lock = Lock()

    def admit(self, key: str) -> bool:
        """Count a request for ``key`` and return True if it may proceed."""
        now = self._clock()
        with self._lock:
            window = self._windows.get(key)
            if window is None:
                self._make_room(now)
                self._windows[key] = RateWindow(count=1, reset_at=now + self.window_seconds)
                return True
            self._windows.move_to_end(key)
            if now > window.reset_at:
                self._windows[key] = RateWindow(count=1, reset_at=now + self.window_seconds)
                return True
            window.count += 1
            return window.count <= self.limit

    def admit_all(self, *keys: str) -> bool:
        """Admit ``keys`` in order, stopping at the first rejection.

        Keys after a rejected one are not charged.
        """
        for key in keys:
            if not self.admit(key):
                logger.debug("Rate limit exceeded for key=%s", key)
                return False
        return True

    def window(self, key: str) -> RateWindow | None:
        """Return a snapshot of the current window for ``key``."""
        with self._lock:
            window = self._windows.get(key)
            return replace(window) if window is not None else None

    def reset(self) -> None:
        """Forget every tracked key."""
        with self._lock:
            self._windows.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    def _make_room(self, now: float) -> None:
        # Caller holds the lock.
        if len(self._windows) < self.max_keys:
            return
        evicted = 0
        while self._windows:
            oldest = next(iter(self._windows.values()))
            if now <= oldest.reset_at:
                break
            self._windows.popitem(last=False)
            evicted += 1
        while len(self._windows) >= self.max_keys:
            self._windows.popitem(last=False)
            evicted += 1
        logger.debug("Evicted %d rate limit windows", evicted)


@lru_cache(maxsize=1)
def get_rate_limiter() -> RateLimiter:
    """Return the process-wide rate limiter built from settings."""
    return RateLimiter(
        settings.rate_limit_requests_per_minute,
        settings.rate_limit_window_seconds,
        max_keys=settings.rate_limit_max_keys,
    )
