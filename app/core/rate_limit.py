"""Simple in-memory rate limiting utilities."""
from __future__ import annotations

import asyncio
import time
from collections import deque
from typing import Callable, Deque, Dict


class RateLimiter:
    """Provide in-memory rate limiting with asyncio locking.

    Each key keeps a log of accepted attempts. An attempt is accepted while
    fewer than ``max_requests`` entries fall inside the trailing window;
    rejected attempts are not recorded, so a client that keeps hammering does
    not extend its own lockout. Once per window every log is pruned and keys
    with nothing left inside the window are dropped.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._attempts: Dict[str, Deque[float]] = {}
        self._last_sweep = clock()
        self._lock = asyncio.Lock()

    @staticmethod
    def _evict(bucket: Deque[float], window_start: float) -> None:
        while bucket and bucket[0] <= window_start:
            bucket.popleft()

    def _sweep(self, window_start: float) -> None:
        for key in list(self._attempts):
            bucket = self._attempts[key]
            self._evict(bucket, window_start)
            if not bucket:
                del self._attempts[key]

    async def allow(self, key: str) -> bool:
        """Return True when the request should be allowed for the key."""
        async with self._lock:
            now = self._clock()
            window_start = now - self.window_seconds

            if now - self._last_sweep >= self.window_seconds:
                self._sweep(window_start)
                self._last_sweep = now

            bucket = self._attempts.get(key)
            if bucket is None:
                bucket = self._attempts[key] = deque()
            else:
                self._evict(bucket, window_start)

            if len(bucket) >= self.max_requests:
                if not bucket:
                    del self._attempts[key]
                return False

            bucket.append(now)
            return True

    async def reset(self) -> None:
        async with self._lock:
            self._attempts.clear()
            self._last_sweep = self._clock()
