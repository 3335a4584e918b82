"""
异步非阻塞限流器（原子能力）

Caps how many calls may start inside a sliding time window (RPM).
"""

import asyncio
import time
from typing import Callable, List


class AsyncRateLimiter:
    """Sliding-window limiter; callers await `check_and_wait()` before each call."""

    def __init__(self, max_count: int, time_limit: float = 60, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            max_count: calls allowed inside one window
            time_limit: window length in seconds, default 60
        """
        if max_count < 1:
            raise ValueError("max_count must be >= 1")
        self.max_count = max_count
        self.time_limit = time_limit
        self.timestamps: List[float] = []
        self._clock = clock
        self._lock = asyncio.Lock()

    def _prune(self, now: float) -> None:
        self.timestamps = [t for t in self.timestamps if now - t < self.time_limit]

    async def check_and_wait(self) -> None:
        async with self._lock:
            now = self._clock()
            self._prune(now)

            if len(self.timestamps) >= self.max_count:
                wait_time = self.time_limit - (now - self.timestamps[0])
                if wait_time > 0:
                    # 持锁等待：后来者排队，保证窗口内不超额
                    await asyncio.sleep(wait_time)
                    now = self._clock()
                    self._prune(now)

            self.timestamps.append(now)
