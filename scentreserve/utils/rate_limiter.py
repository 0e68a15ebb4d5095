"""
Fixed-interval rate limiting between product page requests.
"""

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class FixedIntervalRateLimiter:
    """
    Waits a fixed interval each time `wait()` is awaited.

    Args:
        interval_seconds: Delay per call (0 disables waiting)
        sleep: Awaitable sleep function, replaceable in tests
    """

    def __init__(self, interval_seconds: float = 1.0, sleep: SleepFunc = asyncio.sleep):
        if interval_seconds < 0:
            raise ValueError("interval_seconds must be >= 0")
        self.interval_seconds = interval_seconds
        self._sleep = sleep
        self.wait_count = 0

    async def wait(self) -> None:
        self.wait_count += 1
        if self.interval_seconds <= 0:
            return
        logger.debug("Waiting %.2fs before next request", self.interval_seconds)
        await self._sleep(self.interval_seconds)
