"""
Request throttle for the completion API.

Keeps outbound requests of one client at least ``min_interval`` apart.
"""

import asyncio
import time
from typing import Callable, Optional

import structlog

logger = structlog.get_logger(__name__)

MIN_REQUEST_INTERVAL_SECONDS = 2.0


class RequestThrottle:
    """Minimum-interval throttle.

    The lock covers the whole read/wait/update sequence, so concurrent
    callers are released one at a time, each ``min_interval`` after the
    previous dispatch.
    """

    def __init__(
        self,
        min_interval: float = MIN_REQUEST_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize throttle.

        Args:
            min_interval: Seconds between two dispatches
            clock: Monotonic time source
        """
        self.min_interval = min_interval
        self.clock = clock
        self.last_request_timestamp: Optional[float] = None
        self.lock = asyncio.Lock()

    async def wait(self) -> float:
        """Wait for the slot and claim it.

        Returns:
            Seconds waited (0.0 when no wait was needed)
        """
        async with self.lock:
            waited = 0.0
            if self.last_request_timestamp is not None:
                elapsed = self.clock() - self.last_request_timestamp
                if elapsed < self.min_interval:
                    waited = self.min_interval - elapsed
                    logger.debug("Throttling request", wait_seconds=round(waited, 3))
                    await asyncio.sleep(waited)

            self.last_request_timestamp = self.clock()
            return waited
