"""Fixed-interval gate used to pace calls to rate-limited upstream APIs."""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class IntervalGate:
    """Async gate granting at most one permit per ``min_interval`` seconds.

    A single gate is shared by every caller in the process so concurrent
    requests queue behind each other instead of bursting the upstream API.
    """

    def __init__(
        self,
        min_interval: float = 0.1,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.min_interval = max(0.0, float(min_interval))
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last_permit: float | None = None
        self.permits = 0

    async def wait(self) -> None:
        """Block until the next permit is available."""

        async with self._lock:
            if self._last_permit is not None and self.min_interval > 0:
                delay = self.min_interval - (self._clock() - self._last_permit)
                if delay > 0:
                    logger.debug("rate_gate.wait", extra={"delay_sec": round(delay, 4)})
                    await self._sleep(delay)
            self._last_permit = self._clock()
            self.permits += 1

    @classmethod
    def from_millis(cls, interval_ms: int) -> "IntervalGate":
        return cls(min_interval=max(0, interval_ms) / 1000.0)
