"""Process-wide pacing of transcription calls."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


class RateGate:
    """Grant transcription slots no closer than `min_interval_s` apart.

    The only state is `last_granted_at`. Slot acquisition is serialized by an `asyncio.Lock`, so
    concurrent callers are granted slots in request order and never compute overlapping waits.
    The gate is owned by the application container and passed explicitly to every caller.
    """

    def __init__(
            self,
            min_interval_s: float,
            *,
            clock: Clock = time.monotonic,
            sleep: Sleep = asyncio.sleep,
    ) -> None:
        if min_interval_s < 0:
            raise ValueError("min_interval_s must be >= 0")
        self.min_interval_s = min_interval_s
        self.last_granted_at: float | None = None
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()

    def wait_for(self, now: float) -> float:
        """Seconds a request made at `now` must wait before being granted."""

        if self.last_granted_at is None:
            return 0.0
        return max(0.0, self.min_interval_s - (now - self.last_granted_at))

    async def acquire(self) -> float:
        """Suspend until a slot is available and return the grant timestamp.

        The grant time is read after the suspension, not at request time.
        """

        async with self._lock:
            wait = self.wait_for(self._clock())
            if wait > 0:
                logger.debug("transcription slot wait_s=%.3f", wait)
                await self._sleep(wait)
            self.last_granted_at = self._clock()
            return self.last_granted_at
