"""Randomized politeness delay between consecutive page fetches."""

import asyncio
import random
from typing import Awaitable, Callable

SleepFunc = Callable[[float], Awaitable[None]]


class RandomDelay:
    """Sleeps for a random duration between ``min_seconds`` and ``max_seconds``.

    The orchestrator awaits one of these after every target so requests to a
    retailer never arrive in a regular rhythm.
    """

    def __init__(
        self,
        min_seconds: float = 2.0,
        max_seconds: float = 5.0,
        sleep: SleepFunc = asyncio.sleep,
    ):
        """Initialize the delay.

        Args:
            min_seconds: Lower bound of the delay
            max_seconds: Upper bound of the delay
            sleep: Awaitable sleep function (injected in tests)
        """
        if min_seconds < 0 or min_seconds > max_seconds:
            raise ValueError(f"Invalid delay range: {min_seconds}..{max_seconds}")
        self.min_seconds = min_seconds
        self.max_seconds = max_seconds
        self._sleep = sleep

    def next_delay(self) -> float:
        """Pick the next delay in seconds."""
        return random.uniform(self.min_seconds, self.max_seconds)

    async def wait(self) -> float:
        """Sleep for a random delay.

        Returns:
            Seconds slept
        """
        delay = self.next_delay()
        await self._sleep(delay)
        return delay
