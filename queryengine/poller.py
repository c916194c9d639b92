"""Polling strategies shared by queries and waiters.

A poller is a policy; ``start()`` turns it into a ticker for one call. The
caller always makes one full attempt before consulting the ticker, then
keeps trying for as long as ``await ticker.tick()`` returns True. The
ticker performs any inter-attempt sleep itself and never raises.
"""

from __future__ import annotations

import asyncio
import time
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


class PollTicker(ABC):
    """Stateful retry budget for a single query or wait."""

    @abstractmethod
    async def tick(self) -> bool:
        """Wait until the next attempt is due. Return False once exhausted."""


class ElementPoller(ABC):
    """Polling policy. Subclass to plug in a custom strategy."""

    @abstractmethod
    def start(self) -> PollTicker:
        """Start a fresh ticker."""


class IntervalTicker(PollTicker):
    """Ticker driven by an optional timeout, interval and minimum tries.

    ``interval`` is the minimum spacing between the starts of consecutive
    attempts. If an attempt overran the interval, the next one starts
    immediately.
    """

    def __init__(
        self,
        timeout: float | None = None,
        interval: float | None = None,
        min_tries: int = 0,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.timeout = timeout
        self.interval = interval
        self.min_tries = min_tries
        self._clock = clock
        self._sleep = sleep
        self._start = clock()
        self.tries = 0

    def _budget_spent(self, elapsed: float) -> bool:
        if self.timeout is None:
            return True
        return elapsed >= self.timeout or elapsed + (self.interval or 0.0) > self.timeout

    async def tick(self) -> bool:
        self.tries += 1
        elapsed = self._clock() - self._start

        if self.tries >= self.min_tries and self._budget_spent(elapsed):
            return False

        if self.interval is not None:
            due = self.interval * self.tries
            if elapsed < due:
                await self._sleep(due - elapsed)

        return True


@dataclass(frozen=True)
class NoWait(ElementPoller):
    """Single attempt, no sleeping."""

    def start(self) -> PollTicker:
        return IntervalTicker()


@dataclass(frozen=True)
class TimeoutWithInterval(ElementPoller):
    """Poll every ``interval`` seconds until ``timeout`` seconds have passed."""

    timeout: float
    interval: float
    clock: Clock = field(default=time.monotonic, repr=False, compare=False)
    sleep: Sleep = field(default=asyncio.sleep, repr=False, compare=False)

    def start(self) -> PollTicker:
        return IntervalTicker(
            timeout=self.timeout,
            interval=self.interval,
            clock=self.clock,
            sleep=self.sleep,
        )


@dataclass(frozen=True)
class NumTriesWithInterval(ElementPoller):
    """Make exactly ``tries`` attempts, ``interval`` seconds apart."""

    tries: int
    interval: float
    clock: Clock = field(default=time.monotonic, repr=False, compare=False)
    sleep: Sleep = field(default=asyncio.sleep, repr=False, compare=False)

    def start(self) -> PollTicker:
        return IntervalTicker(
            interval=self.interval,
            min_tries=self.tries,
            clock=self.clock,
            sleep=self.sleep,
        )


@dataclass(frozen=True)
class TimeoutWithIntervalAndMinTries(ElementPoller):
    """Poll until the timeout or the minimum number of tries, whichever is last."""

    timeout: float
    interval: float
    min_tries: int
    clock: Clock = field(default=time.monotonic, repr=False, compare=False)
    sleep: Sleep = field(default=asyncio.sleep, repr=False, compare=False)

    def start(self) -> PollTicker:
        return IntervalTicker(
            timeout=self.timeout,
            interval=self.interval,
            min_tries=self.min_tries,
            clock=self.clock,
            sleep=self.sleep,
        )


DEFAULT_POLLER: ElementPoller = TimeoutWithInterval(timeout=20.0, interval=0.5)
