"""Tests for polling strategies."""

import pytest

from queryengine.poller import (
    DEFAULT_POLLER,
    NoWait,
    NumTriesWithInterval,
    TimeoutWithInterval,
    TimeoutWithIntervalAndMinTries,
)


async def _count_ticks(ticker, limit: int = 1000) -> int:
    ticks = 0
    while await ticker.tick():
        ticks += 1
        assert ticks < limit
    return ticks


class TestNoWait:
    async def test_first_tick_is_false(self) -> None:
        ticker = NoWait().start()
        assert await ticker.tick() is False


class TestTimeoutWithInterval:
    async def test_attempts_within_budget(self, clock) -> None:
        poller = TimeoutWithInterval(1.0, 0.1, clock=clock, sleep=clock.sleep)
        ticks = await _count_ticks(poller.start())
        # One initial attempt plus ticks; never more than timeout / interval + 1.
        assert 1 <= ticks + 1 <= 11
        assert clock.now <= 1.0 + 1e-9

    async def test_sleeps_until_next_slot(self, clock) -> None:
        poller = TimeoutWithInterval(1.0, 0.25, clock=clock, sleep=clock.sleep)
        ticker = poller.start()
        clock.now = 0.1  # first attempt took 100ms
        assert await ticker.tick()
        assert clock.sleeps == [pytest.approx(0.15)]
        assert clock.now == pytest.approx(0.25)

    async def test_overrun_attempt_does_not_sleep(self, clock) -> None:
        poller = TimeoutWithInterval(5.0, 0.25, clock=clock, sleep=clock.sleep)
        ticker = poller.start()
        clock.now = 0.4
        assert await ticker.tick()
        assert clock.sleeps == []

    async def test_stops_when_next_interval_would_exceed_timeout(self, clock) -> None:
        poller = TimeoutWithInterval(1.0, 0.5, clock=clock, sleep=clock.sleep)
        ticker = poller.start()
        clock.now = 0.6
        assert await ticker.tick() is False

    async def test_stops_after_timeout(self, clock) -> None:
        poller = TimeoutWithInterval(1.0, 0.1, clock=clock, sleep=clock.sleep)
        ticker = poller.start()
        clock.now = 2.0
        assert await ticker.tick() is False

    def test_equality_ignores_clock(self, clock) -> None:
        assert TimeoutWithInterval(1.0, 0.1, clock=clock) == TimeoutWithInterval(1.0, 0.1)


class TestNumTriesWithInterval:
    async def test_exact_number_of_attempts(self, clock) -> None:
        poller = NumTriesWithInterval(3, 0.5, clock=clock, sleep=clock.sleep)
        ticks = await _count_ticks(poller.start())
        assert ticks + 1 == 3
        assert clock.sleeps == [0.5, 0.5]

    async def test_zero_tries_still_makes_one_attempt(self, clock) -> None:
        poller = NumTriesWithInterval(0, 0.5, clock=clock, sleep=clock.sleep)
        assert await _count_ticks(poller.start()) == 0


class TestTimeoutWithIntervalAndMinTries:
    async def test_min_tries_outlasts_timeout(self, clock) -> None:
        poller = TimeoutWithIntervalAndMinTries(0.1, 0.5, 4, clock=clock, sleep=clock.sleep)
        ticks = await _count_ticks(poller.start())
        assert ticks + 1 == 4

    async def test_timeout_outlasts_min_tries(self, clock) -> None:
        poller = TimeoutWithIntervalAndMinTries(2.0, 0.5, 1, clock=clock, sleep=clock.sleep)
        ticks = await _count_ticks(poller.start())
        assert ticks + 1 == 5


class TestDefaultPoller:
    def test_default_is_twenty_seconds(self) -> None:
        assert DEFAULT_POLLER == TimeoutWithInterval(20.0, 0.5)
