"""Tests for the transcription rate gate (deterministic fake clock, no real timers)."""

from __future__ import annotations

import asyncio

import pytest

from src.transcription.gate import RateGate

_EPS = 1e-9


class _FakeClock:
    """Monotonic clock whose `sleep` advances time instantly."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


def _gate(min_interval_s: float, clock: _FakeClock) -> RateGate:
    return RateGate(min_interval_s, clock=clock, sleep=clock.sleep)


@pytest.mark.asyncio
async def test_first_slot_is_granted_immediately() -> None:
    clock = _FakeClock()
    gate = _gate(1.2, clock)

    granted = await gate.acquire()

    assert granted == 100.0
    assert clock.sleeps == []
    assert gate.last_granted_at == 100.0


@pytest.mark.asyncio
async def test_back_to_back_requests_are_spaced_by_min_interval() -> None:
    clock = _FakeClock()
    gate = _gate(1.2, clock)
    started = clock.now

    grants = [await gate.acquire() for _ in range(5)]

    gaps = [b - a for a, b in zip(grants, grants[1:])]
    assert all(gap >= 1.2 - _EPS for gap in gaps)
    assert clock.now - started >= 4 * 1.2 - _EPS


@pytest.mark.asyncio
async def test_no_wait_when_interval_already_elapsed() -> None:
    clock = _FakeClock()
    gate = _gate(1.2, clock)

    await gate.acquire()
    clock.now += 5.0
    await gate.acquire()

    assert clock.sleeps == []


@pytest.mark.asyncio
async def test_partial_wait_uses_remaining_interval() -> None:
    clock = _FakeClock()
    gate = _gate(1.2, clock)

    await gate.acquire()
    clock.now += 0.5
    granted = await gate.acquire()

    assert clock.sleeps == [pytest.approx(0.7)]
    assert granted == pytest.approx(101.2)


@pytest.mark.asyncio
async def test_concurrent_callers_never_overlap() -> None:
    clock = _FakeClock()
    gate = _gate(1.0, clock)

    grants = await asyncio.gather(*(gate.acquire() for _ in range(4)))

    ordered = sorted(grants)
    assert ordered == list(grants)
    gaps = [b - a for a, b in zip(ordered, ordered[1:])]
    assert all(gap >= 1.0 - _EPS for gap in gaps)


def test_wait_for_is_pure() -> None:
    gate = RateGate(2.0)
    assert gate.wait_for(10.0) == 0.0

    gate.last_granted_at = 10.0
    assert gate.wait_for(10.5) == pytest.approx(1.5)
    assert gate.wait_for(13.0) == 0.0


def test_negative_interval_is_rejected() -> None:
    with pytest.raises(ValueError):
        RateGate(-1.0)
