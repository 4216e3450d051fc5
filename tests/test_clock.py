"""Unit tests for the frame clock."""

import asyncio

import pytest

from core.clock import ClockState, FrameClock


@pytest.fixture
def ticks():
    return []


@pytest.fixture
def frame_clock(ticks):
    """Create a frame clock recording every tick."""
    return FrameClock(on_tick=ticks.append, frame_rate=60.0)


def test_clock_initialization(frame_clock):
    """Test clock initializes correctly."""
    assert frame_clock.get_time() == pytest.approx(0.0)
    assert frame_clock.frame_count == 0
    assert frame_clock.state == ClockState.STOPPED
    assert frame_clock.frame_time == pytest.approx(1 / 60)


def test_invalid_frame_rate():
    with pytest.raises(ValueError):
        FrameClock(frame_rate=0)


def test_advance_fires_tick_with_elapsed_time(frame_clock, ticks):
    frame_clock.advance(0.25)
    frame_clock.advance(0.5)

    assert ticks == [0.25, 0.75]
    assert frame_clock.frame_count == 2


def test_advance_rejects_negative(frame_clock):
    with pytest.raises(ValueError):
        frame_clock.advance(-0.1)


@pytest.mark.asyncio
async def test_clock_start_ticks(frame_clock, ticks):
    """Test starting the clock drives the tick callback."""
    await frame_clock.start()
    assert frame_clock.state == ClockState.RUNNING

    await asyncio.sleep(0.1)
    await frame_clock.stop()

    assert frame_clock.state == ClockState.STOPPED
    assert len(ticks) > 0
    assert ticks == sorted(ticks)
    assert frame_clock.get_time() > 0


@pytest.mark.asyncio
async def test_clock_pause(frame_clock):
    """Time does not advance while paused."""
    await frame_clock.start()
    await asyncio.sleep(0.05)

    await frame_clock.pause()
    assert frame_clock.state == ClockState.PAUSED
    time_at_pause = frame_clock.get_time()

    await asyncio.sleep(0.05)
    assert frame_clock.get_time() == time_at_pause


@pytest.mark.asyncio
async def test_clock_resume(frame_clock):
    """Test resuming the clock."""
    await frame_clock.start()
    await asyncio.sleep(0.05)
    await frame_clock.pause()
    paused_time = frame_clock.get_time()

    await frame_clock.resume()
    assert frame_clock.state == ClockState.RUNNING

    await asyncio.sleep(0.1)
    await frame_clock.stop()
    assert frame_clock.get_time() > paused_time


@pytest.mark.asyncio
async def test_resume_from_stopped_is_noop(frame_clock):
    await frame_clock.resume()
    assert frame_clock.state == ClockState.STOPPED


@pytest.mark.asyncio
async def test_failing_tick_stops_clock():
    def broken(now):
        raise RuntimeError("tick failed")

    clock = FrameClock(on_tick=broken, frame_rate=120.0)
    await clock.start()
    await asyncio.sleep(0.1)

    assert clock.state == ClockState.STOPPED
    await clock.stop()
