# core/clock.py

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from .logging import get_logger

logger = get_logger(__name__)

# Called with the elapsed clock time in seconds
TickCallback = Callable[[float], None]


class ClockState(str, Enum):
    """Enumeration for clock states."""

    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass
class TimeState:
    """Current state of frame time."""

    elapsed: float  # Seconds of running time since the clock was created
    frame_count: int
    is_running: bool
    started_at: Optional[datetime] = None


class FrameClock:
    """Drives a tick callback once per frame from the asyncio event loop."""

    def __init__(self, on_tick: Optional[TickCallback] = None, frame_rate: float = 60.0):
        if frame_rate <= 0:
            raise ValueError("Frame rate must be positive")
        self.on_tick = on_tick
        self.frame_rate = frame_rate
        self._time_state = TimeState(elapsed=0.0, frame_count=0, is_running=False)
        self._last_update: Optional[float] = None  # asyncio loop time
        self._update_task: Optional[asyncio.Task] = None
        self._clock_state = ClockState.STOPPED

    @property
    def frame_time(self) -> float:
        return 1.0 / self.frame_rate

    async def start(self) -> None:
        """Begin ticking."""
        if self._time_state.is_running:
            return

        self._time_state.is_running = True
        self._clock_state = ClockState.RUNNING
        self._time_state.started_at = datetime.now(timezone.utc)
        self._last_update = asyncio.get_running_loop().time()

        self._update_task = asyncio.create_task(self._update_loop())
        await asyncio.sleep(0)  # Yield control to allow async execution

    async def pause(self) -> None:
        """Pause ticking; elapsed time does not advance while paused."""
        self._time_state.is_running = False
        self._clock_state = ClockState.PAUSED
        await self._cancel_update_task()

    async def resume(self) -> None:
        """Resume ticking from paused state."""
        if self._clock_state == ClockState.PAUSED:
            await self.start()

    async def stop(self) -> None:
        """Stop the clock completely."""
        self._time_state.is_running = False
        self._clock_state = ClockState.STOPPED
        await self._cancel_update_task()

    async def _cancel_update_task(self) -> None:
        if self._update_task:
            self._update_task.cancel()
            try:
                await self._update_task
            except asyncio.CancelledError:
                pass
            finally:
                self._update_task = None

    async def _update_loop(self) -> None:
        """Internal loop that advances time and fires the tick callback."""
        try:
            while self._time_state.is_running:
                await asyncio.sleep(self.frame_time)

                current_real_time = asyncio.get_running_loop().time()
                delta = 0.0
                if self._last_update is not None:
                    delta = current_real_time - self._last_update
                self._last_update = current_real_time

                self.advance(delta)
        except asyncio.CancelledError:
            logger.debug("clock.update_loop_cancelled")
            raise
        except Exception as e:
            logger.error("clock.update_loop_failed", error=str(e), exc_info=True)
            self._time_state.is_running = False
            self._clock_state = ClockState.STOPPED

    def advance(self, delta: float) -> float:
        """Step elapsed time by ``delta`` seconds and fire one tick.

        Used by the update loop, and directly for deterministic stepping.

        Returns:
            The new elapsed time
        """
        if delta < 0:
            raise ValueError("Clock cannot run backwards")

        self._time_state.elapsed += delta
        self._time_state.frame_count += 1
        if self.on_tick is not None:
            self.on_tick(self._time_state.elapsed)
        return self._time_state.elapsed

    def get_time(self) -> float:
        """Get elapsed clock time."""
        return self._time_state.elapsed

    @property
    def frame_count(self) -> int:
        return self._time_state.frame_count

    @property
    def state(self) -> ClockState:
        """Get the current clock state."""
        return self._clock_state
