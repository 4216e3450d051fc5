# spatial/tween.py

"""Scheduled interpolation units advanced by the transition manager."""

from dataclasses import dataclass
from typing import Callable

from spatial.easing import EasingFunction, exponential_in_out, lerp_vector

Value = tuple[float, float, float]


def progress_at(now: float, start_time: float, duration: float) -> float:
    """Linear time progress in [0, 1]. Zero-length tasks are complete immediately."""
    if duration <= 0:
        return 1.0
    return min(1.0, max(0.0, (now - start_time) / duration))


@dataclass
class InterpolationTask:
    """Moves one value from ``start`` to ``end`` over ``duration`` seconds."""

    start: Value
    end: Value
    start_time: float
    duration: float
    apply: Callable[[Value], None]
    easing: EasingFunction = exponential_in_out
    entity_index: int = -1
    channel: str = ""
    finished: bool = False

    def update(self, now: float) -> bool:
        """Write the eased value for ``now``. Returns True while still running."""
        progress = progress_at(now, self.start_time, self.duration)
        if progress >= 1.0:
            # exact end value, no float drift
            self.apply(self.end)
            self.finished = True
            return False
        self.apply(lerp_vector(self.start, self.end, self.easing(progress)))
        return True


@dataclass
class RenderDriverTask:
    """Value-less task that calls ``on_update`` every tick until its duration elapses."""

    start_time: float
    duration: float
    on_update: Callable[[], None]
    finished: bool = False

    def update(self, now: float) -> bool:
        progress = progress_at(now, self.start_time, self.duration)
        self.on_update()
        if progress >= 1.0:
            self.finished = True
            return False
        return True
