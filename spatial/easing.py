# spatial/easing.py

"""Easing curves applied to time progress before value interpolation."""

from typing import Callable

from easing_functions import ExponentialEaseInOut

EasingFunction = Callable[[float], float]

_EXPO_IN_OUT = ExponentialEaseInOut(start=0, end=1, duration=1)


def exponential_in_out(progress: float) -> float:
    """Accelerate exponentially, then decelerate. Maps 0 to 0 and 1 to 1 exactly."""
    if progress <= 0.0:
        return 0.0
    if progress >= 1.0:
        return 1.0
    return float(_EXPO_IN_OUT.ease(progress))


def lerp(start: float, end: float, amount: float) -> float:
    return start + (end - start) * amount


def lerp_vector(start: tuple[float, ...], end: tuple[float, ...], amount: float) -> tuple[float, ...]:
    """Componentwise linear interpolation between two equal-length tuples."""
    return tuple(lerp(s, e, amount) for s, e in zip(start, end))
