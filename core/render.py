# core/render.py

"""Render frames and the registry of listeners that receive them."""

from dataclasses import dataclass, field
from typing import Any, Callable

from spatial.entities import Transform

from .exceptions import RenderCallbackError
from .logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Viewport:
    """Size of the output surface in pixels."""

    width: int
    height: int

    @property
    def aspect(self) -> float:
        return self.width / self.height if self.height else 0.0


@dataclass(frozen=True)
class Frame:
    """Snapshot of every entity's transform handed to the render layer."""

    sequence: int
    time: float
    viewport: Viewport
    transforms: tuple[Transform, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sequence": self.sequence,
            "time": self.time,
            "viewport": {"width": self.viewport.width, "height": self.viewport.height},
            "transforms": [t.to_dict() for t in self.transforms],
        }


# Type alias for render listeners
RenderListener = Callable[[Frame], None]


class RenderListenerRegistry:
    """Registry of synchronous callables invoked with each rendered frame."""

    def __init__(self):
        self._listeners: list[RenderListener] = []
        self.logger = get_logger(f"{__name__}.RenderListenerRegistry")

    def add(self, listener: RenderListener) -> None:
        """Subscribe a listener to every rendered frame."""
        self._listeners.append(listener)
        self.logger.debug("listener.registered", listener_count=len(self._listeners))

    def remove(self, listener: RenderListener) -> bool:
        """Unsubscribe a listener.

        Returns:
            True if listener was removed, False if not found
        """
        if listener in self._listeners:
            self._listeners.remove(listener)
            self.logger.debug("listener.unregistered", listener_count=len(self._listeners))
            return True

        return False

    def dispatch(self, frame: Frame, fail_fast: bool = False) -> None:
        """Hand a frame to every listener.

        Args:
            frame: The frame to deliver
            fail_fast: If True, raise on first listener error. If False, log and continue.

        Raises:
            RenderCallbackError: If fail_fast=True and a listener raises an exception
        """
        errors = []

        # listeners may unsubscribe themselves while being called
        for listener in list(self._listeners):
            try:
                listener(frame)
            except Exception as e:
                name = getattr(listener, "__name__", repr(listener))
                self.logger.error(
                    "listener.execution_failed",
                    listener=name,
                    sequence=frame.sequence,
                    error=str(e),
                )

                if fail_fast:
                    raise RenderCallbackError(
                        f"Render listener {name} failed for frame {frame.sequence}: {e}"
                    ) from e
                errors.append((listener, e))

        if errors:
            self.logger.warning(
                "frame.dispatch_completed_with_errors",
                sequence=frame.sequence,
                error_count=len(errors),
            )

    def __len__(self) -> int:
        return len(self._listeners)

    def clear(self) -> None:
        """Remove all registered listeners."""
        self._listeners.clear()
        self.logger.info("listeners.cleared")
