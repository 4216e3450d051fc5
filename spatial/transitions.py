# spatial/transitions.py

"""Staggered transitions of entity transforms toward a target layout."""

import random
from typing import Callable, Optional, Sequence

from core.exceptions import TransitionConfigError
from core.logging import get_logger
from spatial.easing import EasingFunction, exponential_in_out
from spatial.entities import Entity, Transform
from spatial.tween import InterpolationTask, RenderDriverTask

logger = get_logger(__name__)


class TransitionManager:
    """Owns the active set of interpolation tasks for a fixed list of entities.

    The manager is driven by ``tick(now)`` from a frame clock. Each call to
    ``transform_to`` replaces every active task, including the render driver,
    and starts new tasks from whatever transform each entity currently holds.

    Each entity gets two independent tasks (position and rotation) whose
    durations are drawn uniformly from ``[base, 2 * base)``. A render driver
    task lasting ``2 * base`` calls ``render_callback`` on every tick so the
    frame is redrawn until the slowest task is guaranteed to be done.
    """

    def __init__(
        self,
        entities: Sequence[Entity],
        render_callback: Optional[Callable[[], None]] = None,
        rng: Optional[random.Random] = None,
        easing: EasingFunction = exponential_in_out,
    ):
        self.entities = entities
        self.render_callback = render_callback
        self.rng = rng or random.Random()
        self.easing = easing

        self._tasks: list[InterpolationTask] = []
        self._render_task: Optional[RenderDriverTask] = None
        self._current_time = 0.0
        self._ticking = False
        self._deferred: Optional[tuple[Sequence[Transform], float]] = None

        self.transition_count = 0
        self.skipped_entities = 0

    @property
    def current_time(self) -> float:
        return self._current_time

    @property
    def is_active(self) -> bool:
        return bool(self._tasks) or self._render_task is not None

    @property
    def active_task_count(self) -> int:
        """Active tasks, counting the render driver."""
        return len(self._tasks) + (1 if self._render_task is not None else 0)

    @property
    def tasks(self) -> tuple[InterpolationTask, ...]:
        return tuple(self._tasks)

    @property
    def render_task(self) -> Optional[RenderDriverTask]:
        return self._render_task

    def cancel_all(self) -> int:
        """Drop every active task without finishing it. Returns the number dropped."""
        dropped = self.active_task_count
        self._tasks = []
        self._render_task = None
        return dropped

    def transform_to(
        self,
        targets: Sequence[Transform],
        base_duration: float,
        start_time: Optional[float] = None,
    ) -> None:
        """Start interpolating every entity toward ``targets[i]``.

        Args:
            targets: Target transform per entity index
            base_duration: Shortest task duration in seconds
            start_time: Clock time the tasks start at (defaults to the last tick time)

        Raises:
            TransitionConfigError: If ``base_duration`` is negative
        """
        if base_duration < 0:
            raise TransitionConfigError(f"base_duration must be non-negative, got {base_duration}")

        if self._ticking:
            # Runs once the current tick has finished iterating.
            self._deferred = (targets, base_duration)
            logger.debug("transition.deferred", target_count=len(targets))
            return

        now = self._current_time if start_time is None else start_time
        dropped = self.cancel_all()

        scheduled = min(len(self.entities), len(targets))
        tasks = []
        for i in range(scheduled):
            entity = self.entities[i]
            target = targets[i]
            tasks.append(
                InterpolationTask(
                    start=entity.position,
                    end=target.position,
                    start_time=now,
                    duration=self._jitter(base_duration),
                    apply=entity.set_position,
                    easing=self.easing,
                    entity_index=i,
                    channel="position",
                )
            )
            tasks.append(
                InterpolationTask(
                    start=entity.rotation,
                    end=target.rotation,
                    start_time=now,
                    duration=self._jitter(base_duration),
                    apply=entity.set_rotation,
                    easing=self.easing,
                    entity_index=i,
                    channel="rotation",
                )
            )

        self._tasks = tasks
        self._render_task = RenderDriverTask(
            start_time=now,
            duration=base_duration * 2,
            on_update=self._render,
        )
        self.transition_count += 1
        self.skipped_entities = len(self.entities) - scheduled

        if self.skipped_entities:
            logger.warning(
                "transition.entities_without_target",
                entity_count=len(self.entities),
                target_count=len(targets),
                skipped=self.skipped_entities,
            )

        logger.info(
            "transition.started",
            start_time=now,
            base_duration=base_duration,
            scheduled_entities=scheduled,
            cancelled_tasks=dropped,
        )

    def tick(self, now: float) -> bool:
        """Advance every active task to clock time ``now``.

        Entity tasks are applied first, then the render driver, so the render
        callback always sees this tick's values. Finished tasks are removed.

        Returns:
            True if any task is still active afterwards
        """
        self._current_time = now
        self._ticking = True
        try:
            self._tasks = [task for task in self._tasks if task.update(now)]
            if self._render_task is not None and not self._render_task.update(now):
                self._render_task = None
                logger.debug("transition.render_driver_finished", time=now)
        finally:
            self._ticking = False

        if self._deferred is not None:
            targets, base_duration = self._deferred
            self._deferred = None
            self.transform_to(targets, base_duration)

        return self.is_active

    def _jitter(self, base_duration: float) -> float:
        return base_duration + self.rng.random() * base_duration

    def _render(self) -> None:
        if self.render_callback is not None:
            self.render_callback()
