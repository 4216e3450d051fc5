# core/gallery.py

import random
from enum import Enum
from typing import Optional, Protocol

from spatial.entities import Entity
from spatial.layouts import (
    Layout,
    LayoutGenerator,
    LayoutName,
    helix_pairs_for,
    parse_layout_name,
)
from spatial.transitions import TransitionManager

from .clock import FrameClock
from .config import TesseraConfig
from .exceptions import DataSourceException, GalleryNotReadyError
from .logging import get_logger
from .records import Record
from .render import Frame, RenderListener, RenderListenerRegistry, Viewport


class RecordProvider(Protocol):
    async def fetch(self) -> list[Record]: ...


class GalleryState(str, Enum):
    """Lifecycle of a gallery."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"
    UNAVAILABLE = "unavailable"  # data source failed; no entities or layouts


class Gallery:
    """Main orchestrator: records in, entities laid out and animated, frames out."""

    def __init__(
        self,
        source: RecordProvider,
        config: Optional[TesseraConfig] = None,
        rng: Optional[random.Random] = None,
        layout_generator: Optional[LayoutGenerator] = None,
    ):
        self.config = config or TesseraConfig()
        self.source = source
        self.rng = rng or random.Random(self.config.random_seed)
        self.layout_generator = layout_generator or LayoutGenerator()
        self.logger = get_logger(f"{__name__}.Gallery")

        self.records: list[Record] = []
        self.entities: list[Entity] = []
        self.layouts: dict[LayoutName, Layout] = {}
        self.current_layout: Optional[LayoutName] = None
        self.state = GalleryState.UNINITIALIZED

        self.transitions = TransitionManager(self.entities, render_callback=self.render, rng=self.rng)
        self.clock = FrameClock(on_tick=self.tick, frame_rate=self.config.frame_rate)
        self.viewport = Viewport(self.config.viewport_width, self.config.viewport_height)

        self._listeners = RenderListenerRegistry()
        self._frame_sequence = 0

    @property
    def is_ready(self) -> bool:
        return self.state == GalleryState.READY

    @property
    def entity_count(self) -> int:
        return len(self.entities)

    async def initialize(self) -> bool:
        """Load records once, create entities, cache layouts, apply the initial layout.

        A data-source failure leaves the gallery UNAVAILABLE with no entities
        or layouts. There is no retry.

        Returns:
            True if the gallery is ready

        Raises:
            UnknownLayoutError: If the configured initial layout is not known;
                the gallery stays UNINITIALIZED
        """
        if self.state != GalleryState.UNINITIALIZED:
            return self.is_ready

        initial_layout = parse_layout_name(self.config.initial_layout)

        try:
            records = await self.source.fetch()
        except DataSourceException as e:
            self.state = GalleryState.UNAVAILABLE
            self.logger.error("gallery.unavailable", error=str(e), error_type=type(e).__name__)
            return False

        self._populate(records)
        self.layouts = self._build_layouts(len(self.entities))
        self.state = GalleryState.READY

        self.logger.info(
            "gallery.initialized",
            entity_count=len(self.entities),
            layout_sizes=self.layout_sizes(),
        )

        if self.entities:
            self.transform_to(initial_layout)
        return True

    def _populate(self, records: list[Record]) -> None:
        extent = self.config.scatter_extent
        self.records = list(records)
        for i, record in enumerate(self.records):
            position = tuple(self.rng.random() * 2 * extent - extent for _ in range(3))
            self.entities.append(
                Entity(
                    index=i,
                    position=position,
                    record=record,
                    metadata={"tier": record.tier.value},
                )
            )

    def _build_layouts(self, count: int) -> dict[LayoutName, Layout]:
        generator = self.layout_generator
        return {
            LayoutName.TABLE: generator.table(count),
            LayoutName.SPHERE: generator.sphere(count),
            LayoutName.HELIX: generator.helix(helix_pairs_for(count)),
            LayoutName.GRID: generator.grid(count),
        }

    def layout_sizes(self) -> dict[str, int]:
        return {name.value: len(targets) for name, targets in self.layouts.items()}

    def transform_to(self, name: LayoutName | str, base_duration: Optional[float] = None) -> LayoutName:
        """Animate every entity toward the named cached layout.

        Args:
            name: Layout name
            base_duration: Seconds; defaults to the configured base duration

        Returns:
            The layout that was applied

        Raises:
            GalleryNotReadyError: If records were never loaded
            UnknownLayoutError: If the name is not a known layout
        """
        if not self.is_ready:
            raise GalleryNotReadyError(f"Gallery is {self.state.value}; no layouts available")

        layout_name = parse_layout_name(name)
        duration = self.config.base_duration if base_duration is None else base_duration

        self.transitions.transform_to(self.layouts[layout_name], duration)
        self.current_layout = layout_name

        self.logger.info("layout.selected", layout=layout_name.value, base_duration=duration)
        return layout_name

    def tick(self, now: float) -> bool:
        """Advance transitions to clock time ``now``. Returns True while animating."""
        return self.transitions.tick(now)

    def get_frame(self) -> Frame:
        """Snapshot current transforms without notifying listeners."""
        return Frame(
            sequence=self._frame_sequence,
            time=self.transitions.current_time,
            viewport=self.viewport,
            transforms=tuple(entity.transform for entity in self.entities),
        )

    def render(self) -> Frame:
        """Build a frame and hand it to every render listener."""
        self._frame_sequence += 1
        frame = self.get_frame()
        self._listeners.dispatch(frame)
        return frame

    def resize(self, width: int, height: int) -> Frame:
        """Record a new viewport size and redraw once."""
        if width <= 0 or height <= 0:
            raise ValueError("Viewport dimensions must be positive")

        self.viewport = Viewport(width, height)
        self.logger.debug("viewport.resized", width=width, height=height)
        return self.render()

    def add_render_listener(self, listener: RenderListener) -> None:
        self._listeners.add(listener)

    def remove_render_listener(self, listener: RenderListener) -> bool:
        return self._listeners.remove(listener)

    async def start(self) -> None:
        """Start the frame clock."""
        await self.clock.start()
        self.logger.info("gallery.started", frame_rate=self.clock.frame_rate)

    async def stop(self) -> None:
        """Stop the frame clock."""
        await self.clock.stop()
        self.logger.info("gallery.stopped", frames=self.clock.frame_count)

    def get_status(self) -> dict:
        """Get current gallery status."""
        return {
            "state": self.state.value,
            "entity_count": len(self.entities),
            "current_layout": self.current_layout.value if self.current_layout else None,
            "is_animating": self.transitions.is_active,
            "active_tasks": self.transitions.active_task_count,
            "clock_state": self.clock.state.value,
            "elapsed_time": self.clock.get_time(),
            "frame_count": self.clock.frame_count,
            "layout_sizes": self.layout_sizes(),
            "viewport": {"width": self.viewport.width, "height": self.viewport.height},
        }
