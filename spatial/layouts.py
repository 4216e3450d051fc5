# spatial/layouts.py

"""Deterministic target layouts for a collection of entities.

Every layout is a pure function of the entity count. Index ``i`` of a layout
array is the target for entity ``i``.
"""

import math
from enum import Enum

from core.exceptions import InvalidEntityCountError, UnknownLayoutError
from spatial.entities import (
    IDENTITY_ROTATION,
    Transform,
    cylindrical_to_cartesian,
    look_at,
    scale_vector,
    spherical_to_cartesian,
)

Layout = tuple[Transform, ...]


class LayoutName(str, Enum):
    """Named layouts."""

    TABLE = "table"
    SPHERE = "sphere"
    HELIX = "helix"
    GRID = "grid"


# Table
TABLE_COLUMNS = 20
TABLE_COLUMN_SPACING = 140
TABLE_ROW_SPACING = 180
TABLE_COLUMN_OFFSET = 9
TABLE_ROW_OFFSET = 3

# Sphere
SPHERE_RADIUS = 800

# Helix
HELIX_ANGLE_STEP = 0.15
HELIX_RADIUS = 1150
HELIX_HEIGHT_STEP = 25
HELIX_SEPARATION = 100

# Grid
GRID_WIDTH = 10  # layers in depth
GRID_HEIGHT = 4  # rows
GRID_LENGTH = 5  # columns
GRID_CAPACITY = GRID_WIDTH * GRID_HEIGHT * GRID_LENGTH


def _check_count(count) -> int:
    if isinstance(count, bool) or not isinstance(count, int):
        raise InvalidEntityCountError(f"Entity count must be an integer, got {count!r}")
    if count < 0:
        raise InvalidEntityCountError(f"Entity count must be non-negative, got {count}")
    return count


class LayoutGenerator:
    """Stateless generator of the four layouts."""

    def table(self, count: int) -> Layout:
        """Periodic-table arrangement: 20 columns, rows growing downward from the top."""
        count = _check_count(count)
        targets = []
        for i in range(count):
            group = i % TABLE_COLUMNS
            period = i // TABLE_COLUMNS
            position = (
                float((group - TABLE_COLUMN_OFFSET) * TABLE_COLUMN_SPACING),
                float((period - TABLE_ROW_OFFSET) * TABLE_ROW_SPACING),
                0.0,
            )
            targets.append(Transform(position=position, rotation=IDENTITY_ROTATION))
        return tuple(targets)

    def sphere(self, count: int) -> Layout:
        """Spiral distribution over a sphere, each card facing outward."""
        count = _check_count(count)
        targets = []
        for i in range(count):
            phi = math.acos(-1 + (2 * i) / count)
            theta = math.sqrt(count * math.pi) * phi
            position = spherical_to_cartesian(SPHERE_RADIUS, phi, theta)
            rotation = look_at(position, scale_vector(position, 2))
            targets.append(Transform(position=position, rotation=rotation))
        return tuple(targets)

    def helix(self, count: int) -> Layout:
        """Double helix with ``count`` pairs, strands interleaved A, B.

        Strand A winds with a positive angle step at the outer radius, strand B
        winds the opposite way at the inner radius. Both strands share the
        height of their pair index. Target ``2i`` is strand A of pair ``i`` and
        ``2i + 1`` is strand B, so the result holds ``2 * count`` targets.
        """
        count = _check_count(count)
        targets = []
        for i in range(count):
            height = i * HELIX_HEIGHT_STEP
            strand_a = cylindrical_to_cartesian(
                HELIX_RADIUS + HELIX_SEPARATION, i * HELIX_ANGLE_STEP, height
            )
            strand_b = cylindrical_to_cartesian(
                HELIX_RADIUS - HELIX_SEPARATION, -i * HELIX_ANGLE_STEP, height
            )
            for position in (strand_a, strand_b):
                outward = (position[0] * 2, position[1], position[2] * 2)
                targets.append(Transform(position=position, rotation=look_at(position, outward)))
        return tuple(targets)

    def grid(self, count: int) -> Layout:
        """Box of 10 x 4 x 5 cells; entities past the capacity get no target."""
        count = _check_count(count)
        limit = min(count, GRID_CAPACITY)
        targets = []
        for i in range(GRID_WIDTH):
            for j in range(GRID_HEIGHT):
                for k in range(GRID_LENGTH):
                    if len(targets) == limit:
                        return tuple(targets)
                    position = (
                        float((k * 400) - (GRID_LENGTH * 200)),
                        float((j * 400) - (GRID_HEIGHT * 200)),
                        float((i * 1000) - (GRID_WIDTH * 500)),
                    )
                    targets.append(Transform(position=position, rotation=IDENTITY_ROTATION))
        return tuple(targets)

    def generate(self, name: LayoutName | str, count: int) -> Layout:
        """Build a single layout by name.

        Raises:
            UnknownLayoutError: If ``name`` is not a known layout
            InvalidEntityCountError: If ``count`` is negative or not an integer
        """
        layout_name = parse_layout_name(name)
        return getattr(self, layout_name.value)(count)


def parse_layout_name(name: LayoutName | str) -> LayoutName:
    try:
        return LayoutName(name)
    except ValueError as e:
        known = ", ".join(n.value for n in LayoutName)
        raise UnknownLayoutError(f"Unknown layout {name!r}; expected one of: {known}") from e


def helix_pairs_for(entity_count: int) -> int:
    """Number of helix pairs needed so every entity gets a strand target.

    Entity ``2p`` sits on strand A of pair ``p`` and entity ``2p + 1`` on
    strand B. With an odd entity count the last strand-B target is unused.
    """
    return math.ceil(_check_count(entity_count) / 2)
