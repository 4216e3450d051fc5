# spatial/entities.py

"""Entity and transform utilities for the spatial layer."""

import math
from dataclasses import dataclass, field
from typing import Any, Optional

# Type aliases
Position = tuple[float, float, float]
Rotation = tuple[float, float, float]  # XYZ Euler angles, radians
Vector = tuple[float, float, float]

ORIGIN: Position = (0.0, 0.0, 0.0)
IDENTITY_ROTATION: Rotation = (0.0, 0.0, 0.0)
WORLD_UP: Vector = (0.0, 1.0, 0.0)


@dataclass(frozen=True)
class Transform:
    """Immutable position + orientation pair."""

    position: Position = ORIGIN
    rotation: Rotation = IDENTITY_ROTATION

    def to_dict(self) -> dict[str, list[float]]:
        return {"position": list(self.position), "rotation": list(self.rotation)}


@dataclass
class Entity:
    """A positioned card. Its transform is written only by the transition manager."""

    index: int
    position: Position = ORIGIN
    rotation: Rotation = IDENTITY_ROTATION
    record: Optional[Any] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def transform(self) -> Transform:
        return Transform(position=self.position, rotation=self.rotation)

    def set_position(self, value: Position) -> None:
        self.position = value

    def set_rotation(self, value: Rotation) -> None:
        self.rotation = value


def scale_vector(vector: Vector, factor: float) -> Vector:
    return (vector[0] * factor, vector[1] * factor, vector[2] * factor)


def cross(a: Vector, b: Vector) -> Vector:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def vector_length(vector: Vector) -> float:
    return math.sqrt(vector[0] ** 2 + vector[1] ** 2 + vector[2] ** 2)


def normalize_vector(vector: Vector) -> Vector:
    """Normalize a 3D vector to unit length.

    Args:
        vector: (x, y, z) vector

    Returns:
        Normalized (x, y, z) vector, or the zero vector unchanged
    """
    magnitude = vector_length(vector)
    if magnitude == 0:
        return (0.0, 0.0, 0.0)
    return (vector[0] / magnitude, vector[1] / magnitude, vector[2] / magnitude)


def spherical_to_cartesian(radius: float, phi: float, theta: float) -> Position:
    """Convert spherical coordinates to (x, y, z) with Y as the polar axis.

    Args:
        radius: Distance from origin
        phi: Polar angle measured from +Y
        theta: Azimuthal angle around Y, measured from +Z toward +X
    """
    sin_phi_radius = math.sin(phi) * radius
    return (
        sin_phi_radius * math.sin(theta),
        math.cos(phi) * radius,
        sin_phi_radius * math.cos(theta),
    )


def cylindrical_to_cartesian(radius: float, theta: float, y: float) -> Position:
    """Convert cylindrical coordinates (Y axis up) to (x, y, z)."""
    return (radius * math.sin(theta), y, radius * math.cos(theta))


def _basis_from_forward(forward: Vector, up: Vector) -> tuple[Vector, Vector, Vector]:
    z = normalize_vector(forward)
    if vector_length(z) == 0:
        z = (0.0, 0.0, 1.0)

    x = normalize_vector(cross(up, z))
    if vector_length(x) == 0:
        # forward parallel to up: nudge it off-axis
        if abs(up[2]) == 1:
            z = normalize_vector((z[0] + 0.0001, z[1], z[2]))
        else:
            z = normalize_vector((z[0], z[1], z[2] + 0.0001))
        x = normalize_vector(cross(up, z))

    y = cross(z, x)
    return x, y, z


def rotation_from_basis(x: Vector, y: Vector, z: Vector) -> Rotation:
    """Decompose a rotation matrix with columns (x, y, z) into XYZ Euler angles."""
    m11, m12, m13 = x[0], y[0], z[0]
    m22, m23 = y[1], z[1]
    m32, m33 = y[2], z[2]

    ry = math.asin(max(-1.0, min(1.0, m13)))
    if abs(m13) < 0.9999999:
        rx = math.atan2(-m23, m33)
        rz = math.atan2(-m12, m11)
    else:
        rx = math.atan2(m32, m22)
        rz = 0.0
    return (rx, ry, rz)


def look_at(position: Position, target: Position, up: Vector = WORLD_UP) -> Rotation:
    """Rotation that aims an object's +Z axis from ``position`` toward ``target``.

    The forward axis is ``normalize(target - position)``; the right axis is
    ``up x forward`` and the object's up axis completes the orthonormal basis.

    Returns:
        XYZ Euler angles in radians
    """
    forward = (target[0] - position[0], target[1] - position[1], target[2] - position[2])
    x, y, z = _basis_from_forward(forward, up)
    return rotation_from_basis(x, y, z)


def rotation_matrix(rotation: Rotation) -> tuple[Vector, Vector, Vector]:
    """Rebuild the basis columns (x, y, z) of an XYZ Euler rotation."""
    a, b = math.cos(rotation[0]), math.sin(rotation[0])
    c, d = math.cos(rotation[1]), math.sin(rotation[1])
    e, f = math.cos(rotation[2]), math.sin(rotation[2])
    ae, af, be, bf = a * e, a * f, b * e, b * f

    x = (c * e, af + be * d, bf - ae * d)
    y = (-c * f, ae - bf * d, be + af * d)
    z = (d, -b * c, a * c)
    return x, y, z


def forward_axis(rotation: Rotation) -> Vector:
    """World-space direction of the +Z axis after applying ``rotation``."""
    return rotation_matrix(rotation)[2]
