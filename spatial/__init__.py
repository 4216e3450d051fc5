# spatial/__init__.py

"""Spatial layer for TESSERA - Transforms, layouts, and transitions."""

from .entities import (
    Entity,
    Position,
    Rotation,
    Transform,
    look_at,
    normalize_vector,
)
from .layouts import GRID_CAPACITY, LayoutGenerator, LayoutName
from .transitions import TransitionManager

__all__ = [
    "Entity",
    "Position",
    "Rotation",
    "Transform",
    "look_at",
    "normalize_vector",
    "GRID_CAPACITY",
    "LayoutGenerator",
    "LayoutName",
    "TransitionManager",
]
