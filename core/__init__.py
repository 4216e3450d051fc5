"""Core engine components: configuration, records, rendering, and the frame clock."""

from .clock import ClockState, FrameClock
from .config import TesseraConfig
from .exceptions import (
    DataSourceException,
    DataSourceUnavailableError,
    GalleryException,
    GalleryNotReadyError,
    InvalidEntityCountError,
    LayoutException,
    RecordParseError,
    RenderCallbackError,
    RenderException,
    TesseraException,
    TransitionConfigError,
    TransitionException,
    UnknownLayoutError,
)
from .records import Record, RecordSource, Tier
from .render import Frame, RenderListenerRegistry, Viewport

__all__ = [
    # Core classes
    "ClockState",
    "FrameClock",
    "TesseraConfig",
    "Record",
    "RecordSource",
    "Tier",
    "Frame",
    "RenderListenerRegistry",
    "Viewport",
    # Exceptions
    "TesseraException",
    "LayoutException",
    "InvalidEntityCountError",
    "UnknownLayoutError",
    "TransitionException",
    "TransitionConfigError",
    "DataSourceException",
    "DataSourceUnavailableError",
    "RecordParseError",
    "GalleryException",
    "GalleryNotReadyError",
    "RenderException",
    "RenderCallbackError",
]
