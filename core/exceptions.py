# core/exceptions.py

"""Exception hierarchy for the TESSERA layout engine."""


class TesseraException(Exception):
    """Base exception for all TESSERA errors."""

    pass


# Layout Exceptions
class LayoutException(TesseraException):
    """Base exception for layout generation."""

    pass


class InvalidEntityCountError(LayoutException):
    """Raised when a layout is requested for a negative or non-integer entity count."""

    pass


class UnknownLayoutError(LayoutException):
    """Raised when a layout name is not one of the known layouts."""

    pass


# Transition Exceptions
class TransitionException(TesseraException):
    """Base exception for transition scheduling."""

    pass


class TransitionConfigError(TransitionException):
    """Raised when a transition is requested with invalid timing parameters."""

    pass


# Data Source Exceptions
class DataSourceException(TesseraException):
    """Base exception for record loading."""

    pass


class DataSourceUnavailableError(DataSourceException):
    """Raised when records cannot be fetched from the data source."""

    pass


class RecordParseError(DataSourceException):
    """Raised when a record payload cannot be parsed."""

    pass


# Gallery Exceptions
class GalleryException(TesseraException):
    """Base exception for gallery operations."""

    pass


class GalleryNotReadyError(GalleryException):
    """Raised when the gallery has no entities or layouts to operate on."""

    pass


# Render Exceptions
class RenderException(TesseraException):
    """Base exception for render listener operations."""

    pass


class RenderCallbackError(RenderException):
    """Raised when a render listener fails during dispatch."""

    pass
