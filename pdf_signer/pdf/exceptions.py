class CompositorError(Exception):
    """Base exception for all placement and compositing errors.

    Carries the offending field name and value where one applies, so callers
    can render a precise message.
    """

    def __init__(self, message: str, field: str | None = None, value: object = None) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


class InvalidInputError(CompositorError):
    """Raised when a placement field is missing, out of range, or yields a degenerate box."""


class PageOutOfRangeError(CompositorError):
    """Raised when the requested page index does not exist in the document."""


class ImageDecodeError(CompositorError):
    """Raised when image bytes cannot be decoded as a supported raster format."""


class DocumentLoadError(CompositorError):
    """Raised when PDF bytes cannot be parsed as a PDF document."""


class SerializationError(CompositorError):
    """Raised when the composited document cannot be written back to bytes."""
