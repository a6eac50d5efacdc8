class ExtractionError(Exception):
    """Base exception for format processor failures."""


class UnsupportedFormatError(ExtractionError):
    """Raised when no processor is registered for a content type."""
