"""
Error kinds raised by the resize cache.

Every error aborts the current resize call; nothing here is retried.
"""


class ResizeError(Exception):
    """Base exception for the resize cache."""


class ConfigurationError(ResizeError, ValueError):
    """Raised for invalid or missing arguments and settings."""


class NotFoundError(ResizeError, FileNotFoundError):
    """Raised when a source image cannot be read."""


class ProcessingError(ResizeError):
    """Raised when decoding, resizing, encoding or writing an image fails."""
