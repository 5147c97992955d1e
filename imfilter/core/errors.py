"""
Exception hierarchy for imfilter.
"""


class ImFilterError(Exception):
    """Base class for all imfilter failures."""


class ConfigurationError(ImFilterError, ValueError):
    """A required parameter is missing or out of range."""


class DecodeError(ImFilterError, OSError):
    """Input image is missing, unreadable, or not an 8-bit RGB raster."""


class EncodeError(ImFilterError, OSError):
    """Output image could not be written."""


class InvariantViolation(ImFilterError, ArithmeticError):
    """A filter window produced a zero or non-finite weight sum."""
