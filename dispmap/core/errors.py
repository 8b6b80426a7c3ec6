"""Exceptions raised by dispmap."""


class DispMapError(Exception):
    """Base class for all dispmap errors."""
    pass


class InvalidArgument(DispMapError, ValueError):
    """Raised for a component selector outside {0, 1, 2} or a bad parameter value."""
    pass


class DimensionMismatch(DispMapError, ValueError):
    """Raised when raster shapes, channel counts or dtypes do not fit together."""
    pass


class ImageReadError(DispMapError, IOError):
    """Raised when an image file is missing or cannot be decoded."""
    pass


class ImageWriteError(DispMapError, IOError):
    """Raised when an image file cannot be written."""
    pass
