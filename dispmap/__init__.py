"""dispmap: displacement map filter and alpha overlay for 8-bit BGR/BGRA rasters.

Main components:
- core: DisplacementFilter (displace), AlphaOverlay (overlay), rasters, config, animation
- codecs: image loading and saving
"""

from .core import (
    DispMapError,
    InvalidArgument,
    DimensionMismatch,
    ImageReadError,
    ImageWriteError,
    Component,
    Raster,
    OpaqueImage,
    TranslucentImage,
    as_raster,
    get_component,
    displace,
    displacement_field,
    overlay,
    overlap_region,
    FilterConfig,
    DisplacementAnimation,
)

__version__ = "0.1.0"
__all__ = [
    # Errors
    "DispMapError",
    "InvalidArgument",
    "DimensionMismatch",
    "ImageReadError",
    "ImageWriteError",
    # Rasters
    "Component",
    "Raster",
    "OpaqueImage",
    "TranslucentImage",
    "as_raster",
    "get_component",
    # Filters
    "displace",
    "displacement_field",
    "overlay",
    "overlap_region",
    # Driver
    "FilterConfig",
    "DisplacementAnimation",
]
