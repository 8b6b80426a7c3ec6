"""dispmap core: displacement filter and alpha overlay."""

from .errors import DispMapError, InvalidArgument, DimensionMismatch, ImageReadError, ImageWriteError
from .raster import Component, Raster, OpaqueImage, TranslucentImage, as_raster, get_component
from .displace import displace, displacement_field
from .overlay import overlay, overlap_region
from .config import FilterConfig
from .animation import DisplacementAnimation

__all__ = [
    "DispMapError",
    "InvalidArgument",
    "DimensionMismatch",
    "ImageReadError",
    "ImageWriteError",
    "Component",
    "Raster",
    "OpaqueImage",
    "TranslucentImage",
    "as_raster",
    "get_component",
    "displace",
    "displacement_field",
    "overlay",
    "overlap_region",
    "FilterConfig",
    "DisplacementAnimation",
]
