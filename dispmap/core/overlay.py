"""Alpha overlay: composite a BGRA foreground onto a BGR background."""

from numbers import Integral
from typing import Optional, Sequence, Tuple

import numpy as np

from .errors import InvalidArgument
from .raster import OpaqueImage, TranslucentImage, as_raster

Region = Tuple[Tuple[slice, slice], Tuple[slice, slice]]


def _check_location(location) -> Tuple[int, int]:
    if not isinstance(location, (tuple, list)) or len(location) != 2 or not all(
        isinstance(v, Integral) and not isinstance(v, bool) for v in location
    ):
        raise InvalidArgument(f"location must be an integer (x, y) pair, got {location!r}")
    return int(location[0]), int(location[1])


def overlap_region(
    background_shape: Sequence[int],
    foreground_shape: Sequence[int],
    location: Tuple[int, int] = (0, 0),
) -> Optional[Region]:
    """Intersect the background with the foreground placed at `location`.

    Args:
        background_shape: (rows, cols, ...) of the background
        foreground_shape: (rows, cols, ...) of the foreground
        location: (x, y) of the foreground's top-left corner in background
            coordinates, possibly negative

    Returns:
        ((bg_rows, bg_cols), (fg_rows, fg_cols)) slices, or None if the
        two do not overlap
    """
    bg_h, bg_w = int(background_shape[0]), int(background_shape[1])
    fg_h, fg_w = int(foreground_shape[0]), int(foreground_shape[1])
    loc_x, loc_y = _check_location(location)

    y0, y1 = max(loc_y, 0), min(bg_h, loc_y + fg_h)
    x0, x1 = max(loc_x, 0), min(bg_w, loc_x + fg_w)
    if y0 >= y1 or x0 >= x1:
        return None

    bg = (slice(y0, y1), slice(x0, x1))
    fg = (slice(y0 - loc_y, y1 - loc_y), slice(x0 - loc_x, x1 - loc_x))
    return bg, fg


def overlay(background, foreground, location: Tuple[int, int] = (0, 0)) -> OpaqueImage:
    """Copy a transparent BGRA image over a solid BGR background.

    Inside the overlap each colour channel becomes
    ``bg * (1 - a) + fg * a`` with ``a = alpha / 255``, rounded to the
    nearest integer. Pixels with alpha 0 keep the background colour.

    Args:
        background: BGR image, defines the output size
        foreground: BGRA image, any size
        location: (x, y) offset of the foreground, may be negative or
            push the foreground partly or fully outside the background

    Returns:
        new OpaqueImage the size of background
    """
    bg_img = as_raster(background, OpaqueImage)
    fg_img = as_raster(foreground, TranslucentImage)

    output = bg_img.to_numpy()
    region = overlap_region(bg_img.shape, fg_img.shape, location)
    if region is None:
        return OpaqueImage(output)

    bg_sl, fg_sl = region
    fg = fg_img.data[fg_sl]
    bg = bg_img.data[bg_sl].astype(np.float64)

    opacity = fg[..., 3:4].astype(np.float64) / 255.0
    blended = bg * (1.0 - opacity) + fg[..., :3].astype(np.float64) * opacity
    blended = np.clip(np.rint(blended), 0, 255).astype(np.uint8)

    visible = opacity[..., 0] > 0
    output[bg_sl][visible] = blended[visible]
    return OpaqueImage(output)
