"""Displacement map filter: warp a BGRA target by the channel values of a BGR map."""

import logging
from concurrent.futures import ThreadPoolExecutor
from numbers import Integral
from typing import Optional, Tuple, Union

import numpy as np

from .errors import DimensionMismatch, InvalidArgument
from .raster import Component, OpaqueImage, TranslucentImage, as_raster

logger = logging.getLogger(__name__)

# Map values are centred on 128 and scaled by scale/256.
CENTER = 128
DIVISOR = 256


def _check_int(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}")
    return int(value)


def _trunc_div(num: np.ndarray, den: int) -> np.ndarray:
    """Integer division rounding toward zero (Python's // rounds toward -inf)."""
    return np.sign(num) * (np.abs(num) // den)


def _offsets(channel: np.ndarray, scale: int) -> np.ndarray:
    return _trunc_div((channel.astype(np.int64) - CENTER) * scale, DIVISOR)


def _field_band(
    map_data: np.ndarray,
    start: int,
    stop: int,
    component_x: int,
    component_y: int,
    scale_x: int,
    scale_y: int,
) -> Tuple[np.ndarray, np.ndarray]:
    """Clamped source coordinates for output rows [start, stop)."""
    rows, cols = map_data.shape[:2]
    band = map_data[start:stop]
    x = np.arange(start, stop, dtype=np.int64)[:, None]
    y = np.arange(cols, dtype=np.int64)[None, :]

    # The high clamp lands on the last valid index, not one past it.
    dx = np.clip(x + _offsets(band[..., component_x], scale_x), 0, rows - 1)
    dy = np.clip(y + _offsets(band[..., component_y], scale_y), 0, cols - 1)
    return dx, dy


def _check_arguments(component_x, component_y, scale_x, scale_y):
    cx = Component.parse(component_x, "component_x")
    cy = Component.parse(component_y, "component_y")
    sx = _check_int(scale_x, "scale_x")
    sy = _check_int(scale_y, "scale_y")
    return int(cx), int(cy), sx, sy


def displacement_field(
    map,
    component_x: Union[int, Component],
    component_y: Union[int, Component],
    scale_x: int,
    scale_y: int,
) -> Tuple[np.ndarray, np.ndarray]:
    """Compute the source coordinates `displace` reads from.

    Args:
        map: BGR map image (OpaqueImage or uint8 array [H, W, 3])
        component_x: channel driving the row displacement
        component_y: channel driving the column displacement
        scale_x: strength along the row axis
        scale_y: strength along the column axis

    Returns:
        (dx, dy): int64 arrays [H, W] of source row and column indices
    """
    cx, cy, sx, sy = _check_arguments(component_x, component_y, scale_x, scale_y)
    map_img = as_raster(map, OpaqueImage)
    if map_img.rows == 0 or map_img.cols == 0:
        empty = np.zeros((map_img.rows, map_img.cols), dtype=np.int64)
        return empty, empty.copy()
    return _field_band(map_img.data, 0, map_img.rows, cx, cy, sx, sy)


def displace(
    map,
    target,
    component_x: Union[int, Component],
    component_y: Union[int, Component],
    scale_x: int,
    scale_y: int,
    workers: Optional[int] = None,
) -> TranslucentImage:
    """Use the pixel values of a map to displace the pixels of a target image.

    For every output pixel (x, y), x being the row and y the column:

        dst[x, y] = src[x + ((map[x, y, component_x] - 128) * scale_x) / 256,
                        y + ((map[x, y, component_y] - 128) * scale_y) / 256]

    with the division truncating toward zero and the source coordinates
    clamped into the image.

    Args:
        map: BGR map image, same width and height as target
        target: BGRA image to warp
        component_x: channel of the map for the x (row) displacement. Blue:0 Green:1 Red:2
        component_y: channel of the map for the y (column) displacement
        scale_x: strength of the effect along rows
        scale_y: strength of the effect along columns
        workers: fill the output in this many row bands on a thread pool

    Returns:
        new TranslucentImage of target's size

    Raises:
        InvalidArgument: a component outside [0, 2] or a non-integer scale
        DimensionMismatch: map and target differ in size, or target is not 8-bit BGRA
    """
    cx, cy, sx, sy = _check_arguments(component_x, component_y, scale_x, scale_y)
    if workers is not None:
        workers = _check_int(workers, "workers")
        if workers < 1:
            raise InvalidArgument(f"workers must be >= 1, got {workers}")

    map_img = as_raster(map, OpaqueImage)
    target_img = as_raster(target, TranslucentImage)
    if (map_img.rows, map_img.cols) != (target_img.rows, target_img.cols):
        raise DimensionMismatch(
            f"map ({map_img.cols}x{map_img.rows}) and target ({target_img.cols}x{target_img.rows}) "
            "need to have the same dimensions"
        )

    rows, cols = target_img.rows, target_img.cols
    src = target_img.data
    output = np.empty_like(src)
    if rows == 0 or cols == 0:
        return TranslucentImage(output)

    def fill(band: Tuple[int, int]) -> None:
        start, stop = band
        dx, dy = _field_band(map_img.data, start, stop, cx, cy, sx, sy)
        output[start:stop] = src[dx, dy]

    n_bands = min(workers or 1, rows)
    if n_bands == 1:
        fill((0, rows))
    else:
        edges = np.linspace(0, rows, n_bands + 1).astype(int)
        bands = [(int(a), int(b)) for a, b in zip(edges[:-1], edges[1:]) if b > a]
        logger.debug("displace: %dx%d in %d bands", cols, rows, len(bands))
        with ThreadPoolExecutor(max_workers=n_bands) as pool:
            list(pool.map(fill, bands))

    return TranslucentImage(output)
