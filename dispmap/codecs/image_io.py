"""Image file I/O for maps, targets and rendered frames."""

import logging
from pathlib import Path
from typing import Iterable, Union

import cv2
import numpy as np
from PIL import Image

from ..core import DimensionMismatch, ImageReadError, ImageWriteError
from ..core.raster import OpaqueImage, Raster, TranslucentImage, as_raster

logger = logging.getLogger(__name__)


def _imread(path: Union[str, Path], flags: int) -> np.ndarray:
    path = Path(path)
    if not path.exists():
        raise ImageReadError(f"no such image: {path}")
    img = cv2.imread(str(path), flags)
    if img is None:
        raise ImageReadError(f"failed to decode image: {path}")
    logger.debug("loaded %s: %dx%d, %d channels", path, img.shape[1], img.shape[0],
                 1 if img.ndim == 2 else img.shape[2])
    return img


def load_map(path: Union[str, Path]) -> OpaqueImage:
    """Load an image as 3-channel BGR, whatever its stored format."""
    return OpaqueImage(_imread(path, cv2.IMREAD_COLOR))


def load_target(path: Union[str, Path]) -> TranslucentImage:
    """Load a BGRA image keeping its alpha channel.

    Raises:
        DimensionMismatch: the file has no alpha channel
    """
    img = _imread(path, cv2.IMREAD_UNCHANGED)
    if img.ndim != 3 or img.shape[2] != 4:
        raise DimensionMismatch(f"a PNG image with a transparent layer is required: {path}")
    if img.dtype != np.uint8:
        # 16-bit PNGs
        img = (img >> 8).astype(np.uint8)
    return TranslucentImage(img)


def save_frame(path: Union[str, Path], image) -> None:
    """Write a BGR or BGRA raster; the format follows the file extension."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = np.ascontiguousarray(as_raster(image).data)
    if not cv2.imwrite(str(path), data):
        raise ImageWriteError(f"failed to write image: {path}")


def save_gif(path: Union[str, Path], frames: Iterable[Raster], frame_ms: int = 33) -> int:
    """Write BGR frames as a looping animated GIF.

    Args:
        path: output .gif path
        frames: BGR rasters of equal size
        frame_ms: display time per frame in milliseconds

    Returns:
        number of frames written
    """
    images = [Image.fromarray(np.ascontiguousarray(as_raster(f, OpaqueImage).data[..., ::-1]))
              for f in frames]
    if not images:
        raise ImageWriteError(f"no frames to write to {path}")
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    images[0].save(path, save_all=True, append_images=images[1:], duration=frame_ms, loop=0)
    return len(images)
