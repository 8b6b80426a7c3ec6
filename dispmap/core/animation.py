"""DisplacementAnimation: slide a crop window over a wide map and warp a target with it."""

import logging
from typing import Iterator, List, Optional, Tuple

from .config import FilterConfig
from .displace import displace
from .errors import DimensionMismatch
from .overlay import overlay
from .raster import OpaqueImage, TranslucentImage, as_raster

logger = logging.getLogger(__name__)


class DisplacementAnimation:
    """Frame generator for the map-scrolling displacement effect.

    Each frame crops a target-sized window out of the map at a growing
    horizontal offset, displaces the target with it and overlays the
    result back onto the cropped map.
    """

    def __init__(self, cfg: Optional[FilterConfig] = None):
        self.cfg = cfg if cfg is not None else FilterConfig()

    def check_inputs(self, map, target) -> Tuple[OpaqueImage, TranslucentImage]:
        map_img = as_raster(map, OpaqueImage)
        try:
            target_img = as_raster(target, TranslucentImage)
        except DimensionMismatch as e:
            raise DimensionMismatch(f"a target image with a transparent layer is required: {e}") from e
        if target_img.width > map_img.width or target_img.height > map_img.height:
            raise DimensionMismatch(
                f"target ({target_img.width}x{target_img.height}) needs to have smaller dimensions "
                f"than map ({map_img.width}x{map_img.height})"
            )
        return map_img, target_img

    def offsets(self, map, target) -> List[int]:
        """Horizontal crop offsets, one per frame.

        The first frame is always rendered at offset 0; the window then
        advances by `step` until it would reach the map's right edge.
        """
        map_img, target_img = self.check_inputs(map, target)
        slack = map_img.width - target_img.width
        offsets = list(range(0, max(slack, 1), self.cfg.step))
        if self.cfg.max_frames is not None:
            offsets = offsets[:self.cfg.max_frames]
        return offsets

    def count(self, map, target) -> int:
        return len(self.offsets(map, target))

    def crop_window(self, map, target, offset: int) -> OpaqueImage:
        """Crop the map to the size of the target, `offset` pixels from the left."""
        map_img, target_img = self.check_inputs(map, target)
        return map_img.crop(offset, 0, target_img.width, target_img.height)

    def render_frame(self, map, target, offset: int) -> OpaqueImage:
        cfg = self.cfg
        map_img, target_img = self.check_inputs(map, target)
        cropped = map_img.crop(offset, 0, target_img.width, target_img.height)
        warped = displace(
            cropped, target_img,
            cfg.component_x, cfg.component_y,
            cfg.scale_x, cfg.scale_y,
            workers=cfg.workers,
        )
        return overlay(cropped, warped, cfg.location)

    def frames(self, map, target) -> Iterator[Tuple[int, OpaqueImage]]:
        """Yield (offset, frame) for every frame of the animation."""
        map_img, target_img = self.check_inputs(map, target)
        for offset in self.offsets(map_img, target_img):
            logger.debug("rendering frame at offset_x=%d", offset)
            yield offset, self.render_frame(map_img, target_img, offset)
