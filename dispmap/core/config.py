"""Displacement animation configuration."""

from dataclasses import dataclass, asdict, fields
from numbers import Integral
from pathlib import Path
from typing import Tuple, Optional, Dict, Any, Union

import yaml

from .errors import InvalidArgument
from .raster import Component


def _is_int(value) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool)


@dataclass
class FilterConfig:
    """Parameters of the displace + overlay pipeline.

    Defaults reproduce the classic demo: both axes driven by the red
    channel of the map with a strength of 20, crop window sliding 3 px
    per frame.
    """
    # Displacement
    component_x: Component = Component.RED
    component_y: Component = Component.RED
    scale_x: int = 20
    scale_y: int = 20

    # Animation
    step: int = 3  # crop window advance per frame, in pixels
    max_frames: Optional[int] = None

    # Overlay offset of the warped target on the cropped map
    location: Tuple[int, int] = (0, 0)

    workers: Optional[int] = None

    def __post_init__(self):
        self.component_x = Component.parse(self.component_x, "component_x")
        self.component_y = Component.parse(self.component_y, "component_y")
        if isinstance(self.location, (list, tuple)):
            self.location = tuple(self.location)
        self.validate()

    def validate(self) -> None:
        """Raise InvalidArgument if any value is out of range."""
        for name in ("scale_x", "scale_y", "step", "max_frames", "workers"):
            value = getattr(self, name)
            if value is None and name in ("max_frames", "workers"):
                continue
            if not _is_int(value):
                raise InvalidArgument(f"{name} must be an integer, got {value!r}")
        if self.step <= 0:
            raise InvalidArgument(f"step must be positive, got {self.step}")
        if self.max_frames is not None and self.max_frames < 0:
            raise InvalidArgument(f"max_frames must be >= 0, got {self.max_frames}")
        if self.workers is not None and self.workers < 1:
            raise InvalidArgument(f"workers must be >= 1, got {self.workers}")
        if not isinstance(self.location, tuple) or len(self.location) != 2 \
                or not all(_is_int(v) for v in self.location):
            raise InvalidArgument(f"location must be an integer (x, y) pair, got {self.location!r}")

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["component_x"] = self.component_x.name.lower()
        d["component_y"] = self.component_y.name.lower()
        d["location"] = list(self.location)
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "FilterConfig":
        valid_keys = {f.name for f in fields(cls)}
        unknown = sorted(set(d) - valid_keys)
        if unknown:
            raise InvalidArgument(f"unknown config keys: {', '.join(unknown)}")
        return cls(**d)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "FilterConfig":
        """Load from a YAML file; values may sit under a top-level `filter:` key.

        ```yaml
        filter:
          component_x: red
          component_y: green
          scale_x: 20
          scale_y: 40
          step: 3
        ```
        """
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if "filter" in data:
            data = data["filter"] or {}
        return cls.from_dict(data)

    def replace(self, **overrides) -> "FilterConfig":
        """Copy with the non-None overrides applied."""
        d = asdict(self)
        d.update({k: v for k, v in overrides.items() if v is not None})
        return type(self).from_dict(d)
