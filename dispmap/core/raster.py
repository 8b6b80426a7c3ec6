"""Raster buffers: interleaved row-major uint8 images with a fixed channel count."""

from enum import IntEnum
from numbers import Integral
from typing import Optional, Sequence, Tuple, Type, Union

import numpy as np

from .errors import DimensionMismatch, InvalidArgument


class Component(IntEnum):
    """Colour channel of a BGR pixel used as a displacement source."""
    BLUE = 0
    GREEN = 1
    RED = 2

    @classmethod
    def parse(cls, value: Union[int, str, "Component"], name: str = "component") -> "Component":
        """Accept a Component, an index in {0, 1, 2} or a channel name ("red", "G", ...)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper()
            for member in cls:
                if key in (member.name, member.name[0]):
                    return member
            raise InvalidArgument(f"{name}: {value!r} is not a valid component name")
        # bool is an Integral but never a meaningful selector
        if isinstance(value, bool) or not isinstance(value, Integral):
            raise InvalidArgument(f"{name}: {value!r} is not a valid component")
        if not 0 <= int(value) <= 2:
            raise InvalidArgument(f"{name}: {value} is not a valid component, expected range [0, 2]")
        return cls(int(value))


def get_component(pixel: Sequence[int], component: Union[int, Component]) -> int:
    """Return the colour of one channel of a BGR pixel.

    Args:
        pixel: pixel with at least three channels in B, G, R order
        component: 0 for blue, 1 for green, 2 for red

    Returns:
        the channel value as int
    """
    return int(pixel[Component.parse(component)])


class Raster:
    """Read-only view over an image of shape (rows, cols, channels).

    The wrapped array is never copied on construction and never written
    through; operations that produce images allocate a new buffer.
    """

    CHANNELS: Tuple[int, ...] = (3, 4)

    def __init__(self, data):
        arr = np.asarray(data)
        if arr.ndim != 3:
            raise DimensionMismatch(
                f"{type(self).__name__} expects an array of shape (rows, cols, channels), got {arr.shape}"
            )
        if arr.dtype != np.uint8:
            raise DimensionMismatch(f"{type(self).__name__} expects uint8 data, got {arr.dtype}")
        if arr.shape[2] not in self.CHANNELS:
            raise DimensionMismatch(
                f"{type(self).__name__} expects {' or '.join(map(str, self.CHANNELS))} channels, "
                f"got {arr.shape[2]}"
            )
        view = arr.view()
        view.flags.writeable = False
        self._data = view

    @classmethod
    def from_array(cls, data) -> "Raster":
        """Wrap an array as OpaqueImage or TranslucentImage depending on its channel count."""
        arr = np.asarray(data)
        if arr.ndim == 3 and arr.shape[2] == 4:
            return TranslucentImage(arr)
        return OpaqueImage(arr)

    @classmethod
    def blank(cls, rows: int, cols: int, color: Optional[Sequence[int]] = None) -> "Raster":
        """Allocate a raster filled with a single colour (zeros by default)."""
        channels = cls.CHANNELS[0]
        data = np.zeros((rows, cols, channels), dtype=np.uint8)
        if color is not None:
            data[...] = np.asarray(color, dtype=np.uint8)
        return cls(data)

    @property
    def data(self) -> np.ndarray:
        return self._data

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    @property
    def channels(self) -> int:
        return self._data.shape[2]

    height = rows
    width = cols

    @property
    def shape(self) -> Tuple[int, int, int]:
        return self._data.shape

    def at(self, row: int, col: int) -> Tuple[int, ...]:
        """Return the pixel at (row, col); negative indices are out of range."""
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError(f"pixel ({row}, {col}) outside {self.rows}x{self.cols} raster")
        return tuple(int(v) for v in self._data[row, col])

    def crop(self, x: int, y: int, width: int, height: int) -> "Raster":
        """Return a view of the window whose top-left corner is column x, row y."""
        if x < 0 or y < 0 or width < 0 or height < 0 or x + width > self.cols or y + height > self.rows:
            raise DimensionMismatch(
                f"crop window (x={x}, y={y}, {width}x{height}) does not fit a {self.cols}x{self.rows} raster"
            )
        return type(self)(self._data[y:y + height, x:x + width])

    def copy(self) -> "Raster":
        return type(self)(self._data.copy())

    def to_numpy(self) -> np.ndarray:
        """Writable copy of the pixel buffer."""
        return self._data.copy()

    def __array__(self, dtype=None, copy=None):
        arr = self._data if dtype is None else self._data.astype(dtype)
        if copy and arr is self._data:
            arr = arr.copy()
        return arr

    def __repr__(self) -> str:
        return f"{type(self).__name__}(rows={self.rows}, cols={self.cols}, channels={self.channels})"


class OpaqueImage(Raster):
    """Three-channel BGR image."""
    CHANNELS = (3,)


class TranslucentImage(Raster):
    """Four-channel BGRA image; alpha 0 is transparent, 255 opaque."""
    CHANNELS = (4,)

    @property
    def alpha(self) -> np.ndarray:
        return self._data[..., 3]


def as_raster(obj, kind: Type[Raster] = Raster) -> Raster:
    """Coerce a Raster or array-like into `kind`, validating shape and dtype."""
    if isinstance(obj, kind) and kind is not Raster:
        return obj
    data = obj.data if isinstance(obj, Raster) else obj
    if kind is Raster:
        return obj if isinstance(obj, (OpaqueImage, TranslucentImage)) else Raster.from_array(data)
    return kind(data)
