"""dispmap codecs: image file loading and saving."""

from .image_io import load_map, load_target, save_frame, save_gif

__all__ = ["load_map", "load_target", "save_frame", "save_gif"]
