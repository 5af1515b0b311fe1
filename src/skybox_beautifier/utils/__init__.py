"""Utility modules for Skybox Beautifier."""

from .image import (
    DEFAULT_MAX_PIXELS,
    crop_to_file,
    get_image_info,
    set_max_image_pixels,
    suggest_face_size,
)
from .profiler import PerformanceProfiler, global_profiler

__all__ = [
    "DEFAULT_MAX_PIXELS",
    "crop_to_file",
    "set_max_image_pixels",
    "get_image_info",
    "suggest_face_size",
    "PerformanceProfiler",
    "global_profiler",
]
