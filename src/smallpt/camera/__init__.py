"""Camera module for primary ray generation.

Components:
    pinhole: Pinhole camera with 2x2 sub-pixel sampling and tent-filtered jitter

Pixel coordinates have x growing to the right and y growing upward, so
row 0 is the bottom of the image.
"""

from .pinhole import (
    PinholeCamera,
    camera_ray,
    get_camera_info,
    get_camera_ray,
    is_camera_initialized,
    reset_camera,
    setup_camera,
    tent_filter,
)

__all__ = [
    "PinholeCamera",
    "setup_camera",
    "is_camera_initialized",
    "reset_camera",
    "get_camera_info",
    "tent_filter",
    "camera_ray",
    "get_camera_ray",
]
