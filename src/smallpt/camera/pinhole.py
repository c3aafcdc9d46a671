"""Pinhole camera with tent-filtered sub-pixel jitter.

The camera is a position and a viewing direction. The image plane is
spanned by two vectors computed once per render:

    cx = (width * fov_scale / height, 0, 0)
    cy = normalize(cx x direction) * fov_scale

A camera ray for pixel (x, y), sub-pixel (sx, sy) and jitter (dx, dy) has
direction

    normalize(cx * (((sx + 0.5 + dx) / 2 + x) / width - 0.5)
              + cy * (((sy + 0.5 + dy) / 2 + y) / height - 0.5)
              + direction)

and starts near_offset units along that direction, which moves the origin
past geometry close to the eye (the front wall of the reference scene).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64, fast_math=False)
    >>> from src.smallpt.camera.pinhole import PinholeCamera, setup_camera
    >>> camera = PinholeCamera(position=(50, 52, 295.6), direction=(0, -0.042612, -1))
    >>> setup_camera(camera, 100, 100)
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti

from src.smallpt.core.ray import Ray, make_ray, normalize

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class PinholeCamera:
    """Configuration for a pinhole camera.

    Attributes:
        position: Camera position in world space (x, y, z).
        direction: Viewing direction; normalized by setup_camera().
        fov_scale: Half-extent of the image plane at unit distance.
        near_offset: Distance along each ray at which it starts.
    """

    position: tuple[float, float, float]
    direction: tuple[float, float, float]
    fov_scale: float = 0.5135
    near_offset: float = 140.0


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f64, shape=())
_camera_direction = ti.Vector.field(3, dtype=ti.f64, shape=())
_camera_cx = ti.Vector.field(3, dtype=ti.f64, shape=())
_camera_cy = ti.Vector.field(3, dtype=ti.f64, shape=())
_camera_near = ti.field(dtype=ti.f64, shape=())
_camera_initialized = ti.field(dtype=ti.i32, shape=())

_probe_origin = ti.Vector.field(3, dtype=ti.f64, shape=())
_probe_direction = ti.Vector.field(3, dtype=ti.f64, shape=())


# =============================================================================
# Camera Setup (Python-side)
# =============================================================================


def setup_camera(camera: PinholeCamera, width: int, height: int) -> None:
    """Compute the image plane vectors and store the camera state.

    Args:
        camera: Camera configuration.
        width: Image width in pixels.
        height: Image height in pixels.

    Raises:
        ValueError: If the dimensions are not positive, the direction has
            zero length, or the direction is parallel to the x axis (which
            leaves cy undefined).
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if camera.fov_scale <= 0.0 or not math.isfinite(camera.fov_scale):
        raise ValueError(f"fov_scale must be positive, got {camera.fov_scale}")

    position = np.array(camera.position, dtype=np.float64)
    direction = np.array(camera.direction, dtype=np.float64)
    norm = float(np.linalg.norm(direction))
    if norm == 0.0 or not math.isfinite(norm):
        raise ValueError(f"Camera direction must be non-zero, got {camera.direction}")
    direction = direction * (1.0 / norm)

    cx = np.array([width * camera.fov_scale / height, 0.0, 0.0])
    cy = np.cross(cx, direction)
    cy_norm = float(np.linalg.norm(cy))
    if cy_norm == 0.0:
        raise ValueError("Camera direction must not be parallel to the x axis")
    cy = cy * (1.0 / cy_norm) * camera.fov_scale

    _camera_origin[None] = position.tolist()
    _camera_direction[None] = direction.tolist()
    _camera_cx[None] = cx.tolist()
    _camera_cy[None] = cy.tolist()
    _camera_near[None] = camera.near_offset
    _camera_initialized[None] = 1


def reset_camera() -> None:
    """Mark the camera as not set up."""
    _camera_initialized[None] = 0


def is_camera_initialized() -> bool:
    """Check whether setup_camera() has been called."""
    return bool(_camera_initialized[None])


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, direction, cx and cy.
    """

    def _read(f) -> tuple[float, float, float]:
        v = f[None]
        return (float(v[0]), float(v[1]), float(v[2]))

    return {
        "origin": _read(_camera_origin),
        "direction": _read(_camera_direction),
        "cx": _read(_camera_cx),
        "cy": _read(_camera_cy),
    }


# =============================================================================
# Ray Generation (Taichi)
# =============================================================================


@ti.func
def tent_filter(r: ti.f64) -> ti.f64:
    """Map r in [0, 2) to a tent-distributed offset in [-1, 1).

    r = 0 gives -1, r = 1 gives 0 and r -> 2 approaches 1. Offsets cluster
    around the sub-pixel center.
    """
    result = 0.0
    if r < 1.0:
        result = ti.sqrt(r) - 1.0
    else:
        result = 1.0 - ti.sqrt(2.0 - r)
    return result


@ti.func
def camera_ray(
    x: ti.i32,
    y: ti.i32,
    sx: ti.i32,
    sy: ti.i32,
    dx: ti.f64,
    dy: ti.f64,
    width: ti.i32,
    height: ti.i32,
) -> Ray:
    """Build the primary ray for one jittered sub-pixel sample.

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = bottom).
        sx: Sub-pixel column (0 or 1).
        sy: Sub-pixel row (0 or 1).
        dx: Horizontal tent offset in [-1, 1).
        dy: Vertical tent offset in [-1, 1).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray with unit direction, starting near_offset along it.
    """
    fx = ((ti.cast(sx, ti.f64) + 0.5 + dx) / 2.0 + ti.cast(x, ti.f64)) / ti.cast(width, ti.f64)
    fy = ((ti.cast(sy, ti.f64) + 0.5 + dy) / 2.0 + ti.cast(y, ti.f64)) / ti.cast(height, ti.f64)
    d = _camera_cx[None] * (fx - 0.5) + _camera_cy[None] * (fy - 0.5) + _camera_direction[None]
    d = normalize(d)
    return make_ray(_camera_origin[None] + d * _camera_near[None], d)


@ti.kernel
def _probe_camera_ray(
    x: ti.i32,
    y: ti.i32,
    sx: ti.i32,
    sy: ti.i32,
    dx: ti.f64,
    dy: ti.f64,
    width: ti.i32,
    height: ti.i32,
):
    ray = camera_ray(x, y, sx, sy, dx, dy, width, height)
    _probe_origin[None] = ray.origin
    _probe_direction[None] = ray.direction


def get_camera_ray(
    x: int,
    y: int,
    sx: int = 0,
    sy: int = 0,
    dx: float = 0.0,
    dy: float = 0.0,
    *,
    width: int,
    height: int,
) -> tuple[tuple[float, float, float], tuple[float, float, float]]:
    """Compute a primary ray from Python scope.

    Returns:
        (origin, direction) as tuples.

    Raises:
        RuntimeError: If the camera has not been set up.
    """
    if not is_camera_initialized():
        raise RuntimeError("Camera not set up. Call setup_camera() first.")
    _probe_camera_ray(x, y, sx, sy, dx, dy, width, height)
    o = _probe_origin[None]
    d = _probe_direction[None]
    return (float(o[0]), float(o[1]), float(o[2])), (float(d[0]), float(d[1]), float(d[2]))
