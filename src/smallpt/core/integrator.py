"""Recursive radiance estimator and the per-pixel sampling loop.

This module implements the path tracer proper. ``radiance`` estimates the
light arriving along a ray:

    1. Intersect the ray with the scene; a miss returns black.
    2. At the hit, take the outward normal n, the normal nl facing the
       ray, the albedo f and p = max(f).
    3. Beyond MAX_DEPTH bounces only the surface emission is returned.
    4. The depth is incremented. Once it exceeds RUSSIAN_ROULETTE_DEPTH the
       path survives with probability p (and f is scaled by 1/p); a
       terminated path returns the emission.
    5. The material decides the continuation:
       - diffuse: cosine-weighted bounce
       - specular: mirror bounce
       - dielectric: mirror bounce on total internal reflection; otherwise
         both branches weighted by Re and Tr while depth <= SPLIT_DEPTH,
         and afterwards one branch picked with probability
         P = 0.25 + 0.5 * Re and reweighted by Re / P or Tr / (1 - P).
    Every step returns emission + f * (radiance of the continuation).

Taichi functions cannot call themselves, so the recursion is unrolled into
a loop that carries the path throughput (the product of the f factors seen
so far) and accumulates throughput * emission at each hit. Dielectric
splits push the transmitted branch onto a small pending stack and follow
the reflected branch first, visiting branches in the same depth-first
order as the recursive form so random draws are consumed identically.
Each split level adds at most one pending branch, so the stack holds
SPLIT_DEPTH entries.

The pixel loop fires 2x2 sub-pixel cells with ``samples`` tent-jittered
rays each, scales every sample by 1/samples, clamps each cell to [0, 1]
and averages the four cells.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64, fast_math=False)
    >>> from src.smallpt.core.integrator import estimate_radiance
    >>> from src.smallpt.scene.cornell_box import create_cornell_box_scene
    >>> scene, camera = create_cornell_box_scene()
    >>> estimate_radiance((50, 52, 150), (0, 0, -1), seed=7)
"""

import taichi as ti
import taichi.math as tm

from src.smallpt.camera.pinhole import camera_ray, is_camera_initialized, tent_filter
from src.smallpt.core.ray import Ray, dot, make_ray, max_component, mult, normalize, ray_at, vec3
from src.smallpt.core.rng import next_uniform, pixel_seed, seed_state, uvec4
from src.smallpt.geometry.sphere import sphere_normal
from src.smallpt.materials.dielectric import (
    AIR_IOR,
    GLASS_IOR,
    reflection_probability,
    refract_dielectric,
)
from src.smallpt.materials.diffuse import sample_diffuse
from src.smallpt.materials.specular import scatter_specular
from src.smallpt.scene.intersection import intersect_scene, num_spheres, spheres
from src.smallpt.scene.manager import MaterialType

# =============================================================================
# Rendering Constants
# =============================================================================

# Past this depth a hit returns its emission only
MAX_DEPTH = 100

# Russian roulette applies once the incremented depth exceeds this
RUSSIAN_ROULETTE_DEPTH = 5

# Dielectric hits at or below this depth follow both branches
SPLIT_DEPTH = 2

# Sub-pixel grid is SUBPIXELS x SUBPIXELS
SUBPIXELS = 2

# Maximum supported image dimensions (preallocated buffer)
MAX_IMAGE_WIDTH = 1024
MAX_IMAGE_HEIGHT = 1024
MAX_PIXELS = MAX_IMAGE_WIDTH * MAX_IMAGE_HEIGHT

_DIFFUSE = int(MaterialType.DIFFUSE)
_SPECULAR = int(MaterialType.SPECULAR)

# =============================================================================
# Render Target
# =============================================================================

# Flat pixel buffer, index 0 is the top-left pixel
_pixel_buffer = ti.Vector.field(3, dtype=ti.f64, shape=MAX_PIXELS)

# Generator state threaded through serial renders
_rng_state = ti.Vector.field(4, dtype=ti.u32, shape=())

_probe_radiance = ti.Vector.field(3, dtype=ti.f64, shape=())


# =============================================================================
# Radiance Estimator
# =============================================================================


@ti.func
def radiance(scene: ti.template(), count: ti.i32, ray: Ray, depth: ti.i32, state: uvec4):
    """Estimate the radiance arriving along a ray.

    Args:
        scene: Sphere struct field (read only).
        count: Number of spheres in the field.
        ray: The ray to trace (unit-length direction).
        depth: Bounce depth of the ray (0 for camera rays).
        state: Generator state.

    Returns:
        A tuple (radiance, state). Radiance is never negative for scenes
        with non-negative emission and albedo in [0, 1].
    """
    s = state
    result = vec3(0.0, 0.0, 0.0)

    origin = ray.origin
    direction = ray.direction
    cur_depth = depth
    throughput = vec3(1.0, 1.0, 1.0)

    # Pending transmitted branches, one slot per split level
    pending = 0
    slot0_origin = vec3(0.0, 0.0, 0.0)
    slot0_direction = vec3(0.0, 0.0, 0.0)
    slot0_depth = 0
    slot0_throughput = vec3(0.0, 0.0, 0.0)
    slot1_origin = vec3(0.0, 0.0, 0.0)
    slot1_direction = vec3(0.0, 0.0, 0.0)
    slot1_depth = 0
    slot1_throughput = vec3(0.0, 0.0, 0.0)

    active = 1
    while active == 1:
        path_done = 0
        path_ray = make_ray(origin, direction)
        rec = intersect_scene(scene, count, path_ray)

        if rec.hit == 0:
            path_done = 1
        else:
            obj = scene[rec.sphere_id]
            x = ray_at(path_ray, rec.t)
            n = sphere_normal(obj, x)
            nl = n
            if dot(n, direction) >= 0.0:
                nl = -n
            f = obj.albedo
            p = max_component(f)

            if cur_depth > MAX_DEPTH:
                result += mult(throughput, obj.emission)
                path_done = 1
            else:
                cur_depth += 1
                if cur_depth > RUSSIAN_ROULETTE_DEPTH:
                    s, u = next_uniform(s)
                    if u < p:
                        f = f * (1.0 / p)
                    else:
                        result += mult(throughput, obj.emission)
                        path_done = 1

                if path_done == 0:
                    result += mult(throughput, obj.emission)
                    throughput = mult(throughput, f)
                    origin = x

                    if obj.material == _DIFFUSE:
                        direction, s = sample_diffuse(nl, s)
                    elif obj.material == _SPECULAR:
                        direction = scatter_specular(direction, n)
                    else:
                        reflected = scatter_specular(direction, n)
                        tir, tdir, re, tr = refract_dielectric(direction, n, nl, AIR_IOR, GLASS_IOR)
                        if tir == 1:
                            direction = reflected
                        elif cur_depth > SPLIT_DEPTH:
                            prob = reflection_probability(re)
                            s, u = next_uniform(s)
                            if u < prob:
                                throughput = throughput * (re / prob)
                                direction = reflected
                            else:
                                throughput = throughput * (tr / (1.0 - prob))
                                direction = tdir
                        else:
                            # Defer the transmitted branch, follow the reflection now
                            if pending == 0:
                                slot0_origin = x
                                slot0_direction = tdir
                                slot0_depth = cur_depth
                                slot0_throughput = throughput * tr
                            else:
                                slot1_origin = x
                                slot1_direction = tdir
                                slot1_depth = cur_depth
                                slot1_throughput = throughput * tr
                            pending += 1
                            throughput = throughput * re
                            direction = reflected

        if path_done == 1:
            if pending == 0:
                active = 0
            elif pending == 2:
                origin = slot1_origin
                direction = slot1_direction
                cur_depth = slot1_depth
                throughput = slot1_throughput
                pending = 1
            else:
                origin = slot0_origin
                direction = slot0_direction
                cur_depth = slot0_depth
                throughput = slot0_throughput
                pending = 0

    return result, s


@ti.func
def render_pixel(
    scene: ti.template(),
    count: ti.i32,
    index: ti.i32,
    width: ti.i32,
    height: ti.i32,
    samples: ti.i32,
    state: uvec4,
):
    """Compute the final color of one pixel.

    Args:
        scene: Sphere struct field (read only).
        count: Number of spheres in the field.
        index: Flat pixel index, row-major from the top of the image.
        width: Image width in pixels.
        height: Image height in pixels.
        samples: Samples per sub-pixel cell.
        state: Generator state.

    Returns:
        A tuple (color, state) with every channel in [0, 1].
    """
    s = state
    x = index % width
    y = height - index // width - 1
    inv_samples = 1.0 / ti.cast(samples, ti.f64)
    color = vec3(0.0, 0.0, 0.0)

    for sy in range(SUBPIXELS):
        for sx in range(SUBPIXELS):
            r = vec3(0.0, 0.0, 0.0)
            for _ in range(samples):
                s, u1 = next_uniform(s)
                dx = tent_filter(2.0 * u1)
                s, u2 = next_uniform(s)
                dy = tent_filter(2.0 * u2)
                ray = camera_ray(x, y, sx, sy, dx, dy, width, height)
                sample, s = radiance(scene, count, ray, 0, s)
                r = r + sample * inv_samples
            color = color + tm.clamp(r, 0.0, 1.0) * 0.25

    return color, s


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _seed_serial_state(seed: ti.u32):
    _rng_state[None] = seed_state(seed)


@ti.kernel
def _render_range_serial(start: ti.i32, end: ti.i32, width: ti.i32, height: ti.i32, samples: ti.i32):
    """Render pixels [start, end) in order with one shared generator."""
    ti.loop_config(serialize=True)
    for i in range(start, end):
        color, state = render_pixel(spheres, num_spheres[None], i, width, height, samples, _rng_state[None])
        _rng_state[None] = state
        _pixel_buffer[i] = color


@ti.kernel
def _render_range_parallel(
    start: ti.i32,
    end: ti.i32,
    width: ti.i32,
    height: ti.i32,
    samples: ti.i32,
    seed: ti.u32,
):
    """Render pixels [start, end) in parallel, one generator per pixel."""
    for i in range(start, end):
        state = seed_state(pixel_seed(seed, i))
        color, state = render_pixel(spheres, num_spheres[None], i, width, height, samples, state)
        _pixel_buffer[i] = color


@ti.kernel
def _radiance_probe(origin: vec3, direction: vec3, depth: ti.i32, seed: ti.u32):
    # Single-iteration outer loop keeps the estimator serial
    for _ in range(1):
        ray = make_ray(origin, normalize(direction))
        value, state = radiance(spheres, num_spheres[None], ray, depth, seed_state(seed))
        _probe_radiance[None] = value


# =============================================================================
# Public API
# =============================================================================


def seed_serial_stream(seed: int) -> None:
    """Reset the shared generator used by serial renders."""
    _seed_serial_state(seed)


def render_range(
    start: int,
    end: int,
    width: int,
    height: int,
    samples: int,
    *,
    parallel: bool = False,
    seed: int = 0,
) -> None:
    """Render the pixels with flat indices in [start, end).

    Serial mode continues the stream set by seed_serial_stream(), so a render
    split into consecutive ranges draws exactly the same values as one call
    over the whole image. Parallel mode seeds each pixel from (seed, index).

    Args:
        start: First pixel index.
        end: One past the last pixel index.
        width: Image width in pixels.
        height: Image height in pixels.
        samples: Samples per sub-pixel cell.
        parallel: Use per-pixel generators and a parallel loop.
        seed: Render seed (parallel mode only).

    Raises:
        RuntimeError: If the camera has not been set up.
    """
    if end <= start:
        return
    if not is_camera_initialized():
        raise RuntimeError("Camera not set up. Call setup_camera() first.")
    if parallel:
        _render_range_parallel(start, end, width, height, samples, seed)
    else:
        _render_range_serial(start, end, width, height, samples)


def clear_pixel_buffer() -> None:
    """Zero the pixel buffer."""
    _pixel_buffer.fill(0.0)


def get_pixel_buffer_numpy(num_pixels: int):
    """Copy the first num_pixels entries of the pixel buffer.

    Returns:
        NumPy array of shape (num_pixels, 3) with dtype float64.
    """
    return _pixel_buffer.to_numpy()[:num_pixels]


def estimate_radiance(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = 0,
    seed: int = 12345,
) -> tuple[float, float, float]:
    """Run the radiance estimator once from Python scope.

    The direction is normalized before tracing. The current scene storage
    is used.

    Args:
        origin: Ray origin.
        direction: Ray direction.
        depth: Starting depth.
        seed: Seed for a fresh generator.

    Returns:
        The (R, G, B) radiance estimate.

    Raises:
        ValueError: If depth is negative.
    """
    if depth < 0:
        raise ValueError(f"depth must be non-negative, got {depth}")
    _radiance_probe(
        vec3(origin[0], origin[1], origin[2]),
        vec3(direction[0], direction[1], direction[2]),
        depth,
        seed,
    )
    value = _probe_radiance[None]
    return (float(value[0]), float(value[1]), float(value[2]))
