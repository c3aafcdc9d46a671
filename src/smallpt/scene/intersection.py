"""Scene storage and nearest-hit queries.

Spheres are stored in a preallocated struct field so kernels can read them
without recompilation when the scene changes. Intersection routines take
the sphere field and sphere count as explicit read-only arguments; only the
kernel entry points refer to the module storage.

The nearest-hit query returns a SceneHitRecord value. Rays are never
written to.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64, fast_math=False)
    >>> from src.smallpt.scene.intersection import add_sphere, clear_scene, trace_nearest
    >>> clear_scene()
    >>> add_sphere(1.0, (0, 0, -5), (0, 0, 0), (0.5, 0.5, 0.5), 0)
    0
    >>> trace_nearest((0, 0, 0), (0, 0, -1))
    (0, 4.0)
"""

import taichi as ti

from src.smallpt.core.ray import Ray, make_ray, vec3
from src.smallpt.geometry.sphere import Sphere, intersect_sphere


@ti.dataclass
class SceneHitRecord:
    """Result of a ray-scene intersection.

    Attributes:
        hit: 1 if any sphere was hit, 0 otherwise.
        t: Distance to the nearest hit. Only valid if hit == 1.
        sphere_id: Index of the sphere that was hit, -1 on a miss.
    """

    hit: ti.i32
    t: ti.f64
    sphere_id: ti.i32


# Maximum number of spheres supported in the scene
MAX_SPHERES = 256

# Hits at or beyond this distance are treated as misses
T_MAX = 1e20

spheres = Sphere.field(shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Scratch storage for host-side probes
_probe_hit = ti.field(dtype=ti.i32, shape=())
_probe_t = ti.field(dtype=ti.f64, shape=())
_probe_sphere = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all spheres from the scene.

    Only the count is reset; stale entries are overwritten by later adds.
    """
    num_spheres[None] = 0


def add_sphere(
    radius: float,
    center: tuple[float, float, float],
    emission: tuple[float, float, float],
    albedo: tuple[float, float, float],
    material: int,
) -> int:
    """Append a sphere to the scene storage.

    No validation is done here; SceneManager checks values before calling.

    Args:
        radius: Sphere radius.
        center: Center point (x, y, z).
        emission: Emitted radiance (r, g, b).
        albedo: Reflectance (r, g, b).
        material: Integer material tag.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    spheres.radius[idx] = radius
    spheres.center[idx] = [center[0], center[1], center[2]]
    spheres.emission[idx] = [emission[0], emission[1], emission[2]]
    spheres.albedo[idx] = [albedo[0], albedo[1], albedo[2]]
    spheres.material[idx] = material
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_sphere(index: int) -> dict:
    """Read back a stored sphere as plain Python values.

    Raises:
        IndexError: If index is not a stored sphere.
    """
    if not 0 <= index < get_sphere_count():
        raise IndexError(f"Sphere index {index} out of range")
    center = spheres.center[index]
    emission = spheres.emission[index]
    albedo = spheres.albedo[index]
    return {
        "radius": float(spheres.radius[index]),
        "center": (float(center[0]), float(center[1]), float(center[2])),
        "emission": (float(emission[0]), float(emission[1]), float(emission[2])),
        "albedo": (float(albedo[0]), float(albedo[1]), float(albedo[2])),
        "material": int(spheres.material[index]),
    }


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(hit=0, t=T_MAX, sphere_id=-1)


@ti.func
def intersect_scene(scene: ti.template(), count: ti.i32, ray: Ray) -> SceneHitRecord:
    """Find the nearest sphere hit by a ray.

    Every sphere is tested; the smallest positive distance wins. Exact ties
    keep the earlier sphere.

    Args:
        scene: Sphere struct field to search.
        count: Number of valid entries in the field.
        ray: The ray to trace (unit-length direction).

    Returns:
        A SceneHitRecord for the nearest hit, or a miss record.
    """
    result = _make_miss_record()
    for i in range(count):
        d = intersect_sphere(scene[i], ray)
        if d > 0.0 and d < result.t:
            result.t = d
            result.sphere_id = i
            result.hit = 1
    return result


@ti.kernel
def _probe_nearest(origin: vec3, direction: vec3):
    # Single-iteration outer loop keeps the sphere loop serial
    for _ in range(1):
        ray = make_ray(origin, direction)
        rec = intersect_scene(spheres, num_spheres[None], ray)
        _probe_hit[None] = rec.hit
        _probe_t[None] = rec.t
        _probe_sphere[None] = rec.sphere_id


def trace_nearest(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> tuple[int, float] | None:
    """Find the nearest hit for a ray from Python scope.

    Args:
        origin: Ray origin (x, y, z).
        direction: Ray direction (x, y, z); should be unit length.

    Returns:
        (sphere_index, distance) for the nearest hit, or None on a miss.
    """
    _probe_nearest(
        vec3(origin[0], origin[1], origin[2]),
        vec3(direction[0], direction[1], direction[2]),
    )
    if _probe_hit[None] == 0:
        return None
    return int(_probe_sphere[None]), float(_probe_t[None])
