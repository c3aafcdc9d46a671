"""Sphere primitive and ray-sphere intersection.

A sphere carries both its geometry and its surface description: emitted
radiance, per-channel albedo and a material tag (see
``src.smallpt.scene.manager.MaterialType``). Very large radii are used to
approximate planes such as the walls of the reference scene.

The intersection solves

    t^2 + 2*b*t + (op . op - r^2) = 0,   op = center - origin,  b = op . d

for a unit-length ray direction d and returns the nearest root beyond
EPSILON, which keeps rays leaving a surface from re-hitting it.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64, fast_math=False)
    >>> from src.smallpt.geometry.sphere import Sphere, intersect_sphere
    >>> # Use intersect_sphere within a Taichi kernel
"""

import taichi as ti

from src.smallpt.core.ray import Ray, dot, vec3

# Minimum accepted hit distance (self-intersection guard)
EPSILON = 1e-4


@ti.dataclass
class Sphere:
    """A sphere with material properties.

    Attributes:
        radius: The radius of the sphere (positive).
        center: The center point of the sphere (vec3).
        emission: Radiance emitted by the surface regardless of incoming light.
        albedo: Per-channel reflectance in [0, 1].
        material: Material tag (0 = diffuse, 1 = specular, 2 = dielectric).
    """

    radius: ti.f64
    center: vec3
    emission: vec3
    albedo: vec3
    material: ti.i32


@ti.func
def intersect_sphere(sphere: Sphere, ray: Ray) -> ti.f64:
    """Test a ray against a single sphere.

    Args:
        sphere: The sphere to test.
        ray: The ray, with unit-length direction.

    Returns:
        Distance to the nearest intersection farther than EPSILON, or 0.0
        when the ray misses (negative discriminant or both roots behind).
    """
    op = sphere.center - ray.origin
    b = dot(op, ray.direction)
    det = b * b - dot(op, op) + sphere.radius * sphere.radius

    result = 0.0
    if det >= 0.0:
        det = ti.sqrt(det)
        t = b - det
        if t > EPSILON:
            result = t
        else:
            t = b + det
            if t > EPSILON:
                result = t

    return result


@ti.func
def sphere_normal(sphere: Sphere, point: vec3) -> vec3:
    """Outward unit normal at a point on the sphere surface."""
    n = point - sphere.center
    return n * (1.0 / ti.sqrt(dot(n, n)))
