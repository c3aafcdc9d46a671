"""Ray data structure and vector utilities for the sphere path tracer.

This module provides the Ray dataclass and the 3D vector helpers used by
every other part of the renderer. The same vector type is used for points,
directions and RGB colors (colors may transiently exceed [0, 1]; they are
clamped only when the image is written).

All state is double precision. Callers are expected to initialise Taichi
with ``default_fp=ti.f64`` so that float literals inside kernels match.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64, fast_math=False)
    >>> origin = vec3(0.0, 0.0, 0.0)
    >>> direction = vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Double precision 3D vector (position, direction, or RGB color)
vec3 = ti.types.vector(3, ti.f64)


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Expected to be
            unit length by the intersection and shading code.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f64) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + ray.direction * t


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction inside a kernel."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f64:
    """Compute the Euclidean length of a vector."""
    return ti.sqrt(v.x * v.x + v.y * v.y + v.z * v.z)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f64:
    """Compute the dot product of two vectors."""
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return vec3(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    The zero vector is not guarded against and produces NaN components;
    scene geometry never yields one.

    Args:
        v: The input vector.

    Returns:
        v scaled by the reciprocal of its length.
    """
    return v * (1.0 / length(v))


@ti.func
def mult(a: vec3, b: vec3) -> vec3:
    """Component-wise product, used to modulate light by an albedo."""
    return vec3(a.x * b.x, a.y * b.y, a.z * b.z)


@ti.func
def max_component(v: vec3) -> ti.f64:
    """Return the largest of the three components."""
    return tm.max(v.x, tm.max(v.y, v.z))


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    The result does not depend on which side the normal faces, so the
    outward sphere normal can be used directly.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (unit length).

    Returns:
        The mirrored direction d - 2 (n . d) n.
    """
    return incident - normal * 2.0 * dot(normal, incident)
