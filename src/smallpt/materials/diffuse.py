"""Ideal diffuse reflection.

Directions are drawn from a cosine-weighted distribution over the
hemisphere around the shading normal, so the Lambertian BRDF, the cosine
term and the sampling PDF cancel and the path weight is just the albedo.

The sampling uses two uniform draws:
    r1 = 2*pi*u1   (azimuth)
    r2 = u2        (squared radius on the unit disk)

and an orthonormal basis (u, v, w) with w = nl. The helper axis for u is
(0, 1, 0) when |w.x| > 0.1 and (1, 0, 0) otherwise, keeping it away from
parallel to w.
"""

import taichi as ti
import taichi.math as tm

from src.smallpt.core.ray import cross, normalize, vec3
from src.smallpt.core.rng import next_uniform, uvec4


@ti.func
def build_onb(w: vec3):
    """Build an orthonormal basis around w.

    Args:
        w: Unit vector used as the basis z-axis.

    Returns:
        A tuple (u, v, w).
    """
    a = vec3(1.0, 0.0, 0.0)
    if ti.abs(w.x) > 0.1:
        a = vec3(0.0, 1.0, 0.0)
    u = normalize(cross(a, w))
    v = cross(w, u)
    return u, v, w


@ti.func
def cosine_direction(nl: vec3, r1: ti.f64, r2: ti.f64) -> vec3:
    """Map two numbers to a cosine-weighted direction around nl.

    Args:
        nl: Unit normal facing the incoming ray.
        r1: Azimuth in [0, 2*pi).
        r2: Radius parameter in [0, 1).

    Returns:
        A unit direction in the hemisphere of nl.
    """
    u, v, w = build_onb(nl)
    r2s = ti.sqrt(r2)
    d = u * ti.cos(r1) * r2s + v * ti.sin(r1) * r2s + w * ti.sqrt(1.0 - r2)
    return normalize(d)


@ti.func
def sample_diffuse(nl: vec3, state: uvec4):
    """Sample a bounce direction for a diffuse surface.

    Args:
        nl: Unit normal facing the incoming ray.
        state: Generator state.

    Returns:
        A tuple (direction, state).
    """
    s, u1 = next_uniform(state)
    s, u2 = next_uniform(s)
    return cosine_direction(nl, 2.0 * tm.pi * u1, u2), s
