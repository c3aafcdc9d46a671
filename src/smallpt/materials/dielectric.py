"""Dielectric (glass) material implementation.

This module implements refraction through a smooth dielectric boundary
between air (index 1.0) and glass (index 1.5).

Key physics:
    - Snell's law for the transmitted direction
    - Total internal reflection when no real transmission angle exists
    - Schlick's approximation for Fresnel reflectance:
          Re = R0 + (1 - R0) * c^5,   R0 = ((nt - nc) / (nt + nc))^2
      where c = 1 - cos(theta) measured on the air side of the boundary

The integrator either follows both the reflected and transmitted branches
(weighted by Re and Tr = 1 - Re) or picks one of them with probability
P = 0.25 + 0.5 * Re and reweights by Re / P or Tr / (1 - P).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64, fast_math=False)
    >>> from src.smallpt.materials.dielectric import refract_dielectric
    >>> # Use within a Taichi kernel:
    >>> # tir, tdir, re, tr = refract_dielectric(d, n, nl, AIR_IOR, GLASS_IOR)
"""

import taichi as ti

from src.smallpt.core.ray import dot, normalize, vec3

# Index of refraction outside the sphere
AIR_IOR = 1.0

# Index of refraction inside dielectric spheres
GLASS_IOR = 1.5


@ti.func
def fresnel_r0(nc: ti.f64, nt: ti.f64) -> ti.f64:
    """Reflectance at normal incidence for a boundary between nc and nt."""
    a = nt - nc
    b = nt + nc
    return a * a / (b * b)


@ti.func
def schlick_reflectance(c: ti.f64, r0: ti.f64) -> ti.f64:
    """Schlick's approximation of Fresnel reflectance.

    Args:
        c: One minus the cosine of the incidence angle.
        r0: Reflectance at normal incidence.

    Returns:
        r0 + (1 - r0) * c^5. Equals r0 when c == 0.
    """
    return r0 + (1.0 - r0) * c * c * c * c * c


@ti.func
def reflection_probability(re: ti.f64) -> ti.f64:
    """Probability of following the reflected branch when choosing one."""
    return 0.25 + 0.5 * re


@ti.func
def refract_dielectric(
    incident_direction: vec3,
    normal: vec3,
    oriented_normal: vec3,
    nc: ti.f64,
    nt: ti.f64,
):
    """Compute the transmitted direction and Fresnel split at a boundary.

    Args:
        incident_direction: The incoming ray direction (unit length).
        normal: The outward surface normal.
        oriented_normal: The normal flipped to face the incoming ray.
        nc: Index of refraction outside the sphere.
        nt: Index of refraction inside the sphere.

    Returns:
        A tuple (tir, transmitted_direction, re, tr) where:
        - tir: 1 on total internal reflection, 0 otherwise. The other
          values are zero when tir == 1.
        - transmitted_direction: The refracted direction (unit length).
        - re: Fresnel reflectance.
        - tr: Transmittance, 1 - re.
    """
    into = dot(normal, oriented_normal) > 0.0
    nnt = nt / nc
    sign = -1.0
    if into:
        nnt = nc / nt
        sign = 1.0
    ddn = dot(incident_direction, oriented_normal)
    cos2t = 1.0 - nnt * nnt * (1.0 - ddn * ddn)

    tir = 1
    tdir = vec3(0.0, 0.0, 0.0)
    re = 0.0
    tr = 0.0
    if cos2t >= 0.0:
        tir = 0
        tdir = normalize(incident_direction * nnt - normal * (sign * (ddn * nnt + ti.sqrt(cos2t))))
        c = 1.0 - dot(tdir, normal)
        if into:
            c = 1.0 + ddn
        re = schlick_reflectance(c, fresnel_r0(nc, nt))
        tr = 1.0 - re

    return tir, tdir, re, tr
