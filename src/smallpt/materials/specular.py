"""Ideal specular (mirror) reflection."""

import taichi as ti

from src.smallpt.core.ray import reflect, vec3


@ti.func
def scatter_specular(incident_direction: vec3, normal: vec3) -> vec3:
    """Return the perfect mirror direction d - 2 (n . d) n.

    Args:
        incident_direction: The incoming ray direction (unit length).
        normal: The outward surface normal (unit length).

    Returns:
        The reflected direction, unit length when the inputs are.
    """
    return reflect(incident_direction, normal)
