"""Geometry module for the sphere primitive.

Components:
    sphere: Sphere data structure with ray-sphere intersection

Intersection returns the distance along the ray to the nearest root
beyond a small epsilon, or 0 on a miss.
"""

from .sphere import EPSILON, Sphere, intersect_sphere, sphere_normal

__all__ = [
    "EPSILON",
    "Sphere",
    "intersect_sphere",
    "sphere_normal",
]
