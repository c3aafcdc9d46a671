"""Core rendering module.

Components:
    ray: Ray data structure and vector utilities
    rng: Deterministic xorshift random number generator
    integrator: Radiance estimator and pixel kernels
    renderer: Render settings and the batched render driver

Note: integrator and renderer are NOT imported here because they allocate
Taichi fields and pull in the scene package. Import them directly:
    from src.smallpt.core.renderer import Renderer, RenderSettings
"""

from .ray import (
    Ray,
    cross,
    dot,
    length,
    make_ray,
    max_component,
    mult,
    normalize,
    ray_at,
    reflect,
    vec3,
)
from .rng import (
    XorShift,
    host_pixel_seed,
    next_uint32,
    next_uniform,
    pixel_seed,
    seed_state,
    uvec4,
)

__all__ = [
    # Ray and vectors
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "dot",
    "cross",
    "normalize",
    "mult",
    "max_component",
    "reflect",
    # Random numbers
    "uvec4",
    "seed_state",
    "next_uint32",
    "next_uniform",
    "pixel_seed",
    "XorShift",
    "host_pixel_seed",
]
