"""Taichi implementation of a small sphere-only path tracer.

This package renders scenes made entirely of spheres with unbiased Monte
Carlo path tracing:
- Diffuse, mirror and glass surfaces
- Russian roulette path termination
- 2x2 sub-pixel supersampling with a tent filter
- Deterministic xorshift random streams (serial or per-pixel)
- Plain PPM output

Subpackages:
    core: Vector utilities, random numbers, the radiance estimator and the render driver
    geometry: Sphere primitive and ray-sphere intersection
    materials: Diffuse, specular and dielectric scattering
    scene: Scene storage, validation, scene files and the Cornell box preset
    camera: Pinhole camera with tent-filtered jitter
    preview: PPM export and Matplotlib preview

Taichi fields are allocated when the subpackages are imported, so call
``ti.init(default_fp=ti.f64, fast_math=False)`` before importing them.
"""

__version__ = "0.1.0"
