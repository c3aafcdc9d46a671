"""Materials module for surface scattering.

Components:
    diffuse: Cosine-weighted hemisphere sampling
    specular: Ideal mirror reflection
    dielectric: Glass refraction with Schlick Fresnel and total internal reflection

All scattering routines are Taichi functions. Diffuse sampling threads the
random state explicitly and returns the updated state.
"""

from .dielectric import (
    AIR_IOR,
    GLASS_IOR,
    fresnel_r0,
    reflection_probability,
    refract_dielectric,
    schlick_reflectance,
)
from .diffuse import build_onb, cosine_direction, sample_diffuse
from .specular import scatter_specular

__all__ = [
    # Diffuse
    "build_onb",
    "cosine_direction",
    "sample_diffuse",
    # Specular
    "scatter_specular",
    # Dielectric
    "AIR_IOR",
    "GLASS_IOR",
    "fresnel_r0",
    "schlick_reflectance",
    "reflection_probability",
    "refract_dielectric",
]
