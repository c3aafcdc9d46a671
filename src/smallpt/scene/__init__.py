"""Scene module for sphere storage and ray-scene queries.

Components:
    intersection: Taichi sphere storage and nearest-hit search
    manager: Validated scene builder with JSON scene files
    cornell_box: The reference nine-sphere Cornell box and its camera
"""

from .cornell_box import create_cornell_box_scene
from .intersection import (
    MAX_SPHERES,
    SceneHitRecord,
    add_sphere,
    clear_scene,
    get_sphere,
    get_sphere_count,
    intersect_scene,
    trace_nearest,
)
from .manager import (
    MaterialType,
    SceneConfig,
    SceneManager,
    SphereInfo,
    parse_material,
)

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "add_sphere",
    "clear_scene",
    "get_sphere",
    "get_sphere_count",
    "intersect_scene",
    "trace_nearest",
    "MAX_SPHERES",
    # Manager module
    "SceneManager",
    "MaterialType",
    "SphereInfo",
    "SceneConfig",
    "parse_material",
    # Cornell box module
    "create_cornell_box_scene",
]
