"""Validated scene construction and scene file support.

The SceneManager is the host-side entry point for building a scene. It
checks every sphere before it reaches the Taichi storage in
``src.smallpt.scene.intersection``, keeps a Python-side record of what was
added, and converts scenes to and from plain dictionaries and JSON files.

Scene file format:

    {
      "spheres": [
        {"radius": 16.5, "center": [27, 16.5, 47],
         "emission": [0, 0, 0], "albedo": [0.999, 0.999, 0.999],
         "material": "specular"}
      ]
    }

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64, fast_math=False)
    >>> from src.smallpt.scene.manager import MaterialType, SceneManager
    >>> scene = SceneManager()
    >>> scene.add_sphere(16.5, (27, 16.5, 47), (0, 0, 0), (0.999, 0.999, 0.999),
    ...                  MaterialType.SPECULAR)
    0
"""

import json
import math
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Any

from src.smallpt.scene.intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
)


class MaterialType(IntEnum):
    """Surface behaviour used to pick the scattering strategy at a hit."""

    DIFFUSE = 0
    SPECULAR = 1
    DIELECTRIC = 2


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        sphere_index: The index in the sphere storage field.
        radius: The radius of the sphere.
        center: The center of the sphere.
        emission: Emitted radiance.
        albedo: Per-channel reflectance.
        material: The material behaviour.
    """

    sphere_index: int
    radius: float
    center: tuple[float, float, float]
    emission: tuple[float, float, float]
    albedo: tuple[float, float, float]
    material: MaterialType


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        spheres: List of sphere configurations.
    """

    spheres: list[dict[str, Any]] = field(default_factory=list)


def _as_triple(value: Any, name: str) -> tuple[float, float, float]:
    """Convert a 3-element sequence into a float tuple."""
    try:
        x, y, z = value
        triple = (float(x), float(y), float(z))
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be a sequence of three numbers, got {value!r}") from e
    if not all(math.isfinite(c) for c in triple):
        raise ValueError(f"{name} must be finite, got {triple}")
    return triple


def parse_material(value: Any) -> MaterialType:
    """Resolve a material given as a MaterialType, integer or name.

    Raises:
        ValueError: If the value does not name a known material.
    """
    if isinstance(value, MaterialType):
        return value
    if isinstance(value, str):
        try:
            return MaterialType[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown material type: {value}") from None
    try:
        return MaterialType(value)
    except ValueError:
        raise ValueError(f"Unknown material type: {value}") from None


class SceneManager:
    """Scene builder that validates spheres before storing them.

    Attributes:
        spheres: List of SphereInfo for all spheres in the scene.

    Example:
        >>> scene = SceneManager()
        >>> scene.add_sphere(600, (50, 681.33, 81.6), (12, 12, 12), (0, 0, 0),
        ...                  MaterialType.DIFFUSE)
        0
        >>> scene.get_sphere_count()
        1
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.spheres: list[SphereInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear the Taichi storage and local tracking."""
        clear_scene()
        self.spheres.clear()

    def clear(self) -> None:
        """Remove every sphere from the scene."""
        self._clear_all()

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_sphere(
        self,
        radius: float,
        center: tuple[float, float, float],
        emission: tuple[float, float, float],
        albedo: tuple[float, float, float],
        material: MaterialType | int | str,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            radius: The radius of the sphere (positive, finite).
            center: The center point as (x, y, z).
            emission: Emitted radiance as (R, G, B), each component >= 0.
            albedo: Reflectance as (R, G, B), each component in [0, 1].
            material: Material behaviour (enum, integer value or name).

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If any value is out of range.
        """
        try:
            radius_value = float(radius)
        except (TypeError, ValueError) as e:
            raise ValueError(f"radius must be a number, got {radius!r}") from e
        if not math.isfinite(radius_value) or radius_value <= 0.0:
            raise ValueError(f"radius must be positive and finite, got {radius}")

        center_t = _as_triple(center, "center")
        emission_t = _as_triple(emission, "emission")
        albedo_t = _as_triple(albedo, "albedo")
        material_t = parse_material(material)

        if any(c < 0.0 for c in emission_t):
            raise ValueError(f"emission components must be non-negative, got {emission_t}")
        if any(c < 0.0 or c > 1.0 for c in albedo_t):
            raise ValueError(f"albedo components must be in [0, 1], got {albedo_t}")

        sphere_index = add_sphere(radius_value, center_t, emission_t, albedo_t, int(material_t))

        self.spheres.append(
            SphereInfo(
                sphere_index=sphere_index,
                radius=radius_value,
                center=center_t,
                emission=emission_t,
                albedo=albedo_t,
                material=material_t,
            )
        )
        return sphere_index

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene storage."""
        return get_sphere_count()

    def get_sphere_info(self, sphere_index: int) -> SphereInfo | None:
        """Get the recorded information for a sphere.

        Returns:
            The SphereInfo, or None if the index is out of range.
        """
        if 0 <= sphere_index < len(self.spheres):
            return self.spheres[sphere_index]
        return None

    def get_emitters(self) -> list[SphereInfo]:
        """Return the spheres with non-zero emission."""
        return [s for s in self.spheres if any(c > 0.0 for c in s.emission)]

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        config = SceneConfig()
        for sphere in self.spheres:
            config.spheres.append(
                {
                    "radius": sphere.radius,
                    "center": list(sphere.center),
                    "emission": list(sphere.emission),
                    "albedo": list(sphere.albedo),
                    "material": sphere.material.name.lower(),
                }
            )
        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene first. Missing emission defaults to black.

        Raises:
            ValueError: If the configuration contains invalid data.
        """
        self.clear()
        for index, sphere_config in enumerate(config.spheres):
            missing = [k for k in ("radius", "center", "albedo", "material") if k not in sphere_config]
            if missing:
                raise ValueError(f"Sphere {index} is missing {', '.join(missing)}")
            self.add_sphere(
                sphere_config["radius"],
                sphere_config["center"],
                sphere_config.get("emission", [0.0, 0.0, 0.0]),
                sphere_config["albedo"],
                sphere_config["material"],
            )

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        return {"spheres": self.to_config().spheres}

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary with a 'spheres' key."""
        if not isinstance(data, dict):
            raise ValueError("Scene data must be a mapping with a 'spheres' list")
        self.from_config(SceneConfig(spheres=list(data.get("spheres", []))))

    def save_json(self, path: str | Path) -> None:
        """Write the scene to a JSON file."""
        Path(path).write_text(json.dumps(self.to_dict(), indent=2) + "\n")

    def load_json(self, path: str | Path) -> None:
        """Load the scene from a JSON file.

        Raises:
            ValueError: If the file is not valid JSON or holds invalid data.
        """
        try:
            data = json.loads(Path(path).read_text())
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid scene file {path}: {e}") from e
        self.from_dict(data)

    @staticmethod
    def get_max_spheres() -> int:
        """Get the maximum number of spheres supported."""
        return MAX_SPHERES
