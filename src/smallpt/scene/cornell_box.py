"""Cornell box scene configuration.

This module provides a factory function to create the reference Cornell box
scene built entirely from spheres. Walls are spheres of radius 1e5 whose
surfaces are nearly flat inside the box.

The scene consists of:
- Left wall: yellow-ish diffuse (0.75, 0.75, 0.25)
- Right wall: blue-ish diffuse (0.25, 0.25, 0.75)
- Back wall, floor, ceiling: grey diffuse
- Front wall: grey mirror, behind the camera
- A mirror sphere and a glass sphere resting on the floor
- A large emissive sphere poking through the ceiling as the light

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64, fast_math=False)
    >>> from src.smallpt.scene.cornell_box import create_cornell_box_scene
    >>> from src.smallpt.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_cornell_box_scene()
    >>> setup_camera(camera, 100, 100)
"""

from src.smallpt.camera.pinhole import PinholeCamera
from src.smallpt.scene.manager import MaterialType, SceneManager

# =============================================================================
# Cornell Box Constants
# =============================================================================

# Radius of the spheres standing in for the walls
WALL_RADIUS = 1e5

# Wall colors
LEFT_WALL_ALBEDO = (0.75, 0.75, 0.25)
RIGHT_WALL_ALBEDO = (0.25, 0.25, 0.75)
GREY_WALL_ALBEDO = (0.75, 0.75, 0.75)

# Mirror and glass spheres
OBJECT_RADIUS = 16.5
OBJECT_ALBEDO = (0.999, 0.999, 0.999)
MIRROR_CENTER = (27.0, 16.5, 47.0)
GLASS_CENTER = (73.0, 16.5, 78.0)

# Ceiling light
LIGHT_RADIUS = 600.0
LIGHT_CENTER = (50.0, 681.6 - 0.27, 81.6)
LIGHT_EMISSION = (12.0, 12.0, 12.0)

# Camera
CAMERA_POSITION = (50.0, 52.0, 295.6)
CAMERA_DIRECTION = (0.0, -0.042612, -1.0)

BLACK = (0.0, 0.0, 0.0)


# =============================================================================
# Cornell Box Factory
# =============================================================================


def create_cornell_box_scene() -> tuple[SceneManager, PinholeCamera]:
    """Create the reference nine-sphere Cornell box.

    Clears the current scene storage and adds, in order: left, right, back,
    front, bottom and top walls, the mirror sphere, the glass sphere and
    the light. Sphere order matters for intersection ties.

    Returns:
        A tuple of (SceneManager, PinholeCamera). The camera still needs
        setup_camera() with the image dimensions before rendering.

    Example:
        >>> scene, camera = create_cornell_box_scene()
        >>> scene.get_sphere_count()
        9
        >>> len(scene.get_emitters())
        1
    """
    scene = SceneManager()
    r = WALL_RADIUS

    # Walls
    scene.add_sphere(r, (r + 1.0, 40.8, 81.6), BLACK, LEFT_WALL_ALBEDO, MaterialType.DIFFUSE)
    scene.add_sphere(r, (-r + 99.0, 40.8, 81.6), BLACK, RIGHT_WALL_ALBEDO, MaterialType.DIFFUSE)
    scene.add_sphere(r, (50.0, 40.8, r), BLACK, GREY_WALL_ALBEDO, MaterialType.DIFFUSE)
    scene.add_sphere(r, (50.0, 40.8, -r + 170.0), BLACK, GREY_WALL_ALBEDO, MaterialType.SPECULAR)
    scene.add_sphere(r, (50.0, r, 81.6), BLACK, GREY_WALL_ALBEDO, MaterialType.DIFFUSE)
    scene.add_sphere(r, (50.0, -r + 81.6, 81.6), BLACK, GREY_WALL_ALBEDO, MaterialType.DIFFUSE)

    # Objects
    scene.add_sphere(OBJECT_RADIUS, MIRROR_CENTER, BLACK, OBJECT_ALBEDO, MaterialType.SPECULAR)
    scene.add_sphere(OBJECT_RADIUS, GLASS_CENTER, BLACK, OBJECT_ALBEDO, MaterialType.DIELECTRIC)

    # Light
    scene.add_sphere(LIGHT_RADIUS, LIGHT_CENTER, LIGHT_EMISSION, BLACK, MaterialType.DIFFUSE)

    camera = PinholeCamera(position=CAMERA_POSITION, direction=CAMERA_DIRECTION)
    return scene, camera
