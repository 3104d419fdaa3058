"""Demo scene configuration.

A small scene that exercises every feature of the tracer:
- A checkerboard ground plane
- A large mirror-like sphere in the middle
- Two smaller colored spheres
- Two lights (white key light, warm fill light)

The camera sits above and in front of the spheres, looking at the middle
sphere.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.demo import DemoSceneParams, create_demo_scene
    >>> scene, camera = create_demo_scene(DemoSceneParams(ground_height=-1.5))
"""

from __future__ import annotations

from dataclasses import dataclass

from whitted.camera.camera import Camera
from whitted.core.vector import Vec3
from whitted.geometry.light_marker import LightMarker
from whitted.geometry.plane import Plane
from whitted.geometry.sphere import Sphere
from whitted.scene.light import Light
from whitted.scene.scene import Scene
from whitted.surfaces.basic import BasicSurface
from whitted.surfaces.checkerboard import CheckerboardSurface


@dataclass
class DemoSceneParams:
    """Parameters for configuring the demo scene.

    Attributes:
        ground_height: Y coordinate of the ground plane.
        mirror_reflectivity: Reflectivity of the middle sphere.
        key_light_position: Position of the white key light.
        key_light_intensity: Intensity of the key light.
        fill_light_position: Position of the warm fill light.
        fill_light_color: RGB color of the fill light.
        camera_position: Camera eye position.
        aspect_ratio: Width divided by height of the output image.
    """

    ground_height: float = -1.0
    mirror_reflectivity: float = 0.8
    key_light_position: Vec3 = (-2.0, 4.0, 3.0)
    key_light_intensity: float = 1.0
    fill_light_position: Vec3 = (3.0, 2.5, 1.0)
    fill_light_color: Vec3 = (0.6, 0.5, 0.4)
    camera_position: Vec3 = (0.0, 1.0, 6.0)
    aspect_ratio: float = 4.0 / 3.0


def create_demo_scene(
    params: DemoSceneParams | None = None,
    *,
    show_light_sources: bool = False,
) -> tuple[Scene, Camera]:
    """Create the demo scene and a camera looking at it.

    Args:
        params: Scene parameters. Uses defaults if None.
        show_light_sources: Add a LightMarker for every light.

    Returns:
        Tuple of (scene, camera).
    """
    if params is None:
        params = DemoSceneParams()

    scene = Scene()

    ground = Plane(
        normal=(0.0, 1.0, 0.0),
        offset=params.ground_height,
        surface=CheckerboardSurface(reflectivity=0.3),
    )
    mirror = Sphere(
        center=(0.0, params.ground_height + 1.0, 0.0),
        radius=1.0,
        surface=BasicSurface(
            reflectivity=params.mirror_reflectivity,
            diffuse_color=(0.2, 0.2, 0.25),
            specular_color=(1.0, 1.0, 1.0),
            shininess=250.0,
        ),
    )
    red = Sphere(
        center=(-2.0, params.ground_height + 0.6, 1.0),
        radius=0.6,
        surface=BasicSurface(reflectivity=0.1, diffuse_color=(0.8, 0.15, 0.1)),
    )
    blue = Sphere(
        center=(1.8, params.ground_height + 0.5, 1.5),
        radius=0.5,
        surface=BasicSurface(reflectivity=0.2, diffuse_color=(0.1, 0.3, 0.85)),
    )
    scene.add_all(ground, mirror, red, blue)

    lights = [
        Light(position=params.key_light_position, intensity=params.key_light_intensity),
        Light(position=params.fill_light_position, color=params.fill_light_color),
    ]
    for light in lights:
        scene.add(light)
        if show_light_sources:
            scene.add(LightMarker(light))

    camera = Camera(
        position=params.camera_position,
        look_at=mirror.center,
        aspect_ratio=params.aspect_ratio,
    )
    return scene, camera
