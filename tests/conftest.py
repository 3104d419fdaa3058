"""Pytest configuration for raytracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    from whitted.runtime import init_taichi

    init_taichi("cpu", random_seed=42)
    yield


@pytest.fixture
def matte_white():
    """Diffuse-only white surface: no mirror, no specular highlight."""
    from whitted.surfaces import BasicSurface

    return BasicSurface(
        reflectivity=0.0,
        diffuse_color=(1.0, 1.0, 1.0),
        specular_color=(0.0, 0.0, 0.0),
    )


@pytest.fixture
def sphere_scene(matte_white):
    """Unit sphere at the origin lit from (0, 2, 2), camera at (0, 0, 4)."""
    from whitted.camera import Camera
    from whitted.geometry import Sphere
    from whitted.scene import Light, Scene

    scene = Scene()
    scene.add(Light(position=(0.0, 2.0, 2.0)))
    scene.add(Sphere(center=(0.0, 0.0, 0.0), radius=1.0, surface=matte_white))
    camera = Camera(position=(0.0, 0.0, 4.0), look_at=(0.0, 0.0, 0.0))
    return scene, camera


@pytest.fixture
def mirror_box():
    """Closed box of perfect mirrors around the origin with one light inside."""
    from whitted.geometry import Plane
    from whitted.scene import Light, Scene
    from whitted.surfaces import BasicSurface

    mirror = BasicSurface(
        reflectivity=1.0,
        diffuse_color=(0.2, 0.2, 0.2),
        specular_color=(0.1, 0.1, 0.1),
    )
    scene = Scene()
    for axis in range(3):
        for sign in (1.0, -1.0):
            normal = [0.0, 0.0, 0.0]
            # Normals point into the box
            normal[axis] = sign
            scene.add(Plane(normal=normal, offset=-2.0, surface=mirror))
    scene.add(Light(position=(0.5, 1.0, 0.5)))
    return scene
