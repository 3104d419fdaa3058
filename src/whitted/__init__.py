"""Whitted-style raytracer built on Taichi kernels.

This package traces a scene of spheres, planes and point lights from a
yaw/pitch camera, with support for:
- Phong-like direct lighting with hard and soft (jittered) shadows
- Bounded mirror reflection recursion
- Coarse raster blocks for cheap interactive frames
- Cooperative cancellation and a concurrent background refinement pass

Subpackages:
    core: Rays, shading kernels, the tracing driver and the dual-pass renderer
    geometry: Scene object primitives and their intersection routines
    surfaces: Surface models (basic, checkerboard)
    scene: Scene container, lights, intersections and a demo scene
    camera: First-person camera with ray generation
    preview: Image export utilities
"""

__version__ = "0.1.0"
