"""Scene module for scene management and hit records.

Components:
    light: Point light source
    intersection: Ray hit record
    scene: Scene container and ray queries
    packing: Flat float32 tables consumed by the tracing kernels
    demo: Ready-made scene used by the example script

Scene data is handed to kernels as NumPy arrays (one table each for
objects, surfaces and lights), rebuilt only when the scene changes.
"""

from .light import Light
from .intersection import Intersection
from .packing import LIGHT_COLUMNS, PackedScene, pack_scene
from .scene import Scene

__all__ = [
    "Light",
    "Intersection",
    "Scene",
    "PackedScene",
    "pack_scene",
    "LIGHT_COLUMNS",
]
