"""Scene objects and ray-primitive intersection.

Components:
    base: SceneObject capability, ObjectKind and the packed row layout
    sphere: Sphere and the robust ray-sphere test
    plane: Infinite plane
    light_marker: Unshaded sphere drawn at a light's position
    dispatch: Kernel-side dispatch over packed objects
"""

from .base import OBJECT_COLUMNS, ObjectKind, SceneObject
from .light_marker import MARKER_RADIUS, LightMarker
from .plane import Plane
from .sphere import Sphere

__all__ = [
    "SceneObject",
    "ObjectKind",
    "OBJECT_COLUMNS",
    "Sphere",
    "Plane",
    "LightMarker",
    "MARKER_RADIUS",
]
