"""Camera module for view and ray generation.

Components:
    camera: Interactive look-at camera and its immutable snapshot

Ray generation maps raster coordinates to a [-1, 1] view plane:
    sx = -1 at the left edge, +1 at the right edge
    sy = +1 at the top edge, -1 at the bottom edge
"""

from .camera import WORLD_UP, Camera, CameraState

__all__ = [
    "Camera",
    "CameraState",
    "WORLD_UP",
]
