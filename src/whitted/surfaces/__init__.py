"""Surface models.

Components:
    base: Surface capability, SurfaceKind and the packed row layout
    basic: Uniform surface
    checkerboard: Two-color XZ checkerboard
    dispatch: Kernel-side evaluation of packed surfaces

Light markers carry no surface at all (None); they are never shaded.
"""

from .base import SURFACE_COLUMNS, Surface, SurfaceKind
from .basic import BasicSurface
from .checkerboard import CheckerboardSurface

__all__ = [
    "Surface",
    "SurfaceKind",
    "SURFACE_COLUMNS",
    "BasicSurface",
    "CheckerboardSurface",
]
