"""Surface capability shared by all surface models.

A surface answers four questions about a point on an object: how much of the
mirror reflection it keeps, its diffuse color, its specular color and its
shininess exponent. Kernels cannot call Python methods, so every surface also
packs itself into one row of a flat float32 table whose layout is fixed by the
COL_* constants below; surfaces.dispatch reads that row back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import IntEnum

import numpy as np
import numpy.typing as npt

from whitted.core.vector import Vec3, as_vec3


class SurfaceKind(IntEnum):
    """Enumeration of surface models, used for kernel-side dispatch."""

    BASIC = 1
    CHECKERBOARD = 2


# Packed surface row layout
COL_KIND = 0
COL_REFLECTIVITY = 1
COL_SHININESS = 2
COL_DIFFUSE = 3  # 3 columns
COL_SPECULAR = 6  # 3 columns
COL_ALT_DIFFUSE = 9  # 3 columns
SURFACE_COLUMNS = 12


def validate_color(color: Sequence[float], name: str) -> Vec3:
    """Check that a color has three finite, non-negative components.

    Raises:
        ValueError: If any component is negative or the shape is wrong.
    """
    rgb = as_vec3(color, name)
    if any(c < 0.0 for c in rgb):
        raise ValueError(f"{name} components must be non-negative, got {rgb}")
    return rgb


def validate_reflectivity(reflectivity: float) -> float:
    """Check that a mirror reflectivity lies in [0, 1]."""
    if not 0.0 <= reflectivity <= 1.0:
        raise ValueError(f"reflectivity must be in [0, 1], got {reflectivity}")
    return float(reflectivity)


def validate_shininess(shininess: float) -> float:
    """Check that a shininess exponent is strictly positive."""
    if not shininess > 0.0:
        raise ValueError(f"shininess must be positive, got {shininess}")
    return float(shininess)


class Surface(ABC):
    """Material response of a scene object at a world position."""

    kind: SurfaceKind

    @property
    @abstractmethod
    def shininess(self) -> float:
        """Specular exponent (constant over the surface)."""

    @abstractmethod
    def reflect(self, position: Sequence[float]) -> float:
        """Mirror reflectivity in [0, 1] at position."""

    @abstractmethod
    def diffuse(self, position: Sequence[float]) -> Vec3:
        """Diffuse color at position."""

    @abstractmethod
    def specular(self, position: Sequence[float]) -> Vec3:
        """Specular color at position."""

    @abstractmethod
    def pack(self) -> npt.NDArray[np.float32]:
        """Pack the surface parameters into one SURFACE_COLUMNS row."""

    def _packed_row(
        self,
        reflectivity: float,
        diffuse: Vec3,
        specular: Vec3,
        alt_diffuse: Vec3 = (0.0, 0.0, 0.0),
    ) -> npt.NDArray[np.float32]:
        row = np.zeros(SURFACE_COLUMNS, dtype=np.float32)
        row[COL_KIND] = int(self.kind)
        row[COL_REFLECTIVITY] = reflectivity
        row[COL_SHININESS] = self.shininess
        row[COL_DIFFUSE : COL_DIFFUSE + 3] = diffuse
        row[COL_SPECULAR : COL_SPECULAR + 3] = specular
        row[COL_ALT_DIFFUSE : COL_ALT_DIFFUSE + 3] = alt_diffuse
        return row
