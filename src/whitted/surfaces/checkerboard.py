"""Checkerboard surface on the XZ plane.

The diffuse color alternates between two colors on unit squares of the XZ
plane: a point takes even_color when floor(x) + floor(z) is even and
odd_color otherwise. Meant for ground planes; on other geometry the pattern
is still evaluated from the world X and Z coordinates.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from whitted.core.vector import Vec3
from whitted.surfaces.base import (
    Surface,
    SurfaceKind,
    validate_color,
    validate_reflectivity,
    validate_shininess,
)


@dataclass(frozen=True)
class CheckerboardSurface(Surface):
    """Black and white (by default) checkerboard.

    Attributes:
        reflectivity: Fraction of the mirror reflection kept, in [0, 1].
        specular_color: Specular RGB color.
        shininess: Specular exponent (positive).
        even_color: Diffuse color of squares where floor(x) + floor(z) is even.
        odd_color: Diffuse color of the remaining squares.
    """

    reflectivity: float = 0.5
    specular_color: Vec3 = (1.0, 1.0, 1.0)
    shininess: float = 150.0
    even_color: Vec3 = (1.0, 1.0, 1.0)
    odd_color: Vec3 = (0.0, 0.0, 0.0)

    kind = SurfaceKind.CHECKERBOARD

    def __post_init__(self) -> None:
        object.__setattr__(self, "reflectivity", validate_reflectivity(self.reflectivity))
        object.__setattr__(
            self, "specular_color", validate_color(self.specular_color, "specular_color")
        )
        object.__setattr__(self, "shininess", validate_shininess(self.shininess))
        object.__setattr__(self, "even_color", validate_color(self.even_color, "even_color"))
        object.__setattr__(self, "odd_color", validate_color(self.odd_color, "odd_color"))

    def reflect(self, position: Sequence[float]) -> float:
        return self.reflectivity

    def diffuse(self, position: Sequence[float]) -> Vec3:
        if (math.floor(position[0]) + math.floor(position[2])) % 2 == 0:
            return self.even_color
        return self.odd_color

    def specular(self, position: Sequence[float]) -> Vec3:
        return self.specular_color

    def pack(self) -> npt.NDArray[np.float32]:
        return self._packed_row(
            self.reflectivity, self.even_color, self.specular_color, self.odd_color
        )
