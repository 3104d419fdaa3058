"""Uniform surface with constant reflective properties.

The defaults reproduce the stock surface of the interactive renderer: a
white, half-mirrored, slightly glossy finish.

Example:
    >>> from whitted.surfaces.basic import BasicSurface
    >>> matte_red = BasicSurface(reflectivity=0.0, diffuse_color=(0.8, 0.1, 0.1))
"""

from __future__ import annotations

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
class BasicSurface(Surface):
    """A surface whose response does not depend on position.

    Attributes:
        reflectivity: Fraction of the mirror reflection kept, in [0, 1].
        diffuse_color: Diffuse RGB color.
        specular_color: Specular RGB color.
        shininess: Specular exponent (positive).
    """

    reflectivity: float = 0.5
    diffuse_color: Vec3 = (1.0, 1.0, 1.0)
    specular_color: Vec3 = (0.1, 0.1, 0.1)
    shininess: float = 200.0

    kind = SurfaceKind.BASIC

    def __post_init__(self) -> None:
        object.__setattr__(self, "reflectivity", validate_reflectivity(self.reflectivity))
        object.__setattr__(
            self, "diffuse_color", validate_color(self.diffuse_color, "diffuse_color")
        )
        object.__setattr__(
            self, "specular_color", validate_color(self.specular_color, "specular_color")
        )
        object.__setattr__(self, "shininess", validate_shininess(self.shininess))

    def reflect(self, position: Sequence[float]) -> float:
        return self.reflectivity

    def diffuse(self, position: Sequence[float]) -> Vec3:
        return self.diffuse_color

    def specular(self, position: Sequence[float]) -> Vec3:
        return self.specular_color

    def pack(self) -> npt.NDArray[np.float32]:
        return self._packed_row(self.reflectivity, self.diffuse_color, self.specular_color)
