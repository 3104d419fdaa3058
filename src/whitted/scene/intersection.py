"""Ray hit record."""

from __future__ import annotations

import math
from dataclasses import dataclass

from whitted.geometry.base import SceneObject


@dataclass(frozen=True)
class Intersection:
    """An object struck by a ray and the distance along the ray to it.

    A distance of exactly zero is valid: a ray that starts on a surface hits
    it immediately.

    Attributes:
        object: The scene object that was hit.
        distance: Non-negative distance along the ray.
    """

    object: SceneObject
    distance: float

    def __post_init__(self) -> None:
        if not isinstance(self.object, SceneObject):
            raise TypeError(f"object must be a SceneObject, got {type(self.object).__name__}")
        if math.isnan(self.distance) or self.distance < 0.0:
            raise ValueError(f"Intersection distance must be non-negative, got {self.distance}")
        object.__setattr__(self, "distance", float(self.distance))
