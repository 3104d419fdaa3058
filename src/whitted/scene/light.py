"""Point light source."""

from __future__ import annotations

from dataclasses import dataclass

from whitted.core.vector import Vec3, as_vec3


@dataclass(frozen=True)
class Light:
    """A point light.

    Attributes:
        position: World-space position of the light.
        color: Linear RGB color (non-negative components).
        intensity: Scalar multiplier applied to color (strictly positive).
    """

    position: Vec3
    color: Vec3 = (1.0, 1.0, 1.0)
    intensity: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", as_vec3(self.position, "position"))
        color = as_vec3(self.color, "color")
        if any(c < 0.0 for c in color):
            raise ValueError(f"Light color components must be non-negative, got {color}")
        object.__setattr__(self, "color", color)
        if not self.intensity > 0.0:
            raise ValueError(f"Light intensity must be positive, got {self.intensity}")
        object.__setattr__(self, "intensity", float(self.intensity))

    @property
    def radiance(self) -> Vec3:
        """color * intensity, the factor applied to every lit surface."""
        return (
            self.color[0] * self.intensity,
            self.color[1] * self.intensity,
            self.color[2] * self.intensity,
        )
