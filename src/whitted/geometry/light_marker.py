"""Visual stand-in for a point light.

A LightMarker is a small sphere placed at a light's position so the light
shows up in renders. It is never shaded: a ray that hits it returns the
light's raw color, and it does not cast shadows.
"""

from __future__ import annotations

from collections.abc import Sequence

from whitted.core.vector import Vec3
from whitted.geometry.base import ObjectKind, SceneObject
from whitted.scene.light import Light

# Radius of the sphere drawn around a light
MARKER_RADIUS = 0.1


class LightMarker(SceneObject):
    """Small unshaded sphere at the position of a light.

    Args:
        light: The light to visualize.

    Raises:
        TypeError: If light is not a Light.
    """

    kind = ObjectKind.LIGHT_MARKER

    def __init__(self, light: Light):
        if not isinstance(light, Light):
            raise TypeError(f"light must be a Light, got {type(light).__name__}")
        self._light = light

    @property
    def light(self) -> Light:
        return self._light

    @property
    def surface(self) -> None:
        """Markers are never shaded."""
        return None

    def geometry(self) -> tuple[Vec3, float]:
        return self._light.position, MARKER_RADIUS

    def emission(self) -> Vec3:
        return self._light.color

    def normal(self, position: Sequence[float]) -> Vec3:
        raise TypeError("LightMarker has no surface normal; markers are never shaded")

    def __repr__(self) -> str:
        return f"LightMarker(light={self._light!r})"
