"""Look-at camera with yaw/pitch rotation and relative movement.

The camera keeps its initial facing and accumulates yaw and pitch angles
from interactive input. The current facing is always recomputed from the
initial facing (pitch first, then yaw) so rotation errors never accumulate.

The view plane sits at unit distance along the facing direction:

    direction = normalize(facing + sx * right + sy * up)
    sx = -1 + 2 * x / width
    sy =  1 - 2 * y / height

Raster Y grows downward while world Y grows upward, hence the flipped sign
of sy. The basis is

    right = normalize(cross(world_up, facing)) * aspect_ratio
    up    = normalize(cross(facing, right))

A background trace must not observe camera changes made while it runs, so
tracing always works on an immutable CameraState taken with snapshot().

Example:
    >>> from whitted.camera import Camera
    >>> camera = Camera(position=(0.0, 0.0, 4.0), look_at=(0.0, 0.0, 0.0))
    >>> camera.rotate(0.1, 0.0)
    >>> camera.move(0.5, 0.0)
    >>> frozen = camera.snapshot()
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from whitted.core.ray import Ray
from whitted.core.vector import (
    ZERO_LENGTH,
    Vec3,
    as_vec3,
    cross,
    normalize,
    rotate_about_axis,
    to_array,
)

WORLD_UP: Vec3 = (0.0, 1.0, 0.0)

# Pitch keeps the facing this far (radians) away from straight up or down
PITCH_EPSILON = 1e-3
MAX_ELEVATION = math.pi / 2.0 - PITCH_EPSILON


def _basis(facing: Sequence[float], aspect_ratio: float) -> tuple[Vec3, Vec3]:
    """Compute (right, up) for a facing direction."""
    right = normalize(cross(WORLD_UP, facing)) * aspect_ratio
    up = normalize(cross(facing, right))
    return as_vec3(right, "right"), as_vec3(up, "up")


def _raster_direction(
    facing: Vec3, right: Vec3, up: Vec3, x: float, y: float, width: int, height: int
) -> Vec3:
    if width <= 0 or height <= 0:
        raise ValueError(f"Raster size must be positive, got {width}x{height}")
    sx = -1.0 + 2.0 * x / width
    sy = 1.0 - 2.0 * y / height
    direction = to_array(facing) + sx * to_array(right) + sy * to_array(up)
    return as_vec3(normalize(direction), "direction")


@dataclass(frozen=True)
class CameraState:
    """Immutable snapshot of a camera's position and view basis.

    Attributes:
        position: Eye position.
        facing: Unit view direction.
        right: Right vector, scaled by the aspect ratio.
        up: Unit up vector of the view plane.
    """

    position: Vec3
    facing: Vec3
    right: Vec3
    up: Vec3

    def ray_for_raster(self, x: float, y: float, width: int, height: int) -> Ray:
        """Primary ray through raster position (x, y) of a width x height image.

        Raises:
            ValueError: If width or height is not positive.
        """
        direction = _raster_direction(self.facing, self.right, self.up, x, y, width, height)
        return Ray(origin=self.position, direction=direction)

    def as_array(self) -> npt.NDArray[np.float32]:
        """Pack as a (4, 3) float32 array: position, facing, right, up."""
        return np.array([self.position, self.facing, self.right, self.up], dtype=np.float32)

    def snapshot(self) -> CameraState:
        return self


class Camera:
    """Interactive camera.

    Args:
        position: Eye position.
        look_at: Point the camera initially looks at.
        aspect_ratio: Width divided by height of the target image.

    Raises:
        ValueError: If look_at equals position, the initial facing is parallel
            to the world up axis, or aspect_ratio is not positive.
    """

    def __init__(
        self,
        position: Sequence[float],
        look_at: Sequence[float],
        aspect_ratio: float = 1.0,
    ):
        if not aspect_ratio > 0.0:
            raise ValueError(f"aspect_ratio must be positive, got {aspect_ratio}")

        position_v = as_vec3(position, "position")
        offset = to_array(as_vec3(look_at, "look_at")) - to_array(position_v)
        if np.linalg.norm(offset) < ZERO_LENGTH:
            raise ValueError("look_at must differ from position")
        facing = normalize(offset)
        if np.linalg.norm(cross(WORLD_UP, facing)) < 1e-6:
            raise ValueError("Initial facing must not be parallel to the world up axis")

        self._position = position_v
        self._initial_facing = as_vec3(facing, "facing")
        self._aspect_ratio = float(aspect_ratio)
        self._yaw = 0.0
        self._pitch = 0.0
        self._pitch_axis = as_vec3(normalize(cross(facing, WORLD_UP)), "pitch_axis")
        # Elevation of the initial facing above the horizon
        self._initial_elevation = math.asin(max(-1.0, min(1.0, self._initial_facing[1])))
        self._update_basis()

    def _update_basis(self) -> None:
        facing = rotate_about_axis(self._initial_facing, self._pitch_axis, self._pitch)
        facing = rotate_about_axis(facing, WORLD_UP, self._yaw)
        self._facing = as_vec3(normalize(facing), "facing")
        self._right, self._up = _basis(self._facing, self._aspect_ratio)

    @property
    def position(self) -> Vec3:
        return self._position

    @property
    def facing(self) -> Vec3:
        return self._facing

    @property
    def right(self) -> Vec3:
        return self._right

    @property
    def up(self) -> Vec3:
        return self._up

    @property
    def yaw(self) -> float:
        return self._yaw

    @property
    def pitch(self) -> float:
        return self._pitch

    @property
    def aspect_ratio(self) -> float:
        return self._aspect_ratio

    def ray_for_raster(self, x: float, y: float, width: int, height: int) -> Ray:
        """Primary ray through raster position (x, y) of a width x height image."""
        direction = _raster_direction(
            self._facing, self._right, self._up, x, y, width, height
        )
        return Ray(origin=self._position, direction=direction)

    def rotate(self, yaw_delta: float, pitch_delta: float) -> None:
        """Accumulate yaw and pitch (radians).

        Positive yaw turns left around the world up axis, positive pitch looks
        up. Pitch is clamped so the view never reaches straight up or down.
        """
        self._yaw += yaw_delta
        pitch = self._pitch + pitch_delta
        low = -MAX_ELEVATION - self._initial_elevation
        high = MAX_ELEVATION - self._initial_elevation
        self._pitch = min(max(pitch, low), high)
        self._update_basis()

    def move(self, forward: float, strafe: float) -> None:
        """Translate by facing * forward + right * strafe.

        The right vector carries the aspect ratio, so strafe steps scale with it.
        """
        position = (
            to_array(self._position)
            + to_array(self._facing) * forward
            + to_array(self._right) * strafe
        )
        self._position = as_vec3(position, "position")

    def clone(self) -> Camera:
        """Independent copy with identical position and rotation state."""
        copy = Camera.__new__(Camera)
        copy.__dict__.update(self.__dict__)
        return copy

    def snapshot(self) -> CameraState:
        """Immutable view of the current position and basis."""
        return CameraState(
            position=self._position, facing=self._facing, right=self._right, up=self._up
        )

    def __repr__(self) -> str:
        return (
            f"Camera(position={self._position}, facing={self._facing}, "
            f"yaw={self._yaw:.4f}, pitch={self._pitch:.4f})"
        )
