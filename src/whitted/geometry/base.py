"""Scene object capability and packed kernel layout.

Every scene object answers two geometric queries: the distance along a ray
to its nearest entry point, and the outward unit normal at a point on its
surface. It also carries an optional Surface (light markers have none).

For kernels, each object packs itself into one row of a float32 table:

    [kind, surface_index, vx, vy, vz, scalar, ex, ey, ez]

where (vx, vy, vz) and scalar are the center and radius of a sphere or the
normal and offset of a plane, and (ex, ey, ez) is the raw color a light
marker returns when hit.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import IntEnum
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from whitted.core.vector import Vec3

if TYPE_CHECKING:
    from whitted.core.ray import Ray
    from whitted.surfaces.base import Surface


class ObjectKind(IntEnum):
    """Enumeration of scene object types, used for kernel-side dispatch."""

    SPHERE = 0
    PLANE = 1
    LIGHT_MARKER = 2


# Packed object row layout
COL_KIND = 0
COL_SURFACE = 1
COL_VECTOR = 2  # 3 columns
COL_SCALAR = 5
COL_EMISSION = 6  # 3 columns
OBJECT_COLUMNS = 9


class SceneObject(ABC):
    """A geometric entity that can be placed in a Scene.

    Attributes:
        kind: Kernel dispatch tag.
        surface: The surface used to shade this object, or None if the
            object is never shaded.
    """

    kind: ObjectKind
    surface: Surface | None

    @abstractmethod
    def geometry(self) -> tuple[Vec3, float]:
        """The (vector, scalar) pair describing the primitive's shape."""

    def emission(self) -> Vec3:
        """Raw color returned when the object short-circuits shading."""
        return (0.0, 0.0, 0.0)

    def pack(self, surface_index: int = -1) -> npt.NDArray[np.float32]:
        """Pack the object into one OBJECT_COLUMNS row.

        Args:
            surface_index: Row of this object's surface in the packed surface
                table, or -1 when the object has no surface.
        """
        vector, scalar = self.geometry()
        row = np.zeros(OBJECT_COLUMNS, dtype=np.float32)
        row[COL_KIND] = int(self.kind)
        row[COL_SURFACE] = surface_index
        row[COL_VECTOR : COL_VECTOR + 3] = vector
        row[COL_SCALAR] = scalar
        row[COL_EMISSION : COL_EMISSION + 3] = self.emission()
        return row

    def intersect(self, ray: Ray) -> float | None:
        """Distance along the ray to the nearest entry point, or None.

        Runs the same intersection routine the tracing kernels use.
        """
        from whitted.geometry.dispatch import intersect_packed

        return intersect_packed(self.pack(), ray)

    def normal(self, position: Sequence[float]) -> Vec3:
        """Outward unit normal at a point assumed to lie on the surface."""
        from whitted.geometry.dispatch import normal_packed

        return normal_packed(self.pack(), position)
