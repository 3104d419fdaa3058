"""Flatten a scene into the float32 tables the tracing kernels read.

Three tables are produced:

    objects:  (N, OBJECT_COLUMNS)  one row per SceneObject (see geometry.base)
    surfaces: (S, SURFACE_COLUMNS) one row per distinct Surface instance
    lights:   (L, LIGHT_COLUMNS)   [px, py, pz, r, g, b, intensity]

Every table has at least one row so that empty scenes still produce valid
kernel arguments; the real row counts travel alongside.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from whitted.geometry.base import OBJECT_COLUMNS, SceneObject
from whitted.scene.light import Light
from whitted.surfaces.base import SURFACE_COLUMNS

# Packed light row layout
LIGHT_POSITION = 0  # 3 columns
LIGHT_COLOR = 3  # 3 columns
LIGHT_INTENSITY = 6
LIGHT_COLUMNS = 7


@dataclass(frozen=True)
class PackedScene:
    """Kernel-ready tables for one revision of a scene.

    Attributes:
        objects: Packed object rows.
        num_objects: Number of valid object rows.
        surfaces: Packed surface rows referenced by the objects' surface index.
        lights: Packed light rows.
        num_lights: Number of valid light rows.
    """

    objects: npt.NDArray[np.float32]
    num_objects: int
    surfaces: npt.NDArray[np.float32]
    lights: npt.NDArray[np.float32]
    num_lights: int


def pack_light(light: Light) -> npt.NDArray[np.float32]:
    """Pack a light into one LIGHT_COLUMNS row."""
    row = np.zeros(LIGHT_COLUMNS, dtype=np.float32)
    row[LIGHT_POSITION : LIGHT_POSITION + 3] = light.position
    row[LIGHT_COLOR : LIGHT_COLOR + 3] = light.color
    row[LIGHT_INTENSITY] = light.intensity
    return row


def pack_scene(objects: Iterable[SceneObject], lights: Iterable[Light]) -> PackedScene:
    """Pack objects and lights into kernel tables.

    Surfaces shared by several objects are packed once.
    """
    object_rows = []
    surface_rows = []
    surface_index: dict[int, int] = {}

    for obj in objects:
        index = -1
        if obj.surface is not None:
            key = id(obj.surface)
            if key not in surface_index:
                surface_index[key] = len(surface_rows)
                surface_rows.append(obj.surface.pack())
            index = surface_index[key]
        object_rows.append(obj.pack(index))

    light_rows = [pack_light(light) for light in lights]

    return PackedScene(
        objects=_stack(object_rows, OBJECT_COLUMNS),
        num_objects=len(object_rows),
        surfaces=_stack(surface_rows, SURFACE_COLUMNS),
        lights=_stack(light_rows, LIGHT_COLUMNS),
        num_lights=len(light_rows),
    )


def _stack(rows: list[npt.NDArray[np.float32]], columns: int) -> npt.NDArray[np.float32]:
    if not rows:
        return np.zeros((1, columns), dtype=np.float32)
    return np.ascontiguousarray(np.stack(rows), dtype=np.float32)
