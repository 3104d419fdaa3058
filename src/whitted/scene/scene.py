"""Scene container: objects, lights and ray queries.

The scene is populated by setup code and then handed, by reference, to every
trace. Tracing never mutates it. The packed kernel representation is built
lazily and cached until the next add() or clear().

Example:
    >>> from whitted.scene import Light, Scene
    >>> from whitted.geometry import Sphere
    >>> scene = Scene()
    >>> scene.add(Light(position=(0.0, 2.0, 0.0)))
    >>> scene.add(Sphere(center=(0.0, 0.0, 0.0), radius=1.0))
"""

from __future__ import annotations

import logging
import threading

from whitted.core.ray import Ray
from whitted.geometry.base import SceneObject
from whitted.scene.intersection import Intersection
from whitted.scene.light import Light
from whitted.scene.packing import PackedScene, pack_scene

logger = logging.getLogger(__name__)


class Scene:
    """An unordered collection of scene objects and lights."""

    def __init__(self) -> None:
        self._objects: list[SceneObject] = []
        self._lights: list[Light] = []
        self._revision = 0
        self._packed: PackedScene | None = None
        self._packed_revision = -1
        self._pack_lock = threading.Lock()

    @property
    def objects(self) -> tuple[SceneObject, ...]:
        return tuple(self._objects)

    @property
    def lights(self) -> tuple[Light, ...]:
        return tuple(self._lights)

    @property
    def revision(self) -> int:
        """Counter bumped on every mutation."""
        return self._revision

    def add(self, item: Light | SceneObject) -> None:
        """Add a light or a scene object.

        Raises:
            TypeError: If item is neither a Light nor a SceneObject.
        """
        if isinstance(item, Light):
            self._lights.append(item)
        elif isinstance(item, SceneObject):
            self._objects.append(item)
        else:
            raise TypeError(f"Cannot add {type(item).__name__} to a Scene")
        self._revision += 1

    def add_all(self, *items: Light | SceneObject) -> None:
        for item in items:
            self.add(item)

    def clear(self) -> None:
        """Remove all objects and lights."""
        self._objects.clear()
        self._lights.clear()
        self._revision += 1

    def intersections(self, ray: Ray) -> list[Intersection]:
        """Every object hit by the ray, in no particular order."""
        hits = []
        for obj in self._objects:
            distance = obj.intersect(ray)
            if distance is not None:
                hits.append(Intersection(obj, distance))
        return hits

    def closest_intersection(self, ray: Ray) -> Intersection | None:
        """The hit with the smallest distance; ties keep scan order."""
        hits = self.intersections(ray)
        if not hits:
            return None
        return min(hits, key=lambda hit: hit.distance)

    def pack(self) -> PackedScene:
        """Kernel tables for the current contents of the scene."""
        with self._pack_lock:
            if self._packed is None or self._packed_revision != self._revision:
                self._packed = pack_scene(self._objects, self._lights)
                self._packed_revision = self._revision
                logger.debug(
                    "Packed scene revision %d: %d objects, %d lights",
                    self._revision,
                    self._packed.num_objects,
                    self._packed.num_lights,
                )
            return self._packed

    def __len__(self) -> int:
        return len(self._objects)

    def __repr__(self) -> str:
        return f"Scene(objects={len(self._objects)}, lights={len(self._lights)})"
