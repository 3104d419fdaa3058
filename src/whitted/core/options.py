"""Tracing configuration.

A TracingConfig bundles everything one trace needs besides the scene and the
camera: the image size, the caller-owned target buffer, the number of samples
per raster cell, the raster block size and an optional cancellation token.
It is validated eagerly; invalid values raise instead of being clamped.

The target buffer is a float32 array of shape (width * height, 3) holding
linear RGB in [0, 1]; pixel (x, y) is row x + y * width.

Example:
    >>> from whitted.core.options import TracingConfig
    >>> config = TracingConfig.allocate(320, 240, sample_count=4, raster_block=2)
    >>> config.image().shape
    (240, 320, 3)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import numpy as np
import numpy.typing as npt


@runtime_checkable
class CancellationToken(Protocol):
    """Anything with an is_set() method, such as threading.Event."""

    def is_set(self) -> bool: ...


def make_target(width: int, height: int) -> npt.NDArray[np.float32]:
    """Allocate a zeroed target buffer for a width x height image."""
    return np.zeros((width * height, 3), dtype=np.float32)


# Largest value a kernel i32 argument can hold
I32_MAX = 2**31 - 1


def _check_int(value: Any, name: str, minimum: int, maximum: int = I32_MAX) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    if value > maximum:
        raise ValueError(f"{name} must be <= {maximum}, got {value}")
    return int(value)


def is_power_of_two(value: int) -> bool:
    return value >= 1 and (value & (value - 1)) == 0


@dataclass(frozen=True, eq=False)
class TracingConfig:
    """Validated parameters for one trace.

    Attributes:
        width: Image width in pixels (>= 0).
        height: Image height in pixels (>= 0).
        target: Caller-owned float32 buffer of shape (width * height, 3).
        sample_count: Samples averaged per raster cell (>= 1).
        raster_block: Side of the square pixel block sharing one color; a
            power of two. None means 1 (full resolution).
        cancellation: Optional token; the trace stops once it is set.
        seed: Seed mixed into the soft-shadow jitter.
    """

    width: int
    height: int
    target: npt.NDArray[np.float32]
    sample_count: int = 1
    raster_block: int | None = 1
    cancellation: CancellationToken | None = None
    seed: int = 0

    def __post_init__(self) -> None:
        width = _check_int(self.width, "width", 0)
        height = _check_int(self.height, "height", 0)
        _check_int(self.sample_count, "sample_count", 1)
        _check_int(self.seed, "seed", 0)

        block = 1 if self.raster_block is None else self.raster_block
        _check_int(block, "raster_block", 1)
        if not is_power_of_two(block):
            raise ValueError(f"raster_block must be a power of two, got {block}")
        object.__setattr__(self, "raster_block", int(block))

        if not isinstance(self.target, np.ndarray):
            raise TypeError(f"target must be a numpy array, got {type(self.target).__name__}")
        if self.target.dtype != np.float32:
            raise ValueError(f"target must be float32, got {self.target.dtype}")
        if self.target.shape != (width * height, 3):
            raise ValueError(
                f"target must have shape {(width * height, 3)} for a {width}x{height} "
                f"image, got {self.target.shape}"
            )
        if not self.target.flags.c_contiguous or not self.target.flags.writeable:
            raise ValueError("target must be a writeable C-contiguous array")

        if self.cancellation is not None and not isinstance(self.cancellation, CancellationToken):
            raise TypeError("cancellation must provide an is_set() method")

    @classmethod
    def allocate(cls, width: int, height: int, **kwargs: Any) -> TracingConfig:
        """Build a config with a freshly allocated target buffer."""
        _check_int(width, "width", 0)
        _check_int(height, "height", 0)
        return cls(width=width, height=height, target=make_target(width, height), **kwargs)

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def is_cancelled(self) -> bool:
        return self.cancellation is not None and self.cancellation.is_set()

    def image(self) -> npt.NDArray[np.float32]:
        """View of the target as an (height, width, 3) image."""
        return self.target.reshape(self.height, self.width, 3)
