"""Image export utilities for traced buffers.

Traced buffers are flat float32 arrays of shape (width * height, 3) holding
linear RGB already clamped to [0, 1]. These helpers turn them into images.

Supported formats:
    - PNG (8-bit via Pillow)

Example:
    >>> from whitted.core.options import TracingConfig
    >>> from whitted.core.tracer import trace_scene
    >>> from whitted.preview.export import save_png
    >>> config = TracingConfig.allocate(320, 240)
    >>> trace_scene(scene, camera, config)
    >>> save_png(config.target, 320, 240, "output.png")
"""

from __future__ import annotations

import os

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage


def buffer_to_uint8(
    buffer: npt.NDArray[np.float32],
    width: int,
    height: int,
    *,
    gamma: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a traced buffer to an (height, width, 3) uint8 image.

    Args:
        buffer: Float buffer of shape (width * height, 3).
        width: Image width in pixels.
        height: Image height in pixels.
        gamma: Gamma applied before quantizing (1.0 keeps values linear).

    Raises:
        ValueError: If the buffer size does not match width x height, or
            gamma is not positive.
    """
    if buffer.size != width * height * 3:
        raise ValueError(
            f"Buffer of {buffer.size} values does not hold a {width}x{height} RGB image"
        )
    if gamma <= 0.0:
        raise ValueError(f"gamma must be positive, got {gamma}")

    image = np.clip(np.asarray(buffer, dtype=np.float32).reshape(height, width, 3), 0.0, 1.0)
    if gamma != 1.0:
        image = np.power(image, 1.0 / gamma)

    # Round to nearest instead of truncating
    return (image * 255.0 + 0.5).astype(np.uint8)


def buffer_to_image(
    buffer: npt.NDArray[np.float32],
    width: int,
    height: int,
    *,
    gamma: float = 1.0,
) -> PILImage.Image:
    """Convert a traced buffer to a Pillow RGB image."""
    return PILImage.fromarray(buffer_to_uint8(buffer, width, height, gamma=gamma))


def save_png(
    buffer: npt.NDArray[np.float32],
    width: int,
    height: int,
    filepath: str | os.PathLike[str],
    *,
    gamma: float = 1.0,
) -> None:
    """Save a traced buffer as an 8-bit PNG file.

    Args:
        buffer: Float buffer of shape (width * height, 3).
        width: Image width in pixels.
        height: Image height in pixels.
        filepath: Output file path (should end in .png).
        gamma: Gamma applied before quantizing.
    """
    buffer_to_image(buffer, width, height, gamma=gamma).save(filepath, format="PNG")


def compute_rmse(
    image_a: npt.NDArray[np.floating[npt.NBitBase]],
    image_b: npt.NDArray[np.floating[npt.NBitBase]],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
