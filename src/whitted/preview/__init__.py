"""Preview module for output of traced buffers.

Components:
    export: PNG export and image comparison utilities

Example:
    >>> from whitted.preview import save_png
    >>> save_png(config.target, config.width, config.height, "output.png")
"""

from whitted.preview.export import (
    buffer_to_image,
    buffer_to_uint8,
    compute_rmse,
    save_png,
)

__all__ = [
    "save_png",
    "buffer_to_image",
    "buffer_to_uint8",
    "compute_rmse",
]
