"""Render settings and their ini-file representation.

Interactive rendering runs two passes per camera change: a coarse realtime
pass (large raster blocks, few samples) traced synchronously, and a fine
background pass (small blocks, many samples for soft shadows) traced in a
worker thread. RenderSettings holds the parameters of both, together with
the image size and a few toggles.

Settings are read from the [video] section of an ini file:

    [video]
    Width = 640
    Height = 480
    RealtimeRasterSize = 8
    RealtimeSampleCount = 1
    BackgroundRasterSize = 1
    BackgroundSampleCount = 32
    ShowLightSources = false
    Multithreaded = true

Missing keys keep their defaults. Other sections (mouse and keyboard
bindings belong to the presentation layer) are ignored.
"""

from __future__ import annotations

import configparser
import logging
import os
from dataclasses import dataclass, fields

from whitted.core.options import is_power_of_two

logger = logging.getLogger(__name__)

VIDEO_SECTION = "video"

DEFAULT_SETTINGS_INI = """\
# Render settings
[video]
Width = 640
Height = 480
# Block size of the interactive pass; must be a power of two
RealtimeRasterSize = 8
# Samples per block while moving; keep at 1 for responsiveness
RealtimeSampleCount = 1
# Block size of the refined pass traced once the camera stops
BackgroundRasterSize = 1
# Soft shadows look decent starting at 32 samples
BackgroundSampleCount = 32
# Draw lights as small unshaded spheres
ShowLightSources = false
Multithreaded = true
"""


@dataclass(frozen=True)
class PassSettings:
    """Parameters of one tracing pass.

    Attributes:
        raster_block: Side of the square pixel block sharing one color
            (power of two).
        sample_count: Samples averaged per block.
    """

    raster_block: int = 1
    sample_count: int = 1

    def __post_init__(self) -> None:
        if not is_power_of_two(self.raster_block):
            raise ValueError(f"raster_block must be a power of two, got {self.raster_block}")
        if self.sample_count < 1:
            raise ValueError(f"sample_count must be >= 1, got {self.sample_count}")


@dataclass(frozen=True)
class RenderSettings:
    """Image size and dual-pass parameters.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        realtime_raster_size: Block size of the interactive pass.
        realtime_sample_count: Samples per block of the interactive pass.
        background_raster_size: Block size of the background pass.
        background_sample_count: Samples per block of the background pass.
        show_light_sources: Add a LightMarker for every light.
        multithreaded: Use several CPU worker threads.
    """

    width: int = 640
    height: int = 480
    realtime_raster_size: int = 8
    realtime_sample_count: int = 1
    background_raster_size: int = 1
    background_sample_count: int = 32
    show_light_sources: bool = False
    multithreaded: bool = True

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        # Validates block sizes and sample counts
        self.realtime_pass()
        self.background_pass()

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def realtime_pass(self) -> PassSettings:
        return PassSettings(self.realtime_raster_size, self.realtime_sample_count)

    def background_pass(self) -> PassSettings:
        return PassSettings(self.background_raster_size, self.background_sample_count)


# Ini key for every RenderSettings field
_INI_KEYS = {
    "width": "Width",
    "height": "Height",
    "realtime_raster_size": "RealtimeRasterSize",
    "realtime_sample_count": "RealtimeSampleCount",
    "background_raster_size": "BackgroundRasterSize",
    "background_sample_count": "BackgroundSampleCount",
    "show_light_sources": "ShowLightSources",
    "multithreaded": "Multithreaded",
}


def load_settings(path: str | os.PathLike[str]) -> RenderSettings:
    """Read RenderSettings from an ini file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file cannot be parsed or a value is invalid.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Settings file not found: {path}")

    parser = configparser.ConfigParser(inline_comment_prefixes=("#", ";"))
    try:
        parser.read(path, encoding="utf-8")
    except configparser.Error as exc:
        raise ValueError(f"Cannot parse settings file {path}: {exc}") from exc

    if not parser.has_section(VIDEO_SECTION):
        logger.warning("No [%s] section in %s, using defaults", VIDEO_SECTION, path)
        return RenderSettings()

    section = parser[VIDEO_SECTION]
    values = {}
    for f in fields(RenderSettings):
        key = _INI_KEYS[f.name]
        if key not in section:
            continue
        try:
            if f.type in ("bool", bool):
                values[f.name] = section.getboolean(key)
            else:
                values[f.name] = section.getint(key)
        except ValueError as exc:
            raise ValueError(f"Invalid value for {key} in {path}: {section[key]!r}") from exc

    settings = RenderSettings(**values)
    logger.info("Loaded render settings from %s", path)
    return settings


def write_default_settings(path: str | os.PathLike[str]) -> None:
    """Write DEFAULT_SETTINGS_INI to path, replacing any existing file."""
    with open(path, "w", encoding="utf-8") as f:
        f.write(DEFAULT_SETTINGS_INI)
    logger.info("Wrote default render settings to %s", path)
