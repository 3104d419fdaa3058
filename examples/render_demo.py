#!/usr/bin/env python3
"""Render the demo scene.

This script renders the demo scene the way the interactive viewer does: a
coarse realtime pass first, then the full-quality background pass. Render
settings come from an ini file; if it does not exist, a default one is
written next to it and used.

Usage:
    python examples/render_demo.py [options]

Options:
    --settings PATH     Settings ini file (default: raytracer.ini)
    --width WIDTH       Override the image width
    --height HEIGHT     Override the image height
    --samples SAMPLES   Override the background sample count
    --block BLOCK       Override the background raster block size
    --output OUTPUT     Output file path (default: demo.png)
    --preview PATH      Also save the realtime pass to PATH
    --show-lights       Draw lights as small spheres
    --arch ARCH         Taichi backend: cpu or gpu (default: try GPU, then CPU)
    --log-level LEVEL   Logging level (default: INFO)

Example:
    python examples/render_demo.py --width 320 --height 240 --samples 16
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from dataclasses import replace
from pathlib import Path


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the demo scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--settings",
        type=str,
        default="raytracer.ini",
        help="Settings ini file (default: raytracer.ini)",
    )
    parser.add_argument("--width", type=int, default=None, help="Override the image width")
    parser.add_argument("--height", type=int, default=None, help="Override the image height")
    parser.add_argument(
        "--samples", type=int, default=None, help="Override the background sample count"
    )
    parser.add_argument(
        "--block", type=int, default=None, help="Override the background raster block size"
    )
    parser.add_argument(
        "--output",
        type=str,
        default="demo.png",
        help="Output file path (default: demo.png)",
    )
    parser.add_argument(
        "--preview", type=str, default=None, help="Also save the realtime pass to this path"
    )
    parser.add_argument(
        "--show-lights",
        action="store_true",
        help="Draw lights as small spheres",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default=None,
        help="Taichi backend (default: try GPU, then CPU)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (default: INFO)",
    )
    return parser.parse_args()


def load_or_create_settings(path: Path):
    """Load settings from path, writing the defaults first if it is missing."""
    from whitted.config import load_settings, write_default_settings

    if not path.exists():
        write_default_settings(path)
        logging.getLogger("whitted").warning("Missing %s, created default settings", path)
    return load_settings(path)


def render_demo(args: argparse.Namespace) -> Path:
    """Render the demo scene and save it.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from whitted.core.dual_pass import DualPassRenderer
    from whitted.preview.export import save_png
    from whitted.scene.demo import DemoSceneParams, create_demo_scene

    logger = logging.getLogger("whitted")

    settings = load_or_create_settings(Path(args.settings))
    overrides = {}
    if args.width is not None:
        overrides["width"] = args.width
    if args.height is not None:
        overrides["height"] = args.height
    if args.samples is not None:
        overrides["background_sample_count"] = args.samples
    if args.block is not None:
        overrides["background_raster_size"] = args.block
    if args.show_lights:
        overrides["show_light_sources"] = True
    settings = replace(settings, **overrides)

    scene, camera = create_demo_scene(
        DemoSceneParams(aspect_ratio=settings.aspect_ratio),
        show_light_sources=settings.show_light_sources,
    )
    logger.info(
        "Rendering %dx%d: realtime %s, background %s",
        settings.width,
        settings.height,
        settings.realtime_pass(),
        settings.background_pass(),
    )

    start_time = time.time()
    with DualPassRenderer(
        scene,
        settings.width,
        settings.height,
        realtime=settings.realtime_pass(),
        background=settings.background_pass(),
    ) as renderer:
        renderer.render_frame(camera)
        logger.info("Realtime pass done in %.3fs", time.time() - start_time)

        if args.preview:
            preview = renderer.preview_image()
            save_png(preview, settings.width, settings.height, args.preview)
            logger.info("Saved realtime pass to %s", args.preview)

        if not renderer.wait_background():
            raise RuntimeError("Background pass did not complete")
        image = renderer.final_image()

    output_file = Path(args.output)
    save_png(image, settings.width, settings.height, output_file)
    logger.info("Saved to: %s", output_file.absolute())
    logger.info("Total time: %.2fs", time.time() - start_time)
    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    from whitted.logging_config import setup_logging
    from whitted.runtime import init_taichi

    setup_logging(args.log_level)

    try:
        settings_path = Path(args.settings)
        multithreaded = True
        if settings_path.exists():
            from whitted.config import load_settings

            multithreaded = load_settings(settings_path).multithreaded
        init_taichi(args.arch, multithreaded=multithreaded)
        render_demo(args)
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
