"""Command line entry point.

Usage:
    photostrip booth [--config booth.yaml] [--camera 0] [--output-dir output]
    photostrip process INPUT OUTPUT
    photostrip strip IMG1 IMG2 IMG3 IMG4 [--output strip.png]

Commands:
    - booth   : interactive webcam booth (S = start, R = reset, P = save)
    - process : apply the black-and-white film look to a single image
    - strip   : run a whole session offline, one shot per image file
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from photostrip.camera import StillImageCamera, WebcamCamera, load_rgb
from photostrip.config import BoothConfig, load_config
from photostrip.pipeline import FrameProcessor, SessionController, StripWriter

LOGGER = logging.getLogger(__name__)
LOG_LEVELS = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def _configure_logging(level: str) -> None:
    numeric = LOG_LEVELS.get(level.lower())
    if numeric is None:
        raise ValueError(f"Unknown log level '{level}'. Choose from {list(LOG_LEVELS)}")

    if not logging.getLogger().hasHandlers():
        logging.basicConfig(level=numeric, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    logging.getLogger().setLevel(numeric)
    LOGGER.debug("Logging configured at %s", level.upper())


def _config_from_args(args: argparse.Namespace) -> BoothConfig:
    return load_config(
        args.config,
        camera_index=getattr(args, "camera", None),
        output_dir=getattr(args, "output_dir", None),
    )


def run_booth(args: argparse.Namespace) -> int:
    from photostrip.app import BoothApp

    config = _config_from_args(args)
    camera = WebcamCamera(index=config.camera_index, resolution=config.resolution)

    try:
        camera.initialize()
    except RuntimeError as exc:
        LOGGER.error("%s", exc)
        return 2

    try:
        controller = SessionController(camera, config)
        BoothApp(controller, camera).run()
    finally:
        camera.shutdown()
    return 0


def run_process(args: argparse.Namespace) -> int:
    rgb = load_rgb(args.input)
    height, width = rgb.shape[:2]

    shot = FrameProcessor(width, height).process_shot(rgb)
    LOGGER.info("Processed %s (%dx%d)", args.input, width, height)

    if not StripWriter().save(shot, args.output):
        return 1
    print(f"Saved processed image to {args.output}")
    return 0


def run_strip(args: argparse.Namespace) -> int:
    config = _config_from_args(args).with_overrides(frames=len(args.images))
    if args.output:
        config = config.with_overrides(output_dir=args.output.parent, filename=args.output.name)

    camera = StillImageCamera(args.images, resolution=config.resolution)
    controller = SessionController(camera, config)

    # Drive the session with a synthetic clock, one interval per shot
    now = 0.0
    controller.start(now=now)
    while controller.state != "complete":
        now += config.interval
        controller.tick(now=now)
        if now > config.interval * (config.frames * 4):
            LOGGER.error("Session did not complete, %d/%d shots", controller.shot_count, config.frames)
            return 1

    path = controller.save()
    if path is None:
        return 1
    print(f"Saved strip to {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="photostrip", description="Black-and-white photo strip booth")
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS.keys(),
        default="info",
        help="Logging verbosity",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    booth = sub.add_parser("booth", help="Interactive webcam booth")
    booth.add_argument("--config", type=Path, default=None, help="YAML booth config")
    booth.add_argument("--camera", type=int, default=None, help="Webcam device index")
    booth.add_argument("--output-dir", type=Path, default=None, help="Where saved strips go")
    booth.set_defaults(func=run_booth)

    process = sub.add_parser("process", help="Apply the film look to one image")
    process.add_argument("input", type=Path)
    process.add_argument("output", type=Path)
    process.set_defaults(func=run_process)

    strip = sub.add_parser("strip", help="Build a strip from image files")
    strip.add_argument("images", type=Path, nargs="+", help="One image per shot, top to bottom")
    strip.add_argument("--config", type=Path, default=None, help="YAML booth config")
    strip.add_argument("--output", type=Path, default=None, help="Output image path")
    strip.set_defaults(func=run_strip)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
