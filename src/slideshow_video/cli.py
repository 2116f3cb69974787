"""
Command-Line Interface
======================

Render a ZIP archive of images into a video, driven by a JSON manifest.

Manifest Format:
    {
        "frames": [
            {"filename": "001.png", "delay": 100},
            {"filename": "002.png", "delay": 200}
        ]
    }

Usage:
    slideshow-video slides.zip manifest.json -o slides.mp4
    slideshow-video slides.zip manifest.json -o slides.mp4 --log-level DEBUG

Exit Codes:
    0  success
    1  conversion failed (partial output removed only if this run created it)
    2  bad arguments, unreadable archive/manifest
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from slideshow_video import __version__
from slideshow_video.config import Settings, load_config, setup_logging
from slideshow_video.errors import SlideshowError
from slideshow_video.models.frame_spec import FrameManifest
from slideshow_video.pipeline import Pipeline


logger = logging.getLogger(__name__)


EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slideshow-video",
        description="Convert a ZIP archive of still images into an H.264 video",
    )
    parser.add_argument("archive", type=Path, help="ZIP archive containing the images")
    parser.add_argument(
        "manifest",
        type=Path,
        help="JSON manifest listing frames (filename, delay in ms) in display order",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        required=True,
        help="Destination video file (format follows the extension, e.g. .mp4)",
    )
    parser.add_argument("--config", type=str, default=None, help="Path to a YAML config file")
    parser.add_argument("--log-level", type=str, default=None, help="Override logging level")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_manifest(path: Path) -> FrameManifest:
    """
    Read and validate a frame manifest.

    Raises:
        OSError: If the file cannot be read
        ValidationError: If the contents do not match the manifest schema
    """
    return FrameManifest.model_validate_json(path.read_text(encoding="utf-8"))


def _remove_partial(output: Path, settings: Settings) -> None:
    if not settings.output.remove_partial_on_error or not output.exists():
        return
    try:
        output.unlink()
        logger.info(f"Removed partial output: {output}")
    except OSError as e:
        logger.warning(f"Could not remove partial output {output}: {e}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = load_config(args.config)
    if args.log_level:
        settings.logging.level = args.log_level
    setup_logging(settings)

    try:
        archive_bytes = args.archive.read_bytes()
    except OSError as e:
        logger.error(f"Cannot read archive {args.archive}: {e}")
        return EXIT_USAGE

    try:
        manifest = load_manifest(args.manifest)
    except OSError as e:
        logger.error(f"Cannot read manifest {args.manifest}: {e}")
        return EXIT_USAGE
    except ValidationError as e:
        logger.error(f"Invalid manifest {args.manifest}: {e}")
        return EXIT_USAGE

    output: Path = args.output
    if settings.output.create_parent_dirs and manifest.frames:
        output.parent.mkdir(parents=True, exist_ok=True)

    pipeline = Pipeline(archive_bytes, manifest.frames, output)
    try:
        summary = pipeline.run()
    except SlideshowError as e:
        logger.error(f"Conversion failed: {e}")
        # only a file this run opened is removed
        if pipeline.output_created:
            _remove_partial(output, settings)
        return EXIT_FAILED

    logger.info(f"Wrote {output}: {summary.to_dict()}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
