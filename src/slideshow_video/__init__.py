"""
slideshow-video
===============

Still-image slideshow to H.264 video conversion.

This package turns an ordered list of images stored in a ZIP archive, each
with a display duration in milliseconds, into a single H.264 video file.
Images are decoded, resampled to a fixed even-sized 4:2:0 raster, encoded
and muxed frame by frame.

Components:
    - timebase: Rational time scales and rescaling between them
    - archive: ZIP entry reader
    - codecs: PNG/MJPEG selection and codec lookup
    - stages: Decode, scale, encode and container-writer stages
    - pipeline: Orchestrator state machine and convert()
    - cli: Command-line entry point

Example:
    from slideshow_video import convert, FrameSpec

    with open("slides.zip", "rb") as f:
        summary = convert(
            f.read(),
            [FrameSpec(filename="001.png", delay=100),
             FrameSpec(filename="002.png", delay=200)],
            "slides.mp4",
        )
"""

__version__ = "0.1.0"

from slideshow_video.errors import (  # noqa: E402
    ArchiveIOError,
    CodecError,
    EmptyInputError,
    EntryNotFoundError,
    SlideshowError,
    UnsupportedCodecError,
)
from slideshow_video.models import ConversionSummary, FrameSpec  # noqa: E402
from slideshow_video.pipeline import convert  # noqa: E402

__all__ = [
    "__version__",
    "convert",
    "FrameSpec",
    "ConversionSummary",
    "SlideshowError",
    "EmptyInputError",
    "UnsupportedCodecError",
    "EntryNotFoundError",
    "ArchiveIOError",
    "CodecError",
]
