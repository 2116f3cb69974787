"""
Data Models
===========

Typed records passed into and out of the conversion pipeline.

Models:
    Input:
        - FrameSpec: One archive entry and its display duration
        - FrameManifest: Ordered frame list as read from a manifest file

    Output:
        - ConversionSummary: Counters and stream parameters of a finished run
"""

from slideshow_video.models.frame_spec import (
    FrameManifest,
    FrameSpec,
    coerce_frames,
    lowest_delay,
)
from slideshow_video.models.summary import ConversionSummary

__all__ = [
    # Input
    "FrameSpec",
    "FrameManifest",
    "coerce_frames",
    "lowest_delay",
    # Output
    "ConversionSummary",
]
