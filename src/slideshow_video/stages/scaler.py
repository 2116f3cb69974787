"""
Scale Stage
===========

Converts decoded frames to the fixed encoder raster.

The destination geometry is decided once, from the first frame: planar
4:2:0 with width and height rounded up to even (4:2:0 chroma needs even
dimensions). Every later frame is resampled into that same geometry,
whatever its own size.

The resampling plan is cached and keyed by source (format, width, height).
It is rebuilt only when an incoming frame's key differs from the cached one.
"""

import logging
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Optional, Tuple

import av
from av.video.frame import PictureType
from av.video.reformatter import VideoReformatter

from slideshow_video.errors import CodecError


logger = logging.getLogger(__name__)


DST_FORMAT = "yuv420p"
INTERPOLATION = "LANCZOS"

GeometryKey = Tuple[str, int, int]


def even_dimensions(width: int, height: int) -> Tuple[int, int]:
    """Round both dimensions up to the next even number."""
    return width + width % 2, height + height % 2


@dataclass(frozen=True)
class ScalerPlan:
    """
    Cached resampling configuration for one source geometry.

    Compared by key only; the reformatter itself carries no identity.
    """

    src_format: str
    src_width: int
    src_height: int
    reformatter: VideoReformatter = field(compare=False, repr=False)

    @property
    def key(self) -> GeometryKey:
        return (self.src_format, self.src_width, self.src_height)


class ScaleStage:
    """
    Resampler into the pipeline-wide encoder raster.

    Attributes:
        time_base: Time base stamped on scaled frames (encode time base)
        rebuilds: Plans rebuilt after configure() because geometry changed

    Example:
        scaler = ScaleStage(time_base=Fraction(1, 10))
        fmt, width, height = scaler.configure("rgb24", 101, 99)   # yuv420p 102x100
        scaled = scaler.scale(decoded)
    """

    def __init__(self, time_base: Optional[Fraction] = None) -> None:
        self.time_base = time_base
        self.rebuilds: int = 0
        self._plan: Optional[ScalerPlan] = None
        self._output: Optional[GeometryKey] = None

    @property
    def output(self) -> Optional[GeometryKey]:
        """Destination (format, width, height), once configured."""
        return self._output

    @property
    def plan(self) -> Optional[ScalerPlan]:
        return self._plan

    def configure(self, src_format: str, src_width: int, src_height: int) -> GeometryKey:
        """
        Fix the destination geometry from the first frame.

        Args:
            src_format: First frame's pixel format name
            src_width: First frame's width
            src_height: First frame's height

        Returns:
            (dst_format, dst_width, dst_height)

        Raises:
            RuntimeError: If called more than once
        """
        if self._output is not None:
            raise RuntimeError("ScaleStage output geometry is already fixed")

        dst_width, dst_height = even_dimensions(src_width, src_height)
        self._output = (DST_FORMAT, dst_width, dst_height)
        self._plan = self._build_plan((src_format, src_width, src_height))

        logger.info(
            f"Output raster: {DST_FORMAT} {dst_width}x{dst_height} "
            f"(source {src_format} {src_width}x{src_height})"
        )
        return self._output

    def scale(self, frame: av.VideoFrame) -> av.VideoFrame:
        """
        Resample one decoded frame into the output raster.

        The result keeps the source pts; its picture type is cleared so
        the encoder decides the frame type.

        Raises:
            RuntimeError: If configure() was not called
            CodecError: If resampling fails
        """
        if self._output is None:
            raise RuntimeError("ScaleStage.configure() must be called first")

        key = (frame.format.name, frame.width, frame.height)
        if self._plan is None or self._plan.key != key:
            self._plan = self._build_plan(key)
            self.rebuilds += 1
            logger.info(
                f"Source geometry changed to {key[0]} {key[1]}x{key[2]}, "
                f"rebuilt scaler plan (rebuild #{self.rebuilds})"
            )

        dst_format, dst_width, dst_height = self._output
        try:
            scaled = self._plan.reformatter.reformat(
                frame,
                width=dst_width,
                height=dst_height,
                format=dst_format,
                interpolation=INTERPOLATION,
            )
        except (av.error.FFmpegError, ValueError) as e:
            raise CodecError("scale", str(e)) from e

        scaled.pts = frame.pts
        if self.time_base is not None:
            scaled.time_base = self.time_base
        scaled.pict_type = PictureType.NONE
        return scaled

    def _build_plan(self, key: GeometryKey) -> ScalerPlan:
        src_format, src_width, src_height = key
        return ScalerPlan(
            src_format=src_format,
            src_width=src_width,
            src_height=src_height,
            reformatter=VideoReformatter(),
        )
