"""
Encode Stage
============

H.264 encoding of scaled frames.

Encoder tuning is fixed: this is an offline batch conversion, so the slowest
preset is used for the best compression at quality factor 18. The global
header flag keeps parameter sets out of band, as MP4 muxing expects.
"""

import logging
from fractions import Fraction

import av
from av.codec.context import CodecContext

from slideshow_video.errors import CodecError
from slideshow_video.stages.base import CodecStage
from slideshow_video.stages.scaler import DST_FORMAT
from slideshow_video.timebase import frame_rate


logger = logging.getLogger(__name__)


ENCODER_OPTIONS = {
    "crf": "18",
    "preset": "veryslow",
    "flags": "+global_header",
}


class EncodeStage(CodecStage):
    """
    Fixed-geometry H.264 encoder.

    Wraps the codec context of the output stream, so the container picks up
    the encoder's parameters when the header is written.

    Attributes:
        width: Encoded raster width
        height: Encoded raster height
        time_base: Encode time base; frame rate is its inverse
        frames_submitted: Number of frames sent to the encoder
    """

    stage_name = "encode"

    def __init__(self, context: CodecContext) -> None:
        """
        Args:
            context: Video codec context of the output stream
        """
        super().__init__()
        self._context = context
        self.width: int = 0
        self.height: int = 0
        self.time_base: Fraction = Fraction(0)
        self.frames_submitted: int = 0

    @property
    def context(self) -> CodecContext:
        return self._context

    def open(self, width: int, height: int, time_base: Fraction) -> None:
        """
        Configure and open the encoder.

        Args:
            width: Output width (even)
            height: Output height (even)
            time_base: Encode time base

        Raises:
            CodecError: If the encoder refuses the configuration
        """
        ctx = self._context
        ctx.width = width
        ctx.height = height
        ctx.pix_fmt = DST_FORMAT
        ctx.time_base = time_base
        ctx.framerate = frame_rate(time_base)
        ctx.options.update(ENCODER_OPTIONS)

        try:
            ctx.open()
        except av.error.FFmpegError as e:
            raise CodecError(self.stage_name, f"cannot open {ctx.name}: {e}") from e

        self.width = width
        self.height = height
        self.time_base = time_base

        logger.info(
            f"EncodeStage opened: {ctx.name} {width}x{height} {DST_FORMAT}, "
            f"time_base={time_base}, rate={ctx.framerate} fps, "
            f"crf={ENCODER_OPTIONS['crf']}, preset={ENCODER_OPTIONS['preset']}"
        )

    def submit(self, frame: av.VideoFrame) -> None:
        """Send one scaled frame to the encoder."""
        self.frames_submitted += 1
        logger.debug(f"encode submit #{self.frames_submitted}: pts={frame.pts}")
        self._exchange(self._context.encode, frame)

    def flush(self) -> None:
        """Signal end-of-input; the next drain() yields buffered packets."""
        logger.debug("encode flush")
        self._signal_end(self._context.encode)
