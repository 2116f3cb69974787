"""
Decode Stage
============

Turns raw archive entries into decoded raster frames.

Each source image is one packet. Its presentation timestamp is the running
sum of the delays of the images before it, counted in milliseconds (the
decode time base) and rescaled into the encode time base before the packet
reaches the decoder. Still images have no inter-frame dependency, so every
packet is flagged as a keyframe.

Design Rules:
    - Codec kind (PNG or MJPEG) is chosen once and fixed for the stage
    - This is the ONLY place packets are built from archive bytes
    - Decoded frame geometry may change from one image to the next
"""

import logging
from fractions import Fraction
from typing import Optional

import av

from slideshow_video.codecs.registry import CodecKind, find_decoder
from slideshow_video.stages.base import CodecStage
from slideshow_video.timebase import DECODE_TIME_BASE, rescale


logger = logging.getLogger(__name__)


class DecodeStage(CodecStage):
    """
    Still-image decoder with cumulative timestamping.

    Attributes:
        kind: Codec kind in use for every image
        time_base: Encode time base packets are rescaled into
        packets_submitted: Number of images submitted so far

    Example:
        decoder = DecodeStage(CodecKind.PNG, Fraction(1, 10))
        decoder.submit(png_bytes, delay=100)
        for frame in decoder.drain():
            ...
    """

    stage_name = "decode"

    def __init__(self, kind: CodecKind, time_base: Fraction) -> None:
        """
        Open a decoder for `kind`.

        Args:
            kind: PNG or MJPEG
            time_base: Encode time base (lowest_delay / 1000)

        Raises:
            UnsupportedCodecError: If the decoder is not available
        """
        super().__init__()
        self.kind = kind
        self.time_base = time_base
        self.packets_submitted: int = 0

        codec = find_decoder(kind)
        self._context = av.CodecContext.create(codec)
        self._timestamp: int = 0

        logger.debug(f"DecodeStage opened: codec={codec.name}, time_base={time_base}")

    @property
    def timestamp(self) -> int:
        """Start time, in milliseconds, of the next image to be submitted."""
        return self._timestamp

    def make_packet(self, data: bytes, delay: int) -> av.Packet:
        """
        Wrap one image in a timestamped keyframe packet.

        Advances the running millisecond counter by `delay`.
        """
        packet = av.Packet(data)
        pts, duration = rescale(self._timestamp, delay, DECODE_TIME_BASE, self.time_base)
        packet.pts = pts
        packet.duration = duration
        packet.time_base = self.time_base
        packet.is_keyframe = True
        self._timestamp += delay
        return packet

    def submit(self, data: bytes, delay: int, filename: Optional[str] = None) -> None:
        """
        Send one image to the decoder.

        Args:
            data: Complete encoded image file
            delay: Display duration in milliseconds
            filename: Archive entry name, for error context

        Raises:
            CodecError: If the decoder rejects the image
        """
        packet = self.make_packet(data, delay)
        self.packets_submitted += 1
        logger.debug(
            f"decode submit #{self.packets_submitted}: {filename} "
            f"pts={packet.pts} duration={packet.duration} ({len(data)} bytes)"
        )
        self._exchange(self._context.decode, packet, filename)

    def first_frame(self) -> Optional[av.VideoFrame]:
        """
        Pull exactly one decoded frame, leaving any others queued.

        Returns:
            The frame, or None if the decoder has produced nothing yet
        """
        return next(self.drain(), None)

    def flush(self) -> None:
        """Signal end-of-input; the next drain() yields buffered frames."""
        logger.debug("decode flush")
        self._signal_end(self._context.decode)
