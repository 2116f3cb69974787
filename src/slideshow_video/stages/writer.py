"""
Container Writer
================

Muxes encoded packets into the output file.

Lifecycle:
    open() -> add_stream() -> write_header() -> write_packet()* -> write_trailer()

Packets arrive in the encode time base and are rescaled to the fixed output
time base (1/90000) immediately before they are written. The encoder emits
packets in submission order, so they are written in non-decreasing order.
"""

import logging
from fractions import Fraction
from pathlib import Path
from typing import Optional, Union

import av
from av.container.output import OutputContainer
from av.video.stream import VideoStream

from slideshow_video.errors import CodecError
from slideshow_video.timebase import OUTPUT_TIME_BASE, rescale, rescale_value


logger = logging.getLogger(__name__)


class ContainerWriter:
    """
    Single-video-stream muxer.

    The container format is taken from the output file extension.

    Attributes:
        output_path: Destination file
        time_base: Container time base packets are rescaled to
        packets_written: Packets muxed so far

    Example:
        writer = ContainerWriter("out.mp4")
        writer.open()
        stream = writer.add_stream("libx264", Fraction(10))
        ...
        writer.write_header()
        for packet in packets:
            writer.write_packet(packet, encode_tb)
        writer.write_trailer()
    """

    stage_name = "mux"

    def __init__(
        self,
        output_path: Union[str, Path],
        time_base: Fraction = OUTPUT_TIME_BASE,
    ) -> None:
        self.output_path = Path(output_path)
        self.time_base = time_base
        self.packets_written: int = 0

        self._container: Optional[OutputContainer] = None
        self._stream: Optional[VideoStream] = None
        self._header_written: bool = False
        self._closed: bool = False

    @property
    def is_open(self) -> bool:
        return self._container is not None and not self._closed

    @property
    def created(self) -> bool:
        """Whether open() created (or truncated) the output file."""
        return self._container is not None

    def open(self) -> None:
        """
        Create the output file.

        Raises:
            CodecError: If the file cannot be created or the format is unknown
        """
        self._require(self._container is None, "open() called twice")
        try:
            self._container = av.open(str(self.output_path), mode="w")
        except (av.error.FFmpegError, OSError, ValueError) as e:
            raise CodecError(self.stage_name, f"cannot open {self.output_path}: {e}") from e

        logger.debug(f"ContainerWriter opened: {self.output_path} ({self._container.format.name})")

    def add_stream(self, codec_name: str, rate: Fraction) -> VideoStream:
        """
        Add the video stream. Must precede write_header().

        Args:
            codec_name: Encoder name
            rate: Nominal frame rate

        Returns:
            The new stream; its codec_context is the encoder to configure
        """
        self._require(self.is_open, "add_stream() before open()")
        self._require(not self._header_written, "add_stream() after write_header()")
        self._require(self._stream is None, "only one video stream is supported")

        try:
            stream = self._container.add_stream(codec_name, rate=rate)
        except (av.error.FFmpegError, ValueError) as e:
            raise CodecError(self.stage_name, f"cannot add {codec_name} stream: {e}") from e

        stream.time_base = self.time_base
        self._stream = stream
        return stream

    def write_header(self) -> None:
        """Write the container header."""
        self._require(self._stream is not None, "write_header() before add_stream()")
        self._require(not self._header_written, "write_header() called twice")
        try:
            self._container.start_encoding()
        except av.error.FFmpegError as e:
            raise CodecError(self.stage_name, f"cannot write header: {e}") from e
        self._header_written = True

    def write_packet(self, packet: av.Packet, from_base: Fraction) -> None:
        """
        Rescale one packet to the container time base and write it.

        Args:
            packet: Encoded packet, timestamps in `from_base`
            from_base: Encode time base
        """
        self._require(self._header_written and self.is_open, "write_packet() outside header/trailer")

        pts, duration = rescale(packet.pts, packet.duration, from_base, self.time_base)
        dts = rescale_value(packet.dts, from_base, self.time_base)
        packet.pts = pts
        packet.dts = dts
        if duration is not None:
            packet.duration = duration
        packet.time_base = self.time_base
        packet.stream = self._stream

        try:
            self._container.mux(packet)
        except av.error.FFmpegError as e:
            raise CodecError(self.stage_name, f"cannot write packet pts={pts}: {e}") from e

        self.packets_written += 1

    def write_trailer(self) -> None:
        """Finalize the file. Must be the last operation."""
        self._require(self._header_written and self.is_open, "write_trailer() without header")
        try:
            self._container.close()
        except av.error.FFmpegError as e:
            raise CodecError(self.stage_name, f"cannot write trailer: {e}") from e
        finally:
            self._closed = True

        logger.debug(f"ContainerWriter finalized: {self.packets_written} packets")

    def close(self) -> None:
        """Release the container after a failure. The file is left as is."""
        if not self.is_open:
            return
        self._closed = True
        try:
            self._container.close()
        except av.error.FFmpegError as e:
            logger.warning(f"Error closing {self.output_path} after failure: {e}")

    def _require(self, condition: bool, message: str) -> None:
        if not condition:
            raise CodecError(self.stage_name, message)
