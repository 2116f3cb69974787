"""
Pipeline Orchestrator
=====================

Drives decode -> scale -> encode -> mux for one slideshow conversion.

State Machine:
    INIT                   validate frames, derive the encode time base
    STREAMING_FIRST_FRAME  decode the first image to learn the source geometry,
                           configure scaler/encoder/container, write the header
    STREAMING              submit each remaining image and drain it through
    DRAIN_DECODER          flush the decoder and push out its buffered frames
    DRAIN_ENCODER          flush the encoder and write its buffered packets
    FINALIZED              trailer written; terminal

Timing Domains:
    Packets leave the archive timestamped in milliseconds (1/1000), are
    decoded and encoded in the encode time base (lowest_delay/1000) and are
    muxed in the container time base (1/90000).

Failure Policy:
    Any error aborts the run at once. Every handle opened so far is released
    and the error propagates. A partially written output file is left for the
    caller to discard.

Example:
    from slideshow_video.pipeline import convert

    summary = convert(zip_bytes, [("001.png", 100), ("002.png", 200)], "out.mp4")
    print(summary.frame_rate)   # 10
"""

import logging
from enum import Enum
from fractions import Fraction
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

import av

from slideshow_video.archive.reader import ArchiveReader
from slideshow_video.codecs.registry import find_encoder, select_codec_kind
from slideshow_video.errors import CodecError, EmptyInputError
from slideshow_video.models.frame_spec import FrameSpec, coerce_frames, lowest_delay
from slideshow_video.models.summary import ConversionSummary
from slideshow_video.stages.decoder import DecodeStage
from slideshow_video.stages.encoder import EncodeStage
from slideshow_video.stages.scaler import ScaleStage
from slideshow_video.stages.writer import ContainerWriter
from slideshow_video.timebase import encode_time_base, frame_rate


logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    """
    Orchestrator states, in the order a successful run visits them.

    Attributes:
        INIT: Nothing opened yet
        STREAMING_FIRST_FRAME: Discovering geometry from the first image
        STREAMING: Feeding the remaining images
        DRAIN_DECODER: Decoder flushed, emptying it
        DRAIN_ENCODER: Encoder flushed, emptying it
        FINALIZED: Trailer written
        FAILED: Aborted by an error
    """

    INIT = "INIT"
    STREAMING_FIRST_FRAME = "STREAMING_FIRST_FRAME"
    STREAMING = "STREAMING"
    DRAIN_DECODER = "DRAIN_DECODER"
    DRAIN_ENCODER = "DRAIN_ENCODER"
    FINALIZED = "FINALIZED"
    FAILED = "FAILED"


class Pipeline:
    """
    One-shot conversion of archived still images into an H.264 video.

    Each Pipeline owns its own decoder, scaler, encoder and writer; nothing
    is shared between instances. A Pipeline runs once.

    Attributes:
        state: Current PipelineState
        frames: Frames in display order
        output_path: Destination file
        encode_time_base: Derived once in INIT and fixed for the run
        presentation_timestamps: pts of every decoded frame, encode time base

    Example:
        pipeline = Pipeline(zip_bytes, frames, "out.mp4")
        summary = pipeline.run()
    """

    def __init__(
        self,
        archive_bytes: bytes,
        frames: Iterable[Any],
        output_path: Union[str, Path],
    ) -> None:
        self.state = PipelineState.INIT
        self.frames: List[FrameSpec] = coerce_frames(frames)
        self.output_path = Path(output_path)
        self.encode_time_base: Optional[Fraction] = None
        self.presentation_timestamps: List[int] = []

        self._archive_bytes = archive_bytes
        self._archive: Optional[ArchiveReader] = None
        self._decoder: Optional[DecodeStage] = None
        self._scaler: Optional[ScaleStage] = None
        self._encoder: Optional[EncodeStage] = None
        self._writer: Optional[ContainerWriter] = None
        self._frames_decoded: int = 0

    # =========================================================================
    # Public API
    # =========================================================================

    @property
    def output_created(self) -> bool:
        """Whether this run has touched the output file."""
        return self._writer is not None and self._writer.created

    def run(self) -> ConversionSummary:
        """
        Execute the whole conversion.

        Returns:
            ConversionSummary of the finished file

        Raises:
            EmptyInputError: If no frames were given (no output I/O happens)
            UnsupportedCodecError: If a required decoder/encoder is missing
            EntryNotFoundError, ArchiveIOError: If an image cannot be read
            CodecError: On any decode/scale/encode/mux failure
            RuntimeError: If this pipeline has already run
        """
        if self.state is not PipelineState.INIT:
            raise RuntimeError(f"Pipeline already ran (state={self.state.value})")

        try:
            self._init()
            self._stream_first_frame()
            self._stream_remaining()
            self._drain_decoder()
            self._drain_encoder()
            self._finalize()
        except BaseException as e:
            logger.error(f"Conversion failed in {self.state.value}: {e}")
            self._abort()
            raise
        finally:
            self._release()

        summary = self._summary()
        logger.info(f"Conversion complete: {summary}")
        return summary

    # =========================================================================
    # States
    # =========================================================================

    def _init(self) -> None:
        if not self.frames:
            raise EmptyInputError("Slideshow has no frames")

        lowest = lowest_delay(self.frames)
        self.encode_time_base = encode_time_base(lowest)
        self._archive = ArchiveReader(self._archive_bytes)

        logger.info(
            f"Converting {len(self.frames)} frames -> {self.output_path} "
            f"(lowest delay {lowest} ms, time_base={self.encode_time_base}, "
            f"{frame_rate(self.encode_time_base)} fps)"
        )

    def _stream_first_frame(self) -> None:
        self.state = PipelineState.STREAMING_FIRST_FRAME
        first = self.frames[0]
        tb = self.encode_time_base

        self._decoder = DecodeStage(select_codec_kind(first.filename), tb)
        self._submit(first)

        decoded = self._decoder.first_frame()
        if decoded is None:
            raise CodecError("decode", "decoder produced no frame for the first image", first.filename)

        self._scaler = ScaleStage(time_base=tb)
        _, width, height = self._scaler.configure(decoded.format.name, decoded.width, decoded.height)

        encoder_codec = find_encoder()
        self._writer = ContainerWriter(self.output_path)
        self._writer.open()
        stream = self._writer.add_stream(encoder_codec.name, frame_rate(tb))
        self._encoder = EncodeStage(stream.codec_context)
        self._encoder.open(width, height, tb)
        self._writer.write_header()

        self._process(decoded)

    def _stream_remaining(self) -> None:
        self.state = PipelineState.STREAMING
        for spec in self.frames[1:]:
            self._submit(spec)
            for decoded in self._decoder.drain():
                self._process(decoded)

    def _drain_decoder(self) -> None:
        self.state = PipelineState.DRAIN_DECODER
        self._decoder.flush()
        for decoded in self._decoder.drain():
            self._process(decoded)

    def _drain_encoder(self) -> None:
        self.state = PipelineState.DRAIN_ENCODER
        self._encoder.flush()
        self._write_packets()

    def _finalize(self) -> None:
        self._writer.write_trailer()
        self.state = PipelineState.FINALIZED

    # =========================================================================
    # Frame Flow
    # =========================================================================

    def _submit(self, spec: FrameSpec) -> None:
        data = self._archive.read_entry(spec.filename)
        self._decoder.submit(data, spec.delay, spec.filename)

    def _process(self, decoded: av.VideoFrame) -> None:
        """Scale, encode and write one decoded frame."""
        self._frames_decoded += 1
        if decoded.pts is not None:
            self.presentation_timestamps.append(decoded.pts)

        scaled = self._scaler.scale(decoded)
        self._encoder.submit(scaled)
        self._write_packets()

    def _write_packets(self) -> None:
        for packet in self._encoder.drain():
            self._writer.write_packet(packet, self.encode_time_base)

    # =========================================================================
    # Teardown
    # =========================================================================

    def _abort(self) -> None:
        self.state = PipelineState.FAILED
        if self._writer is not None:
            self._writer.close()

    def _release(self) -> None:
        if self._archive is not None:
            self._archive.close()
        self._decoder = None
        self._encoder = None

    def _summary(self) -> ConversionSummary:
        _, width, height = self._scaler.output
        return ConversionSummary(
            output_path=str(self.output_path),
            frames_submitted=len(self.frames),
            frames_decoded=self._frames_decoded,
            packets_written=self._writer.packets_written,
            width=width,
            height=height,
            encode_time_base=self.encode_time_base,
            frame_rate=frame_rate(self.encode_time_base),
            scaler_rebuilds=self._scaler.rebuilds,
        )


def convert(
    archive_bytes: bytes,
    frames: Iterable[Any],
    output_path: Union[str, Path],
) -> ConversionSummary:
    """
    Convert archived still images into an H.264 video file.

    Args:
        archive_bytes: ZIP archive holding the images
        frames: Ordered FrameSpec objects, (filename, delay) pairs or dicts;
            delays in milliseconds
        output_path: Destination file; the container format follows its extension

    Returns:
        ConversionSummary of the written file

    Raises:
        SlideshowError: Any conversion failure (see Pipeline.run)
    """
    return Pipeline(archive_bytes, frames, output_path).run()
