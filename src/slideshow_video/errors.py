"""
Conversion Errors
=================

Exception hierarchy raised by the conversion pipeline.

Every failure that aborts a conversion derives from SlideshowError so callers
can catch the whole family at once. The decoder/encoder drain signals
("try again", "end of stream") are handled inside the stages and never
surface as exceptions.

Hierarchy:
    SlideshowError
        EmptyInputError        - zero frames supplied
        UnsupportedCodecError  - no decoder/encoder for the required kind
        EntryNotFoundError     - archive has no entry with that name
        ArchiveIOError         - archive could not be read (also an OSError)
        CodecError             - decoder/scaler/encoder/muxer failure
"""

from typing import Optional


class SlideshowError(Exception):
    """Base class for all conversion failures."""
    pass


class EmptyInputError(SlideshowError):
    """Raised when a conversion is requested with no frames."""
    pass


class UnsupportedCodecError(SlideshowError):
    """Raised when the codec registry has no codec for the requested kind."""

    def __init__(self, codec_name: str, mode: str) -> None:
        role = "decoder" if mode == "r" else "encoder"
        super().__init__(f"No {role} available for codec '{codec_name}'")
        self.codec_name = codec_name
        self.mode = mode


class EntryNotFoundError(SlideshowError, KeyError):
    """Raised when a frame's filename is missing from the archive."""

    def __init__(self, filename: str) -> None:
        super().__init__(filename)
        self.filename = filename

    def __str__(self) -> str:
        return f"Archive has no entry named '{self.filename}'"


class ArchiveIOError(SlideshowError, OSError):
    """Raised when the archive or one of its entries cannot be read."""
    pass


class CodecError(SlideshowError):
    """
    Raised for any fatal codec failure.

    Attributes:
        stage: Pipeline stage that failed ("decode", "scale", "encode", "mux")
        filename: Archive entry being processed, when known
    """

    def __init__(
        self,
        stage: str,
        message: str,
        filename: Optional[str] = None,
    ) -> None:
        self.stage = stage
        self.filename = filename
        detail = f"[{stage}] {message}"
        if filename is not None:
            detail = f"{detail} (entry: {filename})"
        super().__init__(detail)
