"""
Codec Registry
==============

Lookup of decoders and encoders in the FFmpeg libraries bundled with PyAV.

Still-image decoding is a two-way choice made once, from the first frame's
filename: PNG or baseline JPEG (MJPEG). The choice is fixed for the whole
decode stage.

Example:
    from slideshow_video.codecs.registry import select_codec_kind, find_decoder

    kind = select_codec_kind("001.PNG")     # CodecKind.PNG
    codec = find_decoder(kind)              # av.Codec("png", "r")
"""

import logging
from enum import Enum

import av

from slideshow_video.errors import UnsupportedCodecError


logger = logging.getLogger(__name__)


H264_ENCODER = "h264"


class CodecKind(str, Enum):
    """
    Still-image codec used by the decode stage.

    Values are FFmpeg decoder names.

    Attributes:
        PNG: Lossless PNG images
        MJPEG: Baseline JPEG images (anything not ending in "png")
    """

    PNG = "png"
    MJPEG = "mjpeg"


def select_codec_kind(filename: str) -> CodecKind:
    """
    Pick the decoder kind from a filename.

    A case-insensitive match of the final three characters against "png"
    selects PNG; every other name, with or without an extension, selects MJPEG.
    """
    if len(filename) >= 3 and filename[-3:].lower() == "png":
        return CodecKind.PNG
    return CodecKind.MJPEG


def _find(name: str, mode: str) -> av.Codec:
    try:
        codec = av.Codec(name, mode)
    except ValueError as e:
        # av.codec.codec.UnknownCodecError is a ValueError
        raise UnsupportedCodecError(name, mode) from e

    logger.debug(f"Codec lookup: {name} ({mode}) -> {codec.name}")
    return codec


def find_decoder(kind: CodecKind) -> av.Codec:
    """
    Find the decoder for a still-image kind.

    Raises:
        UnsupportedCodecError: If this FFmpeg build lacks the decoder
    """
    return _find(kind.value, "r")


def find_encoder(name: str = H264_ENCODER) -> av.Codec:
    """
    Find an encoder by codec or encoder name.

    "h264" resolves to FFmpeg's default H.264 encoder (libx264 when built in).

    Raises:
        UnsupportedCodecError: If this FFmpeg build lacks the encoder
    """
    return _find(name, "w")
