"""
Codecs Module
=============

Codec kind selection and codec lookup.
"""

from slideshow_video.codecs.registry import (
    H264_ENCODER,
    CodecKind,
    find_decoder,
    find_encoder,
    select_codec_kind,
)

__all__ = [
    "H264_ENCODER",
    "CodecKind",
    "find_decoder",
    "find_encoder",
    "select_codec_kind",
]
