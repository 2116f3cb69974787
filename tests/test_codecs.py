"""
Codec Registry Tests
====================

Filename-driven codec selection and codec lookup.
"""

import pytest

from slideshow_video.codecs.registry import (
    CodecKind,
    find_decoder,
    find_encoder,
    select_codec_kind,
)
from slideshow_video.errors import SlideshowError, UnsupportedCodecError


class TestSelectCodecKind:
    """PNG vs MJPEG selection from the first filename."""

    @pytest.mark.parametrize(
        "filename, expected",
        [
            ("a.PNG", CodecKind.PNG),
            ("a.png", CodecKind.PNG),
            ("dir/slide.Png", CodecKind.PNG),
            ("png", CodecKind.PNG),
            ("a.jpg", CodecKind.MJPEG),
            ("a.jpeg", CodecKind.MJPEG),
            ("a.JPG", CodecKind.MJPEG),
            ("a", CodecKind.MJPEG),
            ("pn", CodecKind.MJPEG),
            ("", CodecKind.MJPEG),
        ],
    )
    def test_selection(self, filename, expected):
        assert select_codec_kind(filename) is expected

    def test_only_final_three_characters_matter(self):
        # no dot required
        assert select_codec_kind("slidepng") is CodecKind.PNG
        assert select_codec_kind("a.png.jpg") is CodecKind.MJPEG


class TestLookup:
    """Codec registry lookups."""

    def test_png_decoder(self):
        assert find_decoder(CodecKind.PNG).name == "png"

    def test_mjpeg_decoder(self):
        assert find_decoder(CodecKind.MJPEG).name == "mjpeg"

    def test_unknown_encoder_is_unsupported(self):
        with pytest.raises(UnsupportedCodecError) as exc_info:
            find_encoder("no-such-codec-xyz")

        err = exc_info.value
        assert isinstance(err, SlideshowError)
        assert err.codec_name == "no-such-codec-xyz"
        assert err.mode == "w"
        assert "encoder" in str(err)

    def test_h264_encoder(self, require_h264):
        codec = find_encoder()
        assert codec.is_encoder
        assert codec.type == "video"
