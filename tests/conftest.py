"""
Test Configuration
==================

Pytest fixtures and test configuration for slideshow-video.

Images are synthesized with OpenCV and packed into in-memory ZIP archives,
so no media files are checked in.
"""

import io
import zipfile

import av
import cv2
import numpy as np
import pytest


def encode_image(width: int, height: int, ext: str = "png", seed: int = 0) -> bytes:
    """Encode a deterministic gradient image as PNG or JPEG bytes."""
    rng = np.random.default_rng(seed)
    base = rng.integers(0, 255, size=3)
    xs = np.linspace(0, 255, width, dtype=np.float32)
    ys = np.linspace(0, 255, height, dtype=np.float32)
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[..., 0] = (xs[None, :] + base[0]) % 256
    image[..., 1] = (ys[:, None] + base[1]) % 256
    image[..., 2] = base[2]

    ok, buf = cv2.imencode(f".{ext}", image)
    assert ok, f"cv2.imencode failed for .{ext}"
    return buf.tobytes()


def build_archive(entries: dict) -> bytes:
    """Pack {name: bytes} into a ZIP archive."""
    out = io.BytesIO()
    with zipfile.ZipFile(out, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries.items():
            zf.writestr(name, data)
    return out.getvalue()


@pytest.fixture
def make_image():
    """Factory for encoded test images: make_image(width, height, ext, seed)."""
    return encode_image


@pytest.fixture
def make_archive():
    """Factory for ZIP archive bytes: make_archive({name: bytes})."""
    return build_archive


@pytest.fixture
def png_archive():
    """Three same-size PNG slides."""
    return build_archive({
        "001.png": encode_image(64, 48, "png", seed=1),
        "002.png": encode_image(64, 48, "png", seed=2),
        "003.png": encode_image(64, 48, "png", seed=3),
    })


@pytest.fixture
def require_h264():
    """Skip when the installed PyAV build has no H.264 encoder."""
    try:
        av.Codec("h264", "w")
    except ValueError:
        pytest.skip("PyAV build has no H.264 encoder")


@pytest.fixture
def output_path(tmp_path):
    """Destination MP4 path inside a per-test directory."""
    return tmp_path / "slides.mp4"
