"""
Time Base Model
===============

Rational time scales used across the pipeline and the rescale between them.

A time base is the duration, in seconds, of one integer timestamp tick.
Three of them are in play:

    DECODE_TIME_BASE  1/1000         packet timestamps in whole milliseconds
    encode time base  lowest/1000    derived from the shortest frame delay
    OUTPUT_TIME_BASE  1/90000        container convention

Rounding follows FFmpeg's av_rescale_q (nearest, halves away from zero) so
that timestamps agree with what the codec libraries compute themselves.

Example:
    from slideshow_video.timebase import DECODE_TIME_BASE, encode_time_base, rescale

    enc_tb = encode_time_base(100)          # Fraction(1, 10)
    rescale(300, 100, DECODE_TIME_BASE, enc_tb)   # (3, 1)
"""

import math
from fractions import Fraction
from typing import Optional, Tuple


MILLIS = 1_000

DECODE_TIME_BASE = Fraction(1, MILLIS)
OUTPUT_TIME_BASE = Fraction(1, 90_000)


def _round_half_away(value: Fraction) -> int:
    """Round to nearest integer, halves away from zero."""
    magnitude = math.floor(abs(value) + Fraction(1, 2))
    return magnitude if value >= 0 else -magnitude


def rescale_value(value: Optional[int], src: Fraction, dst: Fraction) -> Optional[int]:
    """
    Convert a tick count from one time base to another.

    Args:
        value: Tick count in `src`, or None for an unset timestamp
        src: Time base the value is expressed in
        dst: Time base to convert into

    Returns:
        Tick count in `dst`, or None if `value` was None
    """
    if value is None:
        return None
    if src <= 0 or dst <= 0:
        raise ValueError(f"Time bases must be positive, got {src} and {dst}")
    return _round_half_away(value * src / dst)


def rescale(
    timestamp: Optional[int],
    duration: Optional[int],
    src: Fraction,
    dst: Fraction,
) -> Tuple[Optional[int], Optional[int]]:
    """
    Rescale a (timestamp, duration) pair between time bases.

    Used whenever a timestamped unit crosses a stage boundary with a
    different time base. Pure function.
    """
    return rescale_value(timestamp, src, dst), rescale_value(duration, src, dst)


def encode_time_base(lowest_delay: int) -> Fraction:
    """
    Derive the encode time base from the shortest frame delay.

    Args:
        lowest_delay: Minimum delay across all frames, in milliseconds

    Returns:
        lowest_delay / 1000, reduced
    """
    if lowest_delay < 1:
        raise ValueError(f"lowest_delay must be >= 1 ms, got {lowest_delay}")
    return Fraction(lowest_delay, MILLIS)


def frame_rate(time_base: Fraction) -> Fraction:
    """Nominal frame rate (frames per second) for a time base."""
    return 1 / time_base
