"""
Time Base Tests
===============

Rescaling arithmetic and derived time bases.
"""

import math
import random
from fractions import Fraction

import pytest

from slideshow_video.timebase import (
    DECODE_TIME_BASE,
    OUTPUT_TIME_BASE,
    encode_time_base,
    frame_rate,
    rescale,
    rescale_value,
)


class TestConstants:
    """Fixed time bases."""

    def test_decode_time_base_is_milliseconds(self):
        assert DECODE_TIME_BASE == Fraction(1, 1000)

    def test_output_time_base_is_90khz(self):
        assert OUTPUT_TIME_BASE == Fraction(1, 90000)


class TestEncodeTimeBase:
    """Encode time base derived from the lowest delay."""

    @pytest.mark.parametrize(
        "lowest, expected",
        [
            (100, Fraction(1, 10)),
            (40, Fraction(1, 25)),
            (1000, Fraction(1, 1)),
            (150, Fraction(3, 20)),
            (7, Fraction(7, 1000)),
        ],
    )
    def test_reduced_fraction(self, lowest, expected):
        tb = encode_time_base(lowest)
        assert tb == expected
        assert tb.denominator == 1000 // math.gcd(1000, lowest)

    def test_frame_rate_is_inverse(self):
        assert frame_rate(encode_time_base(100)) == 10
        assert frame_rate(encode_time_base(40)) == 25
        assert frame_rate(encode_time_base(150)) == Fraction(20, 3)

    def test_rejects_non_positive_delay(self):
        with pytest.raises(ValueError):
            encode_time_base(0)


class TestRescale:
    """Correctly rounded rescaling."""

    def test_milliseconds_to_encode_base(self):
        assert rescale(300, 100, DECODE_TIME_BASE, Fraction(1, 10)) == (3, 1)

    def test_encode_base_to_output(self):
        assert rescale(3, 1, Fraction(1, 10), OUTPUT_TIME_BASE) == (27000, 9000)

    def test_none_passes_through(self):
        assert rescale(None, None, DECODE_TIME_BASE, OUTPUT_TIME_BASE) == (None, None)
        assert rescale_value(None, DECODE_TIME_BASE, OUTPUT_TIME_BASE) is None

    def test_rounds_to_nearest(self):
        tb = Fraction(1, 10)
        assert rescale_value(249, DECODE_TIME_BASE, tb) == 2
        assert rescale_value(251, DECODE_TIME_BASE, tb) == 3

    def test_halves_round_away_from_zero(self):
        tb = Fraction(1, 10)
        assert rescale_value(250, DECODE_TIME_BASE, tb) == 3
        assert rescale_value(-250, DECODE_TIME_BASE, tb) == -3
        assert rescale_value(-249, DECODE_TIME_BASE, tb) == -2

    def test_rejects_non_positive_base(self):
        with pytest.raises(ValueError):
            rescale_value(1, Fraction(0), OUTPUT_TIME_BASE)

    def test_cumulative_timestamps_never_decrease(self):
        rng = random.Random(1234)
        for _ in range(50):
            delays = [rng.randint(1, 5000) for _ in range(rng.randint(1, 30))]
            tb = encode_time_base(min(delays))
            elapsed = 0
            previous = None
            for delay in delays:
                pts = rescale_value(elapsed, DECODE_TIME_BASE, tb)
                out = rescale_value(pts, tb, OUTPUT_TIME_BASE)
                if previous is not None:
                    assert out >= previous
                previous = out
                elapsed += delay
