"""
Conversion Summary
==================

Result record returned by a successful conversion.
"""

from dataclasses import dataclass
from fractions import Fraction


@dataclass(frozen=True, slots=True)
class ConversionSummary:
    """
    Counters and stream parameters of a finished conversion.

    Attributes:
        output_path: File the container was written to
        frames_submitted: Source images fed to the decoder
        frames_decoded: Raster frames produced by the decoder
        packets_written: Encoded packets muxed into the container
        width: Output raster width (even)
        height: Output raster height (even)
        encode_time_base: Derived encode time base (lowest_delay / 1000)
        frame_rate: Nominal frame rate, inverse of the encode time base
        scaler_rebuilds: Resampling plans rebuilt after the first frame
    """

    output_path: str
    frames_submitted: int
    frames_decoded: int
    packets_written: int
    width: int
    height: int
    encode_time_base: Fraction
    frame_rate: Fraction
    scaler_rebuilds: int

    def __repr__(self) -> str:
        return (
            f"ConversionSummary({self.width}x{self.height} "
            f"@ {self.frame_rate} fps, frames={self.frames_decoded}, "
            f"packets={self.packets_written})"
        )

    def to_dict(self) -> dict:
        """Export as dictionary for logging/serialization."""
        return {
            "output_path": self.output_path,
            "frames_submitted": self.frames_submitted,
            "frames_decoded": self.frames_decoded,
            "packets_written": self.packets_written,
            "width": self.width,
            "height": self.height,
            "encode_time_base": str(self.encode_time_base),
            "frame_rate": str(self.frame_rate),
            "scaler_rebuilds": self.scaler_rebuilds,
        }
