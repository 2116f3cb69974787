"""
Stages Module
=============

The four collaborating stages of the conversion pipeline:
    - DecodeStage: archive entry bytes -> decoded frames
    - ScaleStage: decoded frames -> fixed yuv420p raster
    - EncodeStage: scaled frames -> H.264 packets
    - ContainerWriter: packets -> output file

DecodeStage and EncodeStage share the CodecStage drain protocol.
"""

from slideshow_video.stages.base import CodecStage
from slideshow_video.stages.decoder import DecodeStage
from slideshow_video.stages.scaler import ScaleStage, ScalerPlan, even_dimensions
from slideshow_video.stages.encoder import ENCODER_OPTIONS, EncodeStage
from slideshow_video.stages.writer import ContainerWriter


__all__ = [
    "CodecStage",
    "DecodeStage",
    "ScaleStage",
    "ScalerPlan",
    "even_dimensions",
    "EncodeStage",
    "ENCODER_OPTIONS",
    "ContainerWriter",
]
