"""
Pipeline Module
===============

Conversion orchestrator and the top-level convert() entry point.
"""

from slideshow_video.pipeline.orchestrator import Pipeline, PipelineState, convert

__all__ = ["Pipeline", "PipelineState", "convert"]
