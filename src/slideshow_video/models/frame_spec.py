"""
Frame Specification Schema
==========================

Pydantic models describing the slideshow a caller wants rendered.

A FrameSpec names one image entry inside the archive and how long it stays
on screen. The order of specs is the display order.

Manifest Contract (used by the CLI):
    {
        "frames": [
            {"filename": "001.png", "delay": 100},
            {"filename": "002.png", "delay": 200}
        ]
    }

Example:
    from slideshow_video.models.frame_spec import FrameManifest

    manifest = FrameManifest.model_validate_json(raw)
    print(f"{len(manifest.frames)} frames, shortest {manifest.lowest_delay} ms")
"""

from typing import Any, Iterable, List, Sequence

from pydantic import BaseModel, Field


class FrameSpec(BaseModel):
    """
    One still image of the slideshow.

    Immutable (frozen) so the caller's sequence cannot change mid-conversion.

    Attributes:
        filename: Entry name inside the archive
        delay: Display duration in milliseconds
    """

    filename: str = Field(
        ...,
        min_length=1,
        description="Entry name inside the archive",
    )

    delay: int = Field(
        ...,
        ge=1,
        description="Display duration in milliseconds",
    )

    class Config:
        """Pydantic model configuration."""

        frozen = True


def coerce_frames(frames: Iterable[Any]) -> List[FrameSpec]:
    """
    Normalize caller input into a list of FrameSpec.

    Accepts FrameSpec instances, (filename, delay) pairs, or mappings with
    `filename` and `delay` keys.
    """
    specs: List[FrameSpec] = []
    for item in frames:
        if isinstance(item, FrameSpec):
            specs.append(item)
        elif isinstance(item, dict):
            specs.append(FrameSpec.model_validate(item))
        else:
            filename, delay = item
            specs.append(FrameSpec(filename=filename, delay=delay))
    return specs


def lowest_delay(frames: Sequence[FrameSpec]) -> int:
    """Minimum delay across all frames (sets the nominal frame rate)."""
    return min(frame.delay for frame in frames)


class FrameManifest(BaseModel):
    """
    Ordered list of frames, as read from a JSON manifest file.

    An empty list is accepted here; the pipeline rejects it with
    EmptyInputError so the failure is reported the same way for every caller.
    """

    frames: List[FrameSpec] = Field(
        default_factory=list,
        description="Frames in display order",
    )

    @property
    def lowest_delay(self) -> int:
        return lowest_delay(self.frames)

    class Config:
        """Pydantic model configuration."""

        json_schema_extra = {
            "example": {
                "frames": [
                    {"filename": "001.png", "delay": 100},
                    {"filename": "002.png", "delay": 200},
                ]
            }
        }
