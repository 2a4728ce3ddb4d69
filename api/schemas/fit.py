"""
api/schemas/fit.py: Pydantic request/response schemas for pitch fitting.

Covers:
    /fit/pitches  FitPitchesRequest / FitPitchesResponse
"""

from pydantic import BaseModel, Field, field_validator

from core.music_theory import FitDirection

# Pitches arrive as MIDI numbers or as pitch names ("C#4", "Bb", "E♮1")
Pitch = int | str


class FitOptionsIn(BaseModel):
    """Options for the container's default (nearest member) fit."""

    max_movement: float = Field(default=2, ge=0, le=12)
    prefer_root: bool = True
    direction: str = Field(default="down", description="'down', 'up' or 'random'.")
    seed: int | None = Field(default=None, description="Seed for the random direction.")

    @field_validator("direction")
    @classmethod
    def validate_direction(cls, v: str) -> str:
        valid = {d.name.lower() for d in FitDirection}
        if v.strip().lower() not in valid:
            raise ValueError(f"direction must be one of: {', '.join(sorted(valid))}")
        return v.strip().lower()


class FitPitchesRequest(BaseModel):
    """Request body for POST /fit/pitches.

    Give either a scale (``root`` + ``scale``) or a ``chord``. When ``chord``
    is set, ``root`` (if any) is the chord root.
    """

    pitches: list[Pitch] = Field(..., min_length=1, max_length=512)
    root: Pitch | None = Field(default=None, description="Scale or chord root. Default: C.")
    scale: str = Field(default="major", description="Scale template name.")
    chord: list[Pitch] | None = Field(default=None, description="Explicit chord pitches.")
    optimize_for: list[Pitch] | None = Field(
        default=None,
        description="Pitches to optimize the mapping for. Default: 'pitches'.",
    )
    options: FitOptionsIn = Field(default_factory=FitOptionsIn)


class FitPitchesResponse(BaseModel):
    """Response body for POST /fit/pitches."""

    container: str
    container_pitch_classes: list[int]
    pitches: list[int]
    fitted: list[int]
    naive_fitted: list[int]
    distinct_outputs: int = Field(..., ge=0, le=12)
    naive_distinct_outputs: int = Field(..., ge=0, le=12)
    pitch_class_map: dict[int, int]
