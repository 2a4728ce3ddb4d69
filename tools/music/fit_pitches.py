"""
fit_pitches tool: fit a set of pitches to a scale or chord without collapsing them.

Pure computation: no LLM, no DB, no I/O.
Given pitches (numbers or names) and a scale (root + template) or chord, returns:
  - The fitted pitches, same octave as each input
  - The naive one-at-a-time fit, for comparison
  - How many distinct pitch classes each approach produced
  - The full 12 pitch class mapping the fitter settled on
"""

from typing import Any

from core.music_theory import (
    Chord,
    FitPitchOptions,
    PitchFitter,
    build_scale,
    pitch_class,
    to_pitch,
)
from tools.base import MusicalTool, ToolParameter, ToolResult

_PITCH_TYPES = (int, str)


def _build_container(kwargs: dict[str, Any]) -> tuple[Any, str]:
    """Return (container, label) from the tool arguments."""
    chord_pitches = kwargs.get("chord")
    root = kwargs.get("root")
    if chord_pitches:
        chord = Chord(chord_pitches, root=root)
        return chord, f"Chord {list(chord.pitches)}"
    scale = build_scale("C" if root is None else root, kwargs.get("scale") or "major")
    return scale, scale.name


class FitPitches(MusicalTool):
    """
    Fit pitches to a scale or chord, keeping distinct inputs distinct where possible.

    Wraps PitchFitter, and reports the container's own naive fit alongside so
    the caller can see which inputs would otherwise have collapsed together.
    """

    @property
    def name(self) -> str:
        return "fit_pitches"

    @property
    def description(self) -> str:
        return (
            "Fit a list of pitches (MIDI numbers or names like 'C#4') to a scale or chord. "
            "Unlike fitting each pitch separately, the fitter looks at all pitch classes "
            "at once and avoids mapping different inputs onto the same output. "
            "Give either a scale (root + template name, e.g. 'D', 'dorian') or an "
            "explicit chord as a list of pitches. Octaves of the inputs are preserved."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="pitches",
                type=list,
                description="Pitches to fit, as MIDI numbers or pitch names.",
            ),
            ToolParameter(
                name="root",
                type=_PITCH_TYPES,
                description="Scale root, or chord root when 'chord' is given. Default: 'C'.",
                required=False,
                default="C",
            ),
            ToolParameter(
                name="scale",
                type=str,
                description="Scale template name, e.g. 'major', 'natural minor'. Default: 'major'.",
                required=False,
                default="major",
            ),
            ToolParameter(
                name="chord",
                type=list,
                description="Optional chord pitches. When given, fit to this chord instead of a scale.",
                required=False,
            ),
            ToolParameter(
                name="optimize_for",
                type=list,
                description="Pitches to optimize the mapping for. Default: the 'pitches' list.",
                required=False,
            ),
            ToolParameter(
                name="max_movement",
                type=(int, float),
                description="Farthest a pitch may move in the naive fit. Default: 2.",
                required=False,
                default=2,
            ),
            ToolParameter(
                name="prefer_root",
                type=bool,
                description="Prefer the root when it is within reach. Default: true.",
                required=False,
                default=True,
            ),
            ToolParameter(
                name="direction",
                type=str,
                description="Tie-break direction: 'down', 'up' or 'random'. Default: 'down'.",
                required=False,
                default="down",
            ),
        ]

    def execute(self, **kwargs: Any) -> ToolResult:
        """
        Fit the pitches.

        Returns:
            ToolResult with fitted pitches, naive fit, distinct-output counts
            and the pitch class mapping.
        """
        try:
            pitches = [to_pitch(p) for p in kwargs["pitches"]]
            optimize_for = [to_pitch(p) for p in (kwargs.get("optimize_for") or pitches)]
            overrides = {
                "max_movement": kwargs.get("max_movement"),
                "prefer_root": kwargs.get("prefer_root"),
                "preferred_direction": kwargs.get("direction"),
            }
            options = FitPitchOptions.coerce({k: v for k, v in overrides.items() if v is not None})
            container, label = _build_container(kwargs)
        except ValueError as exc:
            return ToolResult(success=False, error=str(exc))

        if not pitches:
            return ToolResult(success=False, error="pitches must contain at least one pitch")

        fitter = PitchFitter(optimize_for, container, options)
        fitted = fitter.fit_pitches(pitches)
        naive = [container.fit_pitch(p, options) for p in pitches]

        source_classes = {pitch_class(p) for p in pitches}
        return ToolResult(
            success=True,
            data={
                "container": label,
                "pitches": pitches,
                "fitted": fitted,
                "naive_fitted": naive,
                "distinct_outputs": len({pitch_class(p) for p in fitted}),
                "naive_distinct_outputs": len({pitch_class(p) for p in naive}),
                "pitch_class_map": {pc: pitch_class(fitter.fit_pitch(pc)) for pc in range(12)},
            },
            metadata={
                "source_pitch_classes": len(source_classes),
                "optimized_for": len({pitch_class(p) for p in optimize_for}),
            },
        )
