"""
core/music_theory/: Pure pitch-fitting engine.

Exports:
    Types:     FitDirection, FitPitchOptions, PitchContainer, DEFAULT_FIT_OPTIONS
    Pitch:     parse_pitch, to_pitch, pitch_class, safe_mod, InvalidPitchName
    Scales:    ScaleTemplate, Scale, get_template, available_templates, build_scale
    Chords:    Chord
    Fitting:   PitchFitter, circular_distance
"""

from core.music_theory.chords import Chord
from core.music_theory.pitch import InvalidPitchName, parse_pitch, pitch_class, safe_mod, to_pitch
from core.music_theory.pitch_fitter import PitchFitter, circular_distance
from core.music_theory.scales import (
    Scale,
    ScaleTemplate,
    available_templates,
    build_scale,
    get_template,
)
from core.music_theory.types import (
    DEFAULT_FIT_OPTIONS,
    FitDirection,
    FitPitchOptions,
    PitchContainer,
)

__all__ = [
    # Types
    "FitDirection",
    "FitPitchOptions",
    "PitchContainer",
    "DEFAULT_FIT_OPTIONS",
    # Pitch
    "InvalidPitchName",
    "parse_pitch",
    "to_pitch",
    "pitch_class",
    "safe_mod",
    # Scales
    "ScaleTemplate",
    "Scale",
    "get_template",
    "available_templates",
    "build_scale",
    # Chords
    "Chord",
    # Fitting
    "PitchFitter",
    "circular_distance",
]
