"""
core/music_theory/pitch.py: Pitch numbers, pitch classes and pitch names.

Pitch numbers follow MIDI: C4 = 60, so octave n starts at (n + 1) * 12.

Exports:
    NOTE_LETTERS        natural letter name → pitch class
    ACCIDENTALS         accidental symbol → semitone offset
    InvalidPitchName    raised for strings that are not pitch names

    safe_mod(value, divisor) → int
    pitch_class(pitch) → int
    parse_pitch(name) → int
    to_pitch(value) → int
"""

from __future__ import annotations

import re

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

OCTAVE: int = 12

NOTE_LETTERS: dict[str, int] = {
    "C": 0,
    "D": 2,
    "E": 4,
    "F": 5,
    "G": 7,
    "A": 9,
    "B": 11,
}

ACCIDENTALS: dict[str, int] = {
    "#": 1,
    "♯": 1,
    "b": -1,
    "♭": -1,
    "x": 2,
    "𝄪": 2,
    "𝄫": -2,
    "♮": 0,
}

_PITCH_NAME_RE = re.compile(
    r"^(?P<letter>[A-G])(?P<accidentals>[" + "".join(ACCIDENTALS) + r"]*)(?P<octave>-?\d+)?$"
)


class InvalidPitchName(ValueError):
    """Raised when a string cannot be read as a pitch name.

    Args:
        name: The offending string.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"{name} is not a valid pitch name")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def safe_mod(value: int, divisor: int) -> int:
    """Modulo that never goes negative, whatever the sign of ``value``."""
    return ((value % divisor) + divisor) % divisor


def pitch_class(pitch: int) -> int:
    """Return the pitch class (0–11) of an absolute pitch."""
    return safe_mod(pitch, OCTAVE)


def parse_pitch(name: str) -> int:
    """Convert a pitch name into a pitch number.

    Without an octave marker the pitch class is returned; with one, the
    absolute MIDI pitch. Accidentals may be stacked and mixed.

    Args:
        name: Pitch name, e.g. "C", "F#", "Bb", "D𝄪", "E♮1", "C-1"

    Returns:
        Pitch class (0–11) or absolute pitch number.

    Raises:
        InvalidPitchName: If ``name`` does not match the pitch name grammar

    Examples:
        >>> parse_pitch("Cb")
        11
        >>> parse_pitch("D1")
        26
    """
    match = _PITCH_NAME_RE.match(name) if isinstance(name, str) else None
    if match is None:
        raise InvalidPitchName(str(name))

    value = NOTE_LETTERS[match["letter"]]
    value += sum(ACCIDENTALS[symbol] for symbol in match["accidentals"])

    octave = match["octave"]
    if octave is None:
        return safe_mod(value, OCTAVE)
    return (int(octave) + 1) * OCTAVE + value


def to_pitch(value: int | str) -> int:
    """Pass pitch numbers through and parse pitch names."""
    if isinstance(value, str):
        return parse_pitch(value)
    return value
