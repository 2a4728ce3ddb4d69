"""
core/music_theory/chords.py: Chord pitch container.

A Chord is an ascending, duplicate-free collection of absolute pitches with
an optional root. Unlike a Scale it keeps octave information, but membership
and fitting only care about pitch classes.

Mutators return the chord itself so calls can be chained:

    >>> Chord().set_root("C").add_pitches([4, 7])
    Chord(pitches=(0, 4, 7), root=0)
"""

from __future__ import annotations

from bisect import insort
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from core.music_theory.fitting import fit_to_container
from core.music_theory.pitch import OCTAVE, pitch_class, to_pitch
from core.music_theory.types import FitPitchOptions


class Chord:
    """A set of pitches that can be fitted against.

    Attributes:
        pitches: Absolute pitches, ascending. Read-only, use the mutators.
        root:    Root pitch, or None if the chord has no root.
    """

    def __init__(self, pitches: Iterable[int | str] = (), root: int | str | None = None) -> None:
        self._pitches: list[int] = []
        self._root: int | None = None
        self.add_pitches(pitches)
        if root is not None:
            self.set_root(root)

    @property
    def pitches(self) -> tuple[int, ...]:
        return tuple(self._pitches)

    @property
    def root(self) -> int | None:
        return self._root

    @property
    def bass(self) -> int | None:
        """Lowest pitch of the chord, or None for an empty chord."""
        return self._pitches[0] if self._pitches else None

    def __len__(self) -> int:
        return len(self._pitches)

    def __repr__(self) -> str:
        return f"Chord(pitches={self.pitches}, root={self._root})"

    # -- Mutators -------------------------------------------------------------

    def add_pitch(self, pitch: int | str) -> Chord:
        """Add a pitch, keeping pitches ascending. Existing pitches are ignored."""
        pitch = to_pitch(pitch)
        if pitch not in self._pitches:
            insort(self._pitches, pitch)
        return self

    def add_pitches(self, pitches: Iterable[int | str]) -> Chord:
        for pitch in pitches:
            self.add_pitch(pitch)
        return self

    def remove_pitches(self, condition: Callable[[int], bool]) -> Chord:
        """Remove pitches matching ``condition``; clears the root if it goes too."""
        self._pitches = [p for p in self._pitches if not condition(p)]
        if self._root is not None and self._root not in self._pitches:
            self._root = None
        return self

    def set_root(self, pitch: int | str | None) -> Chord:
        """Set the root, adding it to the chord if needed. None clears it."""
        if pitch is None:
            self._root = None
            return self
        self._root = to_pitch(pitch)
        return self.add_pitch(self._root)

    # -- Queries --------------------------------------------------------------

    def get_pitch(self, index: int) -> int:
        """Return the pitch at ``index``, extending by octaves past either end.

        Examples:
            >>> chord = Chord([12, 16, 19])
            >>> chord.get_pitch(3), chord.get_pitch(-1)
            (24, 7)

        Raises:
            IndexError: If the chord is empty
        """
        if not self._pitches:
            raise IndexError("Cannot get a pitch from an empty chord")
        octaves, position = divmod(index, len(self._pitches))
        return self._pitches[position] + octaves * OCTAVE

    def contains(self, pitch: int | str) -> bool:
        """Return True if any chord pitch shares the pitch class of ``pitch``."""
        pc = pitch_class(to_pitch(pitch))
        return any(pitch_class(p) == pc for p in self._pitches)

    def fit_pitch(
        self,
        pitch: float | str,
        options: FitPitchOptions | Mapping[str, Any] | None = None,
    ) -> int:
        """Return a pitch near ``pitch`` whose pitch class is in the chord."""
        root = pitch_class(self._root) if self._root is not None else None
        return fit_to_container(
            to_pitch(pitch),
            self.contains,
            root,
            FitPitchOptions.coerce(options),
        )
