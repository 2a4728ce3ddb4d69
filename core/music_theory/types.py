"""
core/music_theory/types.py: Value objects and protocols for pitch fitting.

All option types are frozen dataclasses, safe to hash, cache and share
between containers. No I/O, no side effects, no dependencies beyond stdlib.

Types:
    FitDirection     which neighbour wins when two candidates are equally close
    FitPitchOptions  knobs for a container's default (nearest member) fit
    PitchContainer   structural protocol implemented by Scale and Chord
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Protocol, runtime_checkable

# ---------------------------------------------------------------------------
# FitDirection
# ---------------------------------------------------------------------------


class FitDirection(Enum):
    """Preferred direction of movement when fitting a pitch."""

    UP = 1
    DOWN = -1
    RANDOM = 0

    @classmethod
    def parse(cls, value: FitDirection | int | str) -> FitDirection:
        """Resolve a direction from a member, its int value or its name.

        Raises:
            ValueError: If value does not name a direction
        """
        if isinstance(value, FitDirection):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                valid = [m.name.lower() for m in cls]
                raise ValueError(f"Unknown fit direction {value!r}. Valid: {valid}") from None
        return cls(value)


# ---------------------------------------------------------------------------
# FitPitchOptions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FitPitchOptions:
    """Configuration for fitting a single pitch into a pitch container.

    Attributes:
        max_movement:        Farthest (in semitones) a fitted pitch may move.
                             When no member lies within range the input is
                             returned rounded.
        prefer_root:         Return the container root whenever it lies within
                             range, even if another member is closer.
        preferred_direction: Which side wins when two members are equally close.
        seed:                Seed for the coin flip used by FitDirection.RANDOM.

    Example:
        >>> options = FitPitchOptions(max_movement=1, prefer_root=False)
        >>> scale.fit_pitch(61, options)
    """

    max_movement: float = 2
    prefer_root: bool = True
    preferred_direction: FitDirection = FitDirection.DOWN
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.max_movement < 0:
            raise ValueError(f"max_movement must be non-negative, got {self.max_movement}")
        if not isinstance(self.preferred_direction, FitDirection):
            object.__setattr__(
                self, "preferred_direction", FitDirection.parse(self.preferred_direction)
            )

    @classmethod
    def coerce(cls, options: FitPitchOptions | Mapping[str, Any] | None) -> FitPitchOptions:
        """Build a full options object from None, an instance or a partial mapping.

        Args:
            options: Existing options, a mapping of field overrides, or None
                     for the defaults.

        Returns:
            A FitPitchOptions instance.

        Raises:
            ValueError: If the mapping contains keys that are not option fields
        """
        if options is None:
            return DEFAULT_FIT_OPTIONS
        if isinstance(options, FitPitchOptions):
            return options
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ValueError(f"Unknown fit options {unknown}. Valid: {sorted(known)}")
        return cls(**options)


DEFAULT_FIT_OPTIONS = FitPitchOptions()
"""Defaults: move at most 2 semitones, prefer the root, prefer moving down."""


# ---------------------------------------------------------------------------
# PitchContainer
# ---------------------------------------------------------------------------


@runtime_checkable
class PitchContainer(Protocol):
    """
    Protocol for scale/chord-like collections of pitch classes.

    Any class that implements ``contains`` and ``fit_pitch`` can be handed
    to the PitchFitter, without inheriting from this class.
    """

    def contains(self, pitch: int) -> bool:
        """Return True if the pitch class of ``pitch`` belongs to the container."""
        ...

    def fit_pitch(
        self,
        pitch: int,
        options: FitPitchOptions | Mapping[str, Any] | None = None,
    ) -> int:
        """
        Return a pitch near ``pitch`` which fits the container.

        Args:
            pitch: Absolute pitch to fit.
            options: Fit configuration, forwarded untouched by callers.

        Returns:
            The container's best-guess nearest member pitch.
        """
        ...
