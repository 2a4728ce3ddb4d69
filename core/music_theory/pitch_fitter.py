"""
core/music_theory/pitch_fitter.py: Duplication-minimizing pitch fitting.

Fitting pitches one at a time with a scale or chord's own fit_pitch() often
sends several different input pitches to the same output pitch. PitchFitter
instead takes the whole collection of pitches to optimize for and assigns
each pitch class its own target where it can, using a modified stable
marriage algorithm:

    men   = source pitch classes (the pitches we want to fit)
    women = pitch classes that belong to the container

Algorithm:
    1. Normalize sources and container members into the window 12–23,
       dropping duplicate source pitch classes
    2. Round 1: every man proposes to the woman the container's own
       fit_pitch() would choose for him. A choice outside the window is
       no woman at all: it stays pending and he proposes again in round 2
    3. Each woman keeps her closest pending proposal (circular semitone
       distance, latest proposal wins ties). A contender at least as close
       as her current engagement replaces it; all other proposals to her
       are rejected
    4. Later rounds: every unengaged man proposes to the nearest woman who
       has not yet rejected him; repeat 3
    5. Stop once min(#men, #women) pairs are engaged
    6. Engagements become mapping entries; unengaged men and every pitch
       class that was not a source fall back to the container's fit_pitch()

Unlike classic Gale-Shapley the two sides may differ in size, and matching
stops as soon as no further distinct pairing is possible.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from core.music_theory.pitch import OCTAVE, pitch_class, to_pitch
from core.music_theory.types import FitPitchOptions, PitchContainer

logger = logging.getLogger(__name__)

# Pitch classes are handled one octave up (12–23) so that lookups never
# have to deal with negative numbers.
WINDOW_LOW: int = OCTAVE
WINDOW: tuple[int, ...] = tuple(range(WINDOW_LOW, WINDOW_LOW + OCTAVE))


class ProposalStatus(Enum):
    PENDING = 0
    ENGAGED = 1
    REJECTED = -1


@dataclass
class Proposal:
    """One source pitch class asking to be mapped onto one target pitch class."""

    man: int
    woman: int
    distance: int
    status: ProposalStatus = ProposalStatus.PENDING


def to_window(pitch: int) -> int:
    """Return the pitch class of ``pitch`` expressed within the 12–23 window."""
    return pitch_class(pitch) + WINDOW_LOW


def circular_distance(a: int, b: int) -> int:
    """Shortest distance in semitones between two pitch classes (0–6)."""
    distance = abs(a - b)
    if distance > 6:
        distance = OCTAVE - distance
    return distance


def _resolve_proposals(proposals: list[Proposal], women: Iterable[int]) -> None:
    """Let every woman pick between her engagement and her pending proposals."""
    for woman in women:
        pending = [
            p for p in proposals if p.woman == woman and p.status is ProposalStatus.PENDING
        ]
        if not pending:
            continue

        best = pending[0]
        for proposal in pending[1:]:
            if proposal.distance <= best.distance:
                best = proposal

        engagement = next(
            (p for p in proposals if p.woman == woman and p.status is ProposalStatus.ENGAGED),
            None,
        )
        if engagement is not None and best.distance > engagement.distance:
            best = engagement
        elif engagement is not None:
            engagement.status = ProposalStatus.REJECTED

        best.status = ProposalStatus.ENGAGED
        for proposal in pending:
            if proposal is not best:
                proposal.status = ProposalStatus.REJECTED


def _next_choice(man: int, women: list[int], proposals: list[Proposal]) -> int | None:
    """Nearest woman who hasn't rejected ``man`` (first in window order on ties)."""
    rejected_by = {
        p.woman for p in proposals if p.man == man and p.status is ProposalStatus.REJECTED
    }
    candidates = [w for w in women if w not in rejected_by]
    if not candidates:
        return None
    return min(candidates, key=lambda w: circular_distance(man, w))


def _engaged_count(proposals: list[Proposal]) -> int:
    return sum(1 for p in proposals if p.status is ProposalStatus.ENGAGED)


class PitchFitter:
    """Fits pitches to a scale or chord while avoiding duplicate outputs.

    The fitter is built for a particular collection of pitches and a pitch
    container; it can then fit any pitch in any octave. Call optimize() to
    rebuild it for new inputs.

    Example:
        >>> scale = build_scale("C", "major")
        >>> fitter = PitchFitter([1, 3], scale)
        >>> fitter.fit_pitch(13), fitter.fit_pitch(15)
        (12, 14)
    """

    def __init__(
        self,
        pitches: Iterable[int | str],
        pitch_container: PitchContainer,
        fit_options: FitPitchOptions | Mapping[str, Any] | None = None,
    ) -> None:
        self._map: dict[int, int] = {}
        self.optimize(pitches, pitch_container, fit_options)

    @property
    def mapping(self) -> dict[int, int]:
        """Copy of the fitted table, window pitch class → fitted pitch."""
        return dict(self._map)

    def optimize(
        self,
        pitches: Iterable[int | str],
        pitch_container: PitchContainer,
        fit_options: FitPitchOptions | Mapping[str, Any] | None = None,
    ) -> None:
        """Discard the current fitting and recalculate it.

        Args:
            pitches:         Pitches to optimize the mapping for. Duplicates
                             and octave repeats count once.
            pitch_container: Scale/chord the pitches are fitted to.
            fit_options:     Passed unchanged to every pitch_container.fit_pitch() call.
        """
        women = [w for w in WINDOW if pitch_container.contains(w)]
        men = list(dict.fromkeys(to_window(to_pitch(p)) for p in pitches))
        if not women:
            logger.warning(
                "PitchFitter: %r contains no pitch classes, falling back to its default fit",
                pitch_container,
            )

        proposals: list[Proposal] = []

        for man in men:
            woman = pitch_container.fit_pitch(man, fit_options)
            proposals.append(Proposal(man, woman, circular_distance(man, woman)))
        _resolve_proposals(proposals, women)

        target = min(len(men), len(women))
        rounds = 1
        while _engaged_count(proposals) < target:
            engaged_men = {p.man for p in proposals if p.status is ProposalStatus.ENGAGED}
            new_proposals = 0
            for man in men:
                if man in engaged_men:
                    continue
                woman = _next_choice(man, women, proposals)
                if woman is None:
                    continue
                proposals.append(Proposal(man, woman, circular_distance(man, woman)))
                new_proposals += 1
            if new_proposals == 0:
                break
            _resolve_proposals(proposals, women)
            rounds += 1

        mapping: dict[int, int] = {}
        for proposal in proposals:
            if proposal.status is ProposalStatus.ENGAGED:
                mapping[proposal.man] = proposal.woman

        unmatched = [man for man in men if man not in mapping]
        if unmatched and women:
            logger.debug(
                "PitchFitter: %d of %d source pitch classes unmatched, using default fit: %s",
                len(unmatched),
                len(men),
                unmatched,
            )
        for pitch in WINDOW:
            if pitch not in mapping:
                mapping[pitch] = pitch_container.fit_pitch(pitch, fit_options)

        logger.debug(
            "PitchFitter: %d sources, %d targets, %d pairs after %d rounds",
            len(men),
            len(women),
            _engaged_count(proposals),
            rounds,
        )
        self._map = mapping

    def fit_pitch(self, pitch: int | str) -> int:
        """Return a pitch near ``pitch`` that fits the optimized container.

        The result keeps the octave of the input: the fitted pitch class is
        shifted by the same number of octaves that normalization removed.

        Args:
            pitch: Absolute pitch, or a pitch name such as "C1" or "F#".

        Returns:
            The fitted pitch.

        Raises:
            InvalidPitchName: If ``pitch`` is a string that is not a pitch name
        """
        pitch = to_pitch(pitch)
        lookup = to_window(pitch)
        return self._map[lookup] + pitch - lookup

    def fit_pitches(self, pitches: Iterable[int | str]) -> list[int]:
        """Fit each pitch in turn."""
        return [self.fit_pitch(p) for p in pitches]
