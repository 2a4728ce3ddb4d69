"""
core/music_theory/fitting.py: Default nearest-member fit shared by containers.

fit_to_container() is the "naive" fit that every pitch container offers on
its own. It looks at one pitch at a time, which is why several inputs can
collapse onto the same output; PitchFitter builds on top of it.

Algorithm:
    1. Resolve the preferred direction (+1 up, -1 down, seeded coin flip)
    2. Start two probes on the input (for fractional input, on the two
       surrounding integers, probe 1 on the preferred side)
    3. While either probe is within max_movement of the input:
       a. If prefer_root and a probe sits on the root, return it
       b. If either probe is a member, return the closer one
          (probe 1 on equal distance)
       c. Step probe 1 in the preferred direction, probe 2 the other way
    4. Nothing in range: return the input rounded half up
"""

from __future__ import annotations

import math
import random
from collections.abc import Callable

from core.music_theory.pitch import pitch_class
from core.music_theory.types import FitDirection, FitPitchOptions


def _resolve_direction(options: FitPitchOptions) -> int:
    if options.preferred_direction is FitDirection.UP:
        return 1
    if options.preferred_direction is FitDirection.DOWN:
        return -1
    return 1 if random.Random(options.seed).random() >= 0.5 else -1


def fit_to_container(
    pitch: float,
    contains: Callable[[int], bool],
    root: int | None,
    options: FitPitchOptions,
) -> int:
    """Return the nearest pitch to ``pitch`` accepted by ``contains``.

    Args:
        pitch:    Absolute pitch, may be fractional (e.g. from pitch bend).
        contains: Membership test of the container.
        root:     Root pitch class of the container, or None if it has none.
        options:  Fit configuration.

    Returns:
        The fitted integer pitch, or ``pitch`` rounded if no member lies
        within ``options.max_movement``.
    """
    direction = _resolve_direction(options)

    probe1: float = pitch
    probe2: float = pitch
    if pitch % 1 != 0:
        probe1 = math.ceil(pitch) if direction > 0 else math.floor(pitch)
        probe2 = math.floor(pitch) if direction > 0 else math.ceil(pitch)

    while True:
        probe1_valid = abs(probe1 - pitch) <= options.max_movement
        probe2_valid = abs(probe2 - pitch) <= options.max_movement
        if not probe1_valid and not probe2_valid:
            break

        if options.prefer_root and root is not None:
            if probe1_valid and pitch_class(int(probe1)) == root:
                return int(probe1)
            if probe2_valid and pitch_class(int(probe2)) == root:
                return int(probe2)

        probe1_fits = probe1_valid and contains(int(probe1))
        probe2_fits = probe2_valid and contains(int(probe2))
        if probe1_fits and probe2_fits:
            if abs(probe1 - pitch) <= abs(probe2 - pitch):
                return int(probe1)
            return int(probe2)
        if probe1_fits:
            return int(probe1)
        if probe2_fits:
            return int(probe2)

        probe1 += direction
        probe2 -= direction

    return math.floor(pitch + 0.5)
