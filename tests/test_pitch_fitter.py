"""
Tests for core/music_theory/pitch_fitter.py: duplication-minimizing fitting.

Validates:
    - circular_distance / to_window helpers
    - _resolve_proposals: closest wins, latest wins ties, engagements displaced
      only by proposals at least as close
    - PitchFitter: full 12-entry mapping, octave preservation, duplicate
      sources, displaced matches, fallbacks for empty inputs
    - fit options forwarded untouched to the container
"""

import logging

import pytest

from core.music_theory import Chord, InvalidPitchName, PitchFitter, build_scale
from core.music_theory.pitch_fitter import (
    WINDOW,
    Proposal,
    ProposalStatus,
    _resolve_proposals,
    _next_choice,
    circular_distance,
    to_window,
)
from tests.conftest import CLUSTERED_SOURCES

C_MAJOR_DEFAULT_MAP: dict[int, int] = {
    12: 12,
    13: 12,
    14: 14,
    15: 14,
    16: 16,
    17: 17,
    18: 17,
    19: 19,
    20: 19,
    21: 21,
    22: 21,
    23: 23,
}
"""What C major's own fit_pitch() does to each window pitch class."""


class RecordingContainer:
    """Wraps a container and records every options object it is handed."""

    def __init__(self, inner):
        self.inner = inner
        self.seen_options: list[object] = []

    def contains(self, pitch):
        return self.inner.contains(pitch)

    def fit_pitch(self, pitch, options=None):
        self.seen_options.append(options)
        return self.inner.fit_pitch(pitch, options)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestCircularDistance:
    def test_same_pitch_class(self):
        assert circular_distance(12, 12) == 0

    def test_short_way_round(self):
        assert circular_distance(12, 14) == 2
        assert circular_distance(14, 12) == 2

    def test_wraps_past_the_octave(self):
        assert circular_distance(12, 23) == 1
        assert circular_distance(22, 12) == 2

    def test_tritone_is_maximum(self):
        assert circular_distance(12, 18) == 6
        assert max(circular_distance(a, b) for a in WINDOW for b in WINDOW) == 6


class TestToWindow:
    def test_maps_into_12_to_23(self):
        assert to_window(0) == 12
        assert to_window(13) == 13
        assert to_window(61) == 13
        assert to_window(-1) == 23


# ---------------------------------------------------------------------------
# _resolve_proposals
# ---------------------------------------------------------------------------


class TestResolveProposals:
    def test_closest_pending_proposal_is_engaged(self):
        near = Proposal(man=14, woman=14, distance=0)
        far = Proposal(man=13, woman=14, distance=1)
        _resolve_proposals([far, near], [14])
        assert near.status is ProposalStatus.ENGAGED
        assert far.status is ProposalStatus.REJECTED

    def test_latest_proposal_wins_a_tie(self):
        first = Proposal(man=13, woman=14, distance=1)
        second = Proposal(man=15, woman=14, distance=1)
        _resolve_proposals([first, second], [14])
        assert second.status is ProposalStatus.ENGAGED
        assert first.status is ProposalStatus.REJECTED

    def test_equally_close_newcomer_displaces_engagement(self):
        engaged = Proposal(man=13, woman=14, distance=1, status=ProposalStatus.ENGAGED)
        newcomer = Proposal(man=15, woman=14, distance=1)
        _resolve_proposals([engaged, newcomer], [14])
        assert newcomer.status is ProposalStatus.ENGAGED
        assert engaged.status is ProposalStatus.REJECTED

    def test_farther_newcomer_is_rejected(self):
        engaged = Proposal(man=14, woman=14, distance=0, status=ProposalStatus.ENGAGED)
        newcomer = Proposal(man=15, woman=14, distance=1)
        _resolve_proposals([engaged, newcomer], [14])
        assert engaged.status is ProposalStatus.ENGAGED
        assert newcomer.status is ProposalStatus.REJECTED

    def test_only_listed_women_are_resolved(self):
        stray = Proposal(man=13, woman=20, distance=5)
        _resolve_proposals([stray], [12, 14])
        assert stray.status is ProposalStatus.PENDING

    def test_target_below_window_stays_pending(self):
        below = Proposal(man=12, woman=11, distance=1)
        _resolve_proposals([below], list(WINDOW))
        assert below.status is ProposalStatus.PENDING


# ---------------------------------------------------------------------------
# _next_choice
# ---------------------------------------------------------------------------


class TestNextChoice:
    def test_nearest_woman(self):
        assert _next_choice(12, [14, 16, 19], []) == 14

    def test_tie_goes_to_first_in_window_order(self):
        assert _next_choice(12, [13, 23], []) == 13
        assert _next_choice(18, [16, 20], []) == 16

    def test_women_who_rejected_him_are_skipped(self):
        proposals = [Proposal(man=12, woman=13, distance=1, status=ProposalStatus.REJECTED)]
        assert _next_choice(12, [13, 23], proposals) == 23

    def test_rejections_of_other_men_do_not_count(self):
        proposals = [Proposal(man=14, woman=13, distance=1, status=ProposalStatus.REJECTED)]
        assert _next_choice(12, [13, 23], proposals) == 13

    def test_pending_and_engaged_proposals_do_not_exclude(self):
        proposals = [
            Proposal(man=12, woman=13, distance=1),
            Proposal(man=12, woman=23, distance=1, status=ProposalStatus.ENGAGED),
        ]
        assert _next_choice(12, [13, 23], proposals) == 13

    def test_none_when_every_woman_rejected_him(self):
        proposals = [
            Proposal(man=12, woman=w, distance=1, status=ProposalStatus.REJECTED)
            for w in (13, 23)
        ]
        assert _next_choice(12, [13, 23], proposals) is None


# ---------------------------------------------------------------------------
# PitchFitter
# ---------------------------------------------------------------------------


class TestPitchFitterMapping:
    def test_mapping_has_twelve_entries(self, c_major):
        fitter = PitchFitter([1, 3], c_major)
        assert len(fitter.mapping) == 12
        assert sorted(fitter.mapping) == list(WINDOW)

    def test_mapping_is_a_copy(self, c_major):
        fitter = PitchFitter([1, 3], c_major)
        fitter.mapping[13] = 99
        assert fitter.fit_pitch(13) == 12

    def test_two_sources(self, c_major):
        fitter = PitchFitter([1, 3], c_major)
        assert {p: fitter.fit_pitch(p) for p in WINDOW} == C_MAJOR_DEFAULT_MAP

    def test_clustered_sources_avoid_duplication(self, c_major):
        fitter = PitchFitter(CLUSTERED_SOURCES, c_major)
        expected = {**C_MAJOR_DEFAULT_MAP, 22: 23}
        assert {p: fitter.fit_pitch(p) for p in WINDOW} == expected

    def test_more_distinct_outputs_than_naive_fit(self, c_major):
        fitter = PitchFitter(CLUSTERED_SOURCES, c_major)
        fitted = {fitter.fit_pitch(p) % 12 for p in CLUSTERED_SOURCES}
        naive = {c_major.fit_pitch(p) % 12 for p in CLUSTERED_SOURCES}
        assert len(naive) == 6
        assert len(fitted) == 7

    def test_every_target_used_when_sources_outnumber_targets(self, c_major):
        fitter = PitchFitter(range(12), c_major)
        outputs = {fitter.fit_pitch(p) % 12 for p in range(12)}
        assert outputs == set(c_major.pitches)

    def test_duplicate_sources_are_ignored(self, c_major):
        once = PitchFitter([1, 3], c_major)
        twice = PitchFitter([1, 3, 13, 15], c_major)
        assert twice.mapping == once.mapping

    def test_duplicate_chord_pitches_are_ignored(self):
        chord = Chord().set_root(0).add_pitches([2, 4, 5, 7, 9, 11, 12, 14])
        fitter = PitchFitter([1, 3, 13, 15], chord)
        assert {p: fitter.fit_pitch(p) for p in WINDOW} == C_MAJOR_DEFAULT_MAP

    def test_sources_may_be_pitch_names(self, c_major):
        by_name = PitchFitter(["C#", "D#4"], c_major)
        by_number = PitchFitter([1, 3], c_major)
        assert by_name.mapping == by_number.mapping


class TestDefaultFitOutsideWindow:
    """Round-1 targets below 12 or above 23 are not in the window and wait for round 2."""

    def test_b_major_c_moves_up_to_c_sharp(self):
        # B major's own fit sends C (12) down to the root B (11)
        b_major = build_scale("B", "major")
        assert b_major.fit_pitch(12) == 11

        fitter = PitchFitter([0], b_major)
        assert fitter.mapping[12] == 13
        assert fitter.fit_pitch(12) == 13
        assert fitter.fit_pitch(60) == 61

    def test_b_major_never_wraps_an_octave(self):
        fitter = PitchFitter([0], build_scale("B", "major"))
        for pitch in range(0, 128):
            assert abs(fitter.fit_pitch(pitch) - pitch) <= 6

    def test_non_sources_keep_default_fit(self):
        fitter = PitchFitter([0], build_scale("B", "major"))
        assert fitter.mapping[14] == 13
        assert fitter.mapping[23] == 23

    def test_d_major_source_differs_from_fallback(self):
        d_major = build_scale("D", "major")
        assert PitchFitter([], d_major).fit_pitch(60) == 59
        assert PitchFitter([0], d_major).fit_pitch(60) == 61

    def test_matching_takes_a_second_round(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="core.music_theory.pitch_fitter"):
            PitchFitter([0], build_scale("B", "major"))
        assert "1 sources, 7 targets, 1 pairs after 2 rounds" in caplog.text

    def test_c_major_needs_one_round(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="core.music_theory.pitch_fitter"):
            PitchFitter([1, 3], build_scale("C", "major"))
        assert "2 sources, 7 targets, 2 pairs after 1 rounds" in caplog.text


class TestPitchFitterFallbacks:
    def test_no_sources_uses_container_fit(self, c_major):
        fitter = PitchFitter([], c_major)
        assert fitter.mapping == C_MAJOR_DEFAULT_MAP

    def test_empty_container_maps_every_pitch_to_itself(self, caplog):
        with caplog.at_level(logging.WARNING, logger="core.music_theory.pitch_fitter"):
            fitter = PitchFitter([1, 3], Chord())
        assert fitter.mapping == {p: p for p in WINDOW}
        assert fitter.fit_pitch(61) == 61
        assert "contains no pitch classes" in caplog.text

    def test_both_empty(self):
        fitter = PitchFitter([], Chord())
        assert len(fitter.mapping) == 12

    def test_fallback_keeps_container_octave(self):
        # D major has no C; C (12) falls back to the B just below it
        fitter = PitchFitter([], build_scale("D", "major"))
        assert fitter.mapping[12] == 11
        assert fitter.fit_pitch(60) == 59


class TestPitchFitterFitPitch:
    def test_same_octave_as_input(self, c_major):
        fitter = PitchFitter(CLUSTERED_SOURCES, c_major)
        assert fitter.fit_pitch(1) == 0
        assert fitter.fit_pitch(13) == 12
        assert fitter.fit_pitch(25) == 24
        assert fitter.fit_pitch(37) == 36
        assert fitter.fit_pitch(49) == 48

    def test_negative_pitches(self, c_major):
        fitter = PitchFitter(CLUSTERED_SOURCES, c_major)
        assert fitter.fit_pitch(-11) == -12
        assert fitter.fit_pitch(-2) == -1

    def test_octave_offset_is_preserved(self, c_major):
        fitter = PitchFitter(CLUSTERED_SOURCES, c_major)
        for pitch in range(-24, 128):
            base = pitch % 12
            assert fitter.fit_pitch(pitch) - fitter.fit_pitch(base) == pitch - base

    def test_repeated_calls_agree(self, c_major):
        fitter = PitchFitter(CLUSTERED_SOURCES, c_major)
        assert [fitter.fit_pitch(70) for _ in range(5)] == [71] * 5

    def test_string_input(self, c_major):
        fitter = PitchFitter(CLUSTERED_SOURCES, c_major)
        assert fitter.fit_pitch("C1") == 24
        assert fitter.fit_pitch("C1") == fitter.fit_pitch(24)
        assert fitter.fit_pitch("A#4") == 71

    def test_invalid_name_propagates(self, c_major):
        fitter = PitchFitter([1, 3], c_major)
        with pytest.raises(InvalidPitchName):
            fitter.fit_pitch("H2")

    def test_fit_pitches(self, c_major):
        fitter = PitchFitter(CLUSTERED_SOURCES, c_major)
        assert fitter.fit_pitches([61, 66, 70, "A#4"]) == [60, 65, 71, 71]


class TestPitchFitterOptimize:
    def test_optimize_replaces_mapping(self, c_major):
        fitter = PitchFitter([1, 3], c_major)
        assert fitter.fit_pitch(22) == 21
        fitter.optimize(CLUSTERED_SOURCES, c_major)
        assert fitter.fit_pitch(22) == 23
        fitter.optimize([1, 3], c_major)
        assert fitter.fit_pitch(22) == 21

    def test_optimize_returns_none(self, c_major):
        fitter = PitchFitter([1, 3], c_major)
        assert fitter.optimize([1, 3], c_major) is None

    def test_fit_options_forwarded_untouched(self, c_major):
        options = {"max_movement": 1}
        container = RecordingContainer(c_major)
        PitchFitter(CLUSTERED_SOURCES, container, options)
        assert container.seen_options
        assert all(seen is options for seen in container.seen_options)

    def test_fit_options_change_default_fit(self, c_major):
        fitter = PitchFitter([], c_major, {"preferred_direction": "up", "prefer_root": False})
        assert fitter.fit_pitch(13) == 14
        assert fitter.fit_pitch(18) == 19

    def test_instances_do_not_share_state(self, c_major):
        first = PitchFitter(CLUSTERED_SOURCES, c_major)
        second = PitchFitter([1, 3], c_major)
        assert first.fit_pitch(22) == 23
        assert second.fit_pitch(22) == 21
