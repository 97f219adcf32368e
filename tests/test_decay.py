"""
Transition decay tests: half-life decay, hard window cutoff, and pass-through.

Run:
----
    pytest tests/test_decay.py -v
"""

from datetime import timedelta

import pytest

from recsys.utils.scores import (
    age_days,
    round_half_up,
    transition_decay,
    transition_effective_count,
)

from .conftest import NOW


class TestAgeDays:
    def test_elapsed_days(self):
        assert age_days(NOW - timedelta(days=3, hours=12), NOW) == pytest.approx(3.5)

    def test_future_timestamps_clamp_to_zero(self):
        assert age_days(NOW + timedelta(days=2), NOW) == 0.0


class TestEffectiveCount:
    def test_no_decay_at_age_zero(self):
        assert transition_effective_count(5, 0.0, 7, 0) == pytest.approx(5.0)

    def test_one_half_life_halves_the_count(self):
        assert transition_effective_count(8, 7.0, 7, 0) == pytest.approx(4.0)

    def test_window_only_is_hard_cutoff(self):
        assert transition_effective_count(10, 13.9, 0, 14) == 10
        assert transition_effective_count(10, 14.1, 0, 14) == 0.0

    def test_half_life_wins_over_window(self):
        # Both set: decay applies, the window is ignored.
        assert transition_effective_count(8, 30.0, 15, 14) == pytest.approx(2.0)

    def test_neither_set_passes_counts_through(self):
        assert transition_effective_count(9, 400.0, 0, 0) == 9
        assert transition_effective_count(9, 400.0, None, 0) == 9

    def test_non_finite_half_life_disables_decay(self):
        assert transition_decay(10.0, float("nan")) == 1.0
        assert transition_effective_count(3, 100.0, float("nan"), 7) == 0.0


def test_round_half_up_matches_display_rounding():
    assert round_half_up(0.125, 2) == pytest.approx(0.13)
    assert round_half_up(2.5, 0) == 3.0
    assert round_half_up(252.0, 2) == 252.0
