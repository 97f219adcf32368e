"""
Signal scoring and lineage minimum-slot tests.

Run:
----
    pytest tests/test_scoring.py -v
"""

import pytest

from recsys.models import Reason, RecommendationConfig, ScoredCandidate, ensure_item, ensure_items, ensure_transitions
from recsys.stages.buckets import build_signal_buckets
from recsys.stages.ranking import enforce_lineage_min_slots, score_candidates

from .conftest import fixed_clock


def _ranked(anchor, pool, transitions, **overrides):
    config = RecommendationConfig(now=fixed_clock, **overrides)
    buckets = build_signal_buckets(
        ensure_item(anchor), ensure_items(pool), ensure_transitions(transitions), config
    )
    return score_candidates(buckets, config)


def _row(item_id, score, *reasons):
    return ScoredCandidate(item={"id": item_id}, score=score, reasons=list(reasons))


class TestScoreCandidates:
    def test_flat_weights_and_reasons(self, anchor, sample_pool):
        ranked = _ranked(anchor, sample_pool, [])
        by_id = {row.id: row for row in ranked}
        # lineage 100 + creator 50 + server/method 80 + fallback 20 * 0.1
        assert by_id[2].score == pytest.approx(232.0)
        assert by_id[2].reasons == [
            Reason.LINEAGE, Reason.SAME_CREATOR, Reason.SAME_SERVER_METHOD, Reason.FALLBACK,
        ]
        assert by_id[6].score == pytest.approx(80.0)
        assert by_id[5].reasons == [Reason.FALLBACK]
        assert [row.id for row in ranked][:3] == [2, 4, 3]

    def test_click_next_is_normalized_to_weight(self, anchor, sample_pool, sample_transitions):
        ranked = _ranked(
            anchor,
            sample_pool,
            sample_transitions,
            lineage_weight=0,
            same_creator_weight=0,
            same_server_method_weight=0,
            fallback_weight=0,
            click_next_weight=100,
        )
        click_rows = [row for row in ranked if row.has_reason(Reason.CLICK_NEXT)]
        assert {row.id for row in click_rows} == {2, 4, 6, 7}
        for row in ranked:
            assert row.score <= 100
        top = ranked[0]
        assert top.id == 4
        assert top.score == pytest.approx(100.0)
        assert top.click_share == pytest.approx(1.0)
        two = next(row for row in click_rows if row.id == 2)
        assert two.click_share == pytest.approx(0.4)

    def test_duplicate_transitions_sum_per_target(self, anchor, sample_pool):
        transitions = [
            {"from_created_image_id": 1, "to_created_image_id": 5, "count": 2},
            {"from_created_image_id": 1, "to_created_image_id": 5, "count": 3},
            {"from_created_image_id": 1, "to_created_image_id": 7, "count": 10},
        ]
        ranked = _ranked(anchor, sample_pool, transitions)
        five = next(row for row in ranked if row.id == 5)
        assert five.click_effective_count == pytest.approx(5.0)
        assert five.click_share == pytest.approx(0.5)

    def test_zero_effective_counts_add_no_click_reason(self, anchor, sample_pool, sample_transitions):
        ranked = _ranked(
            anchor, sample_pool, sample_transitions, decay_half_life_days=0, window_days=14
        )
        six = next(row for row in ranked if row.id == 6)
        assert not six.has_reason(Reason.CLICK_NEXT)
        assert six.click_effective_count is None

    def test_empty_pool_scores_nothing(self, anchor):
        assert _ranked(anchor, [anchor], []) == []


class TestLineageMinSlots:
    def test_promotes_lineage_into_the_head(self):
        ranked = [_row(10, 90), _row(11, 80), _row(12, 70), _row(13, 20), _row(14, 10)]
        out = enforce_lineage_min_slots(ranked, {13, 14}, 2)
        assert [row.id for row in out] == [13, 14, 12, 10, 11]

    def test_keeps_existing_lineage_and_fills_the_gap(self):
        ranked = [_row(10, 90), _row(13, 80), _row(11, 70), _row(14, 10)]
        out = enforce_lineage_min_slots(ranked, {13, 14}, 2)
        assert [row.id for row in out] == [13, 14, 11, 10]

    def test_survivors_keep_their_place_when_lineage_is_short(self):
        ranked = [_row(10, 90), _row(11, 80), _row(12, 70), _row(13, 20)]
        out = enforce_lineage_min_slots(ranked, {13}, 3)
        assert [row.id for row in out][:3] == [10, 11, 13]
        assert [row.id for row in out] == [10, 11, 13, 12]

    def test_noop_when_satisfied_or_disabled(self):
        ranked = [_row(13, 90), _row(14, 80), _row(10, 70)]
        assert enforce_lineage_min_slots(ranked, {13, 14}, 2) is ranked
        assert enforce_lineage_min_slots(ranked, {10}, 0) is ranked
        assert enforce_lineage_min_slots(ranked, set(), 2) is ranked

    def test_never_duplicates_ids(self):
        ranked = [_row(i, 100 - i) for i in range(10)]
        out = enforce_lineage_min_slots(ranked, {5, 7, 9}, 4)
        ids = [row.id for row in out]
        assert len(ids) == len(set(ids)) == 10
        assert {5, 7, 9} <= set(ids[:4])
