"""
Slot allocation — assemble the final fixed-size batch from the ranking.

Guess strategy: click-next slots (all deterministic slots under hard
preference, a soft share otherwise), then lineage top-up, then plain score
order, plus shuffled exploration slots from the fallback bucket.
Explore strategy: a few top-ranked guess rows, a shuffled explore share,
and the rest from the ranking.
"""

from typing import List, Set, Tuple

from ...computed_params import SlotPlan
from ...models.config import RecommendationConfig
from ...models.item import ContentItem, ItemId
from ...models.scoring import ColdStrategy, Reason, RecommendedItem, ScoredCandidate
from ...utils.rows import dedupe_by_id
from ...utils.sampling import shuffle_in_place
from ...utils.scores import round_half_up

# Sort tiers under hard preference; lower sorts first.
TIER_CLICK_NEXT = 0
TIER_LINEAGE = 1
TIER_CONTEXT = 2
TIER_EXPLORE = 3
TIER_NONE = 4


def reason_tier(row: ScoredCandidate) -> int:
    if row.has_reason(Reason.CLICK_NEXT):
        return TIER_CLICK_NEXT
    if row.has_reason(Reason.LINEAGE):
        return TIER_LINEAGE
    if (
        row.has_reason(Reason.SAME_CREATOR)
        or row.has_reason(Reason.SAME_SERVER_METHOD)
        or row.has_reason(Reason.FALLBACK)
    ):
        return TIER_CONTEXT
    if row.has_reason(Reason.EXPLORE_RANDOM):
        return TIER_EXPLORE
    return TIER_NONE


def _click_key(row: ScoredCandidate) -> Tuple[float, float]:
    return (-(row.click_effective_count or 0.0), -row.score)


def batch_sort_key(row: ScoredCandidate, hard_preference: bool) -> Tuple[float, ...]:
    """Tier, then click count (click-next tier only), then score; score only without hard preference."""
    if not hard_preference:
        return (-row.score,)
    tier = reason_tier(row)
    click = -(row.click_effective_count or 0.0) if tier == TIER_CLICK_NEXT else 0.0
    return (tier, click, -row.score)


def _explore_rows(
    fallback: List[ContentItem],
    used: Set[ItemId],
    config: RecommendationConfig,
) -> List[ScoredCandidate]:
    """Unused fallback items as fresh exploreRandom rows, shuffled with the injected rng."""
    rows = [
        ScoredCandidate(item=item, reasons=[Reason.EXPLORE_RANDOM])
        for item in fallback
        if item.id not in used
    ]
    return shuffle_in_place(rows, config.rng)


def _take(
    rows: List[ScoredCandidate],
    limit: int,
    selected: List[ScoredCandidate],
    used: Set[ItemId],
) -> None:
    """Append unused rows to selected until it holds limit rows."""
    for row in rows:
        if len(selected) >= limit:
            break
        if row.id in used:
            continue
        selected.append(row)
        used.add(row.id)


def allocate_guess(
    ranked: List[ScoredCandidate],
    fallback: List[ContentItem],
    plan: SlotPlan,
    config: RecommendationConfig,
) -> List[ScoredCandidate]:
    """Deterministic click/lineage/score slots plus random exploration slots."""
    click_ranked = sorted(
        (row for row in ranked if row.has_reason(Reason.CLICK_NEXT)),
        key=_click_key,
    )
    if config.hard_preference:
        click_slots = min(len(click_ranked), plan.deterministic_slots)
    else:
        click_slots = min(len(click_ranked), plan.soft_click_slots)

    deterministic: List[ScoredCandidate] = []
    used: Set[ItemId] = set()
    _take(click_ranked, click_slots, deterministic, used)

    lineage_count = sum(1 for row in deterministic if row.has_reason(Reason.LINEAGE))
    for row in ranked:
        if len(deterministic) >= plan.deterministic_slots or lineage_count >= plan.lineage_target:
            break
        if row.id in used or not row.has_reason(Reason.LINEAGE):
            continue
        deterministic.append(row)
        used.add(row.id)
        lineage_count += 1

    _take(ranked, plan.deterministic_slots, deterministic, used)

    random_pick = _explore_rows(fallback, used, config)[: plan.random_slots]
    random_ids = {row.id for row in random_pick}
    shortfall = max(0, plan.random_slots - len(random_pick))
    random_fill = [
        row.with_reason(Reason.EXPLORE_RANDOM)
        for row in ranked
        if row.id not in used and row.id not in random_ids
    ][:shortfall]

    return dedupe_by_id(deterministic + random_pick + random_fill)


def allocate_explore(
    ranked: List[ScoredCandidate],
    fallback: List[ContentItem],
    plan: SlotPlan,
    config: RecommendationConfig,
) -> List[ScoredCandidate]:
    """Cold start: top guess rows, a shuffled explore share, then fill from the ranking."""
    top_guess = ranked[: plan.cold_guess_slots]
    used = {row.id for row in top_guess}
    explore_pick = _explore_rows(fallback, used, config)[: plan.cold_explore_slots]
    remaining = max(0, plan.batch_size - (len(top_guess) + len(explore_pick)))
    fill = [row for row in ranked if row.id not in used][:remaining]
    return dedupe_by_id(top_guess + explore_pick + fill)[: plan.batch_size]


def allocate_slots(
    ranked: List[ScoredCandidate],
    fallback: List[ContentItem],
    strategy: ColdStrategy,
    plan: SlotPlan,
    config: RecommendationConfig,
) -> List[ScoredCandidate]:
    """Assemble the batch for the chosen strategy and order it for display."""
    if strategy == ColdStrategy.EXPLORE:
        batch = allocate_explore(ranked, fallback, plan, config)
    else:
        batch = allocate_guess(ranked, fallback, plan, config)
    batch.sort(key=lambda row: batch_sort_key(row, config.hard_preference))
    return batch[: plan.batch_size]


def to_recommended_item(row: ScoredCandidate) -> RecommendedItem:
    """Public output row: score to 2 decimals, click diagnostics to 4 (0 when absent)."""
    return RecommendedItem(
        id=row.id,
        score=round_half_up(row.score, 2),
        reasons=[reason.value for reason in row.reasons],
        click_score=(
            round_half_up(row.click_effective_count, 4)
            if row.click_effective_count is not None
            else 0.0
        ),
        click_share=round_half_up(row.click_share, 4) if row.click_share is not None else 0.0,
    )
