"""
Signal scoring: merge bucket membership and click-next counts into one score per candidate.

Flat weights for lineage, same creator, same server/method, and fallback (10%);
click-next is normalized against the strongest click target so it never
exceeds click_next_weight.
"""

from typing import Dict, List

from ...models.config import RecommendationConfig
from ...models.item import ContentItem, ItemId
from ...models.scoring import Reason, ScoredCandidate
from ..buckets import SignalBuckets

# Share of fallback_weight a fallback candidate receives.
FALLBACK_WEIGHT_SHARE = 0.1


def _add_score(
    scored: Dict[ItemId, ScoredCandidate],
    item: ContentItem,
    delta: float,
    reason: Reason,
) -> ScoredCandidate:
    row = scored.get(item.id)
    if row is None:
        row = ScoredCandidate(item=item)
        scored[item.id] = row
    row.score += delta
    row.add_reason(reason)
    return row


def click_counts_by_id(buckets: SignalBuckets) -> Dict[ItemId, float]:
    """Summed effective click counts per target; targets that decayed to zero are dropped."""
    counts: Dict[ItemId, float] = {}
    for c in buckets.click_next:
        if c.effective_count <= 0:
            continue
        counts[c.item.id] = counts.get(c.item.id, 0.0) + c.effective_count
    return counts


def score_candidates(
    buckets: SignalBuckets,
    config: RecommendationConfig,
) -> List[ScoredCandidate]:
    """
    Build one row per unique candidate and return them sorted by score (desc).

    click-next: weight * (effective / max effective), recorded on the row as
    click_effective_count and click_share. Ties keep bucket encounter order.
    """
    scored: Dict[ItemId, ScoredCandidate] = {}

    for item in buckets.lineage:
        _add_score(scored, item, config.lineage_weight, Reason.LINEAGE)
    for item in buckets.same_creator:
        _add_score(scored, item, config.same_creator_weight, Reason.SAME_CREATOR)
    for item in buckets.same_server_method:
        _add_score(scored, item, config.same_server_method_weight, Reason.SAME_SERVER_METHOD)

    click_items = {c.item.id: c.item for c in buckets.click_next}
    click_counts = click_counts_by_id(buckets)
    click_max = max(click_counts.values(), default=0.0)
    if click_max > 0:
        for item_id, click_count in click_counts.items():
            share = click_count / click_max
            row = _add_score(
                scored,
                click_items[item_id],
                config.click_next_weight * share,
                Reason.CLICK_NEXT,
            )
            row.click_effective_count = click_count
            row.click_share = share

    for item in buckets.fallback:
        _add_score(scored, item, config.fallback_weight * FALLBACK_WEIGHT_SHARE, Reason.FALLBACK)

    return sorted(scored.values(), key=lambda row: row.score, reverse=True)
