"""
Stage A: Signal Buckets

Partitions the candidate pool into signal buckets relative to the anchor:
lineage, same creator, same server/method, and time-proximity fallback.
Click-next candidates are resolved separately from the transition log and
paired with their decayed effective counts.

Buckets are truncated in encounter order (no sorting at this stage).
The public entry point is build_signal_buckets.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List

from ..models.config import RecommendationConfig
from ..models.item import ContentItem, ItemId
from ..models.transition import Transition
from ..utils.scores import SECONDS_PER_DAY, age_days, transition_effective_count

logger = logging.getLogger(__name__)

# Fallback bucket: candidates created within this many days of the anchor.
FALLBACK_WINDOW_DAYS = 7


@dataclass
class ClickCandidate:
    """A pool item reached from the anchor by a recorded transition."""

    item: ContentItem
    transition: Transition
    age_days: float
    effective_count: float


@dataclass
class SignalBuckets:
    lineage: List[ContentItem] = field(default_factory=list)
    same_creator: List[ContentItem] = field(default_factory=list)
    same_server_method: List[ContentItem] = field(default_factory=list)
    click_next: List[ClickCandidate] = field(default_factory=list)
    fallback: List[ContentItem] = field(default_factory=list)

    def sizes(self) -> Dict[str, int]:
        return {
            "lineage": len(self.lineage),
            "sameCreator": len(self.same_creator),
            "sameServerMethod": len(self.same_server_method),
            "clickNext": len(self.click_next),
            "fallback": len(self.fallback),
        }


def is_same_lineage(a: ContentItem, b: ContentItem) -> bool:
    """Shared family id, or one item is the direct parent of the other."""
    if a.family_id is not None and b.family_id is not None and a.family_id == b.family_id:
        return True
    if a.meta.mutate_of_id is not None and a.meta.mutate_of_id == b.id:
        return True
    if b.meta.mutate_of_id is not None and b.meta.mutate_of_id == a.id:
        return True
    return False


def is_same_creator(a: ContentItem, b: ContentItem) -> bool:
    # Two items both missing a user_id are not the same creator.
    return a.user_id is not None and a.user_id == b.user_id


def is_same_server_method(a: ContentItem, b: ContentItem) -> bool:
    """Both server and method present on the anchor and equal on the candidate."""
    # Absent server/method on both sides is not a match.
    if a.meta.server_id is None or a.meta.method is None:
        return False
    return a.meta.server_id == b.meta.server_id and a.meta.method == b.meta.method


def _eligible_candidates(anchor: ContentItem, pool: List[ContentItem]) -> Dict[ItemId, ContentItem]:
    """Pool minus the anchor; first row wins per id. Unpublished items stay in."""
    eligible: Dict[ItemId, ContentItem] = {}
    for item in pool:
        if item.id == anchor.id:
            continue
        eligible.setdefault(item.id, item)
    return eligible


def _click_candidates(
    anchor: ContentItem,
    transitions: List[Transition],
    eligible: Dict[ItemId, ContentItem],
    config: RecommendationConfig,
    now: datetime,
) -> List[ClickCandidate]:
    """Transitions out of the anchor into the pool, capped at transition_cap_per_from."""
    outgoing = [
        t for t in transitions
        if t.from_id == anchor.id and t.to_id in eligible
    ][: config.transition_cap_per_from]
    candidates = []
    for t in outgoing:
        age = age_days(t.last_updated or now, now)
        effective = transition_effective_count(
            max(0.0, t.count),
            age,
            config.decay_half_life_days,
            config.window_days,
        )
        candidates.append(
            ClickCandidate(
                item=eligible[t.to_id],
                transition=t,
                age_days=age,
                effective_count=effective,
            )
        )
    return candidates


def _fallback_candidates(
    anchor: ContentItem,
    eligible: Dict[ItemId, ContentItem],
    now: datetime,
) -> List[ContentItem]:
    """Candidates created within FALLBACK_WINDOW_DAYS of the anchor; all candidates if none are."""
    anchor_ts = anchor.created_at or now
    around = [
        item for item in eligible.values()
        if abs(((item.created_at or now) - anchor_ts).total_seconds()) / SECONDS_PER_DAY
        <= FALLBACK_WINDOW_DAYS
    ]
    return around or list(eligible.values())


def build_signal_buckets(
    anchor: ContentItem,
    pool: List[ContentItem],
    transitions: List[Transition],
    config: RecommendationConfig,
) -> SignalBuckets:
    """
    Stage A: bucket the pool by signal.

    Every bucket except click_next is capped at candidate_cap_per_signal;
    click_next is capped by transition_cap_per_from when transitions are read.
    """
    now = config.current_time()
    eligible = _eligible_candidates(anchor, pool)
    buckets = SignalBuckets()

    for item in eligible.values():
        # Unpublished items can still be click-next or fallback candidates.
        if item.is_unpublished:
            continue
        if is_same_lineage(anchor, item):
            buckets.lineage.append(item)
        if is_same_creator(anchor, item):
            buckets.same_creator.append(item)
        if is_same_server_method(anchor, item):
            buckets.same_server_method.append(item)

    buckets.click_next = _click_candidates(anchor, transitions, eligible, config, now)
    if config.fallback_enabled:
        buckets.fallback = _fallback_candidates(anchor, eligible, now)

    cap = config.candidate_cap_per_signal
    buckets.lineage = buckets.lineage[:cap]
    buckets.same_creator = buckets.same_creator[:cap]
    buckets.same_server_method = buckets.same_server_method[:cap]
    buckets.fallback = buckets.fallback[:cap]

    logger.debug("signal buckets anchor=%s sizes=%s", anchor.id, buckets.sizes())
    return buckets
