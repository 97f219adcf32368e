"""
Lineage minimum slots for the head of the ranking.

If fewer than min_slots of the top min_slots rows are lineage candidates,
lineage rows from further down are promoted (in score order) and the
lowest-scoring non-lineage rows of that window move to the end of the ranking.
"""

from typing import List, Set

from ...models.item import ItemId
from ...models.scoring import ScoredCandidate
from ...utils.rows import dedupe_by_id


def enforce_lineage_min_slots(
    ranked: List[ScoredCandidate],
    lineage_ids: Set[ItemId],
    min_slots: int,
) -> List[ScoredCandidate]:
    """
    Return a new ranking with at least min_slots lineage rows in the top window
    when enough lineage candidates exist. The input list is not mutated.
    """
    if min_slots <= 0:
        return ranked

    top = ranked[:min_slots]
    rest = ranked[min_slots:]
    kept_top = [row for row in top if row.id in lineage_ids]
    if len(kept_top) >= min_slots:
        return ranked

    need = min_slots - len(kept_top)
    promoted = [row for row in rest if row.id in lineage_ids][:need]
    if not promoted:
        return ranked

    top_non_lineage = [row for row in top if row.id not in lineage_ids]
    fill_count = max(0, min_slots - (len(kept_top) + len(promoted)))
    survivors = top_non_lineage[:fill_count]
    displaced = top_non_lineage[fill_count:]

    rebuilt_top = sorted(kept_top + promoted + survivors, key=lambda row: row.score, reverse=True)
    promoted_ids = {row.id for row in promoted}
    rebuilt_rest = [row for row in rest if row.id not in promoted_ids]

    return dedupe_by_id(rebuilt_top + rebuilt_rest + displaced)
