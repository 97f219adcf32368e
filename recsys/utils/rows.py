"""
Row helpers — id-level deduplication for ranked candidate lists.
"""

from typing import Iterable, List

from ..models.scoring import ScoredCandidate


def dedupe_by_id(rows: Iterable[ScoredCandidate]) -> List[ScoredCandidate]:
    """Keep the first row for each candidate id, preserving order."""
    seen = set()
    out: List[ScoredCandidate] = []
    for row in rows:
        if row.id in seen:
            continue
        seen.add(row.id)
        out.append(row)
    return out
