"""
Ranking: score merge, lineage minimum slots, cold start, and slot allocation.

Public API: score_candidates, allocate_slots, reason_details.
- core: signal scoring (score_candidates).
- Submodules: lineage, cold_start, allocation, explain.
"""

from .allocation import allocate_slots, to_recommended_item
from .cold_start import compute_cold_confidence, resolve_cold_strategy
from .core import click_counts_by_id, score_candidates
from .explain import ReasonDetail, explain_items, reason_details
from .lineage import enforce_lineage_min_slots

__all__ = [
    "ReasonDetail",
    "allocate_slots",
    "click_counts_by_id",
    "compute_cold_confidence",
    "enforce_lineage_min_slots",
    "explain_items",
    "reason_details",
    "resolve_cold_strategy",
    "score_candidates",
    "to_recommended_item",
]
