"""Shared helpers for decay, rounding, sampling, and row bookkeeping."""

from .rows import dedupe_by_id
from .sampling import shuffle_in_place
from .scores import age_days, round_half_up, transition_decay, transition_effective_count

__all__ = [
    "age_days",
    "dedupe_by_id",
    "round_half_up",
    "shuffle_in_place",
    "transition_decay",
    "transition_effective_count",
]
