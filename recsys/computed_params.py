"""
Policy knobs and computed parameters for the related-content recommender.

The hosting application stores tunables as string "policy knobs" under the
``related.`` prefix. This module holds their defaults, parses them into a
RecommendationConfig, and derives the read-only slot parameters the
allocator works from.
"""

import math
import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional

from .models.config import RecommendationConfig

# Default knob values. Keys must match the policy_knobs table (related.*).
RELATED_PARAM_DEFAULTS: Dict[str, str] = {
    "related.lineage_weight": "100",
    "related.lineage_min_slots": "2",
    "related.same_server_method_weight": "80",
    "related.same_creator_weight": "50",
    "related.fallback_weight": "20",
    "related.transition_cap_k": "50",
    "related.transition_decay_half_life_days": "7",
    "related.transition_window_days": "0",
    "related.random_slots_per_batch": "0",
    "related.batch_size": "10",
    "related.candidate_cap_per_signal": "100",
}

RELATED_PARAM_KEYS = list(RELATED_PARAM_DEFAULTS)

# Bounds applied when parsing knobs.
CANDIDATE_CAP_MAX = 500

_INT_PREFIX = re.compile(r"\s*([-+]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")


def _parse_int(value: Any, default: int) -> int:
    """Leading integer of value ("12px" -> 12); default when there is none."""
    match = _INT_PREFIX.match(str(value)) if value is not None else None
    return int(match.group(1)) if match else default


def _parse_float(value: Any) -> Optional[float]:
    """Leading number of value; None when there is none."""
    match = _FLOAT_PREFIX.match(str(value)) if value is not None else None
    return float(match.group(1)) if match else None


def merge_params(stored: Optional[Mapping[str, Any]] = None) -> Dict[str, str]:
    """Overlay stored knobs on the defaults, keeping only known related.* keys."""
    out = dict(RELATED_PARAM_DEFAULTS)
    for key in RELATED_PARAM_KEYS:
        if stored and stored.get(key) is not None:
            out[key] = str(stored[key])
    return out


def config_from_params(
    params: Mapping[str, Any],
    limit: Optional[int] = None,
    **overrides: Any,
) -> RecommendationConfig:
    """
    Parse related.* knobs into a RecommendationConfig.

    Weights and slot counts clamp to >= 0, the per-signal cap to [1, 500] and
    the transition cap to >= 1. An explicit "0" is kept as 0 rather than
    replaced by the default. A half-life that is not a number disables decay.
    With a page limit the batch holds limit + 1 rows so the caller can tell
    whether more results exist. Keyword overrides win over knobs (e.g. now, rng).
    """
    def knob_int(key: str) -> int:
        default = int(RELATED_PARAM_DEFAULTS[key])
        return _parse_int(params.get(key), default)

    window = _parse_float(params.get("related.transition_window_days"))
    if limit is not None:
        batch_size = max(0, int(limit)) + 1
    else:
        batch_size = max(0, knob_int("related.batch_size"))

    values: Dict[str, Any] = {
        "lineage_weight": max(0, knob_int("related.lineage_weight")),
        "lineage_min_slots": max(0, knob_int("related.lineage_min_slots")),
        "same_server_method_weight": max(0, knob_int("related.same_server_method_weight")),
        "same_creator_weight": max(0, knob_int("related.same_creator_weight")),
        "fallback_weight": max(0, knob_int("related.fallback_weight")),
        "candidate_cap_per_signal": max(
            1, min(CANDIDATE_CAP_MAX, knob_int("related.candidate_cap_per_signal"))
        ),
        "random_slots_per_batch": max(0, knob_int("related.random_slots_per_batch")),
        "transition_cap_per_from": max(1, knob_int("related.transition_cap_k")),
        "decay_half_life_days": _parse_float(params.get("related.transition_decay_half_life_days")),
        "window_days": max(0.0, window or 0.0),
        "batch_size": batch_size,
    }
    values.update(overrides)
    return RecommendationConfig.model_validate(values)


@dataclass(frozen=True)
class SlotPlan:
    """Slot counts derived from the batch shape; fixed for one call."""

    batch_size: int
    random_slots: int
    deterministic_slots: int
    # Click-next slot cap when hard preference is off.
    soft_click_slots: int
    lineage_target: int
    cold_guess_slots: int
    cold_explore_slots: int


def compute_slot_plan(config: RecommendationConfig) -> SlotPlan:
    batch_size = config.batch_size
    random_slots = min(max(0, config.random_slots_per_batch), batch_size)
    deterministic = max(0, batch_size - random_slots)
    guess = max(0, min(batch_size, config.cold_explore_min_guess_slots))
    return SlotPlan(
        batch_size=batch_size,
        random_slots=random_slots,
        deterministic_slots=deterministic,
        soft_click_slots=math.floor(deterministic * config.click_next_priority_fraction),
        lineage_target=min(deterministic, max(0, config.lineage_min_slots)),
        cold_guess_slots=guess,
        cold_explore_slots=max(
            0, min(batch_size - guess, math.floor(batch_size * config.cold_explore_fraction))
        ),
    )


def decay_mode(config: RecommendationConfig) -> str:
    """Which transition decay path applies: "window", "half_life", or "none"."""
    half_life = config.decay_half_life_days
    has_half_life = half_life is not None and math.isfinite(half_life) and half_life > 0
    if has_half_life:
        return "half_life"
    if config.window_days > 0:
        return "window"
    return "none"


def compute_parameters(config: RecommendationConfig) -> Dict[str, Any]:
    """
    Read-only parameters derived from a config, for admin display and diagnostics.

    Returns:
        Slot plan fields plus decay_mode and the effective decay settings.
    """
    computed: Dict[str, Any] = asdict(compute_slot_plan(config))
    computed["decay_mode"] = decay_mode(config)
    mode = computed["decay_mode"]
    computed["effective_half_life_days"] = config.decay_half_life_days if mode == "half_life" else None
    computed["effective_window_days"] = config.window_days if mode == "window" else None
    return computed
