"""
Recommender configuration — signal weights, caps, decay, batch shape, cold start.

RecommendationConfig defaults are defined here. Callers may pass a dict with
either snake_case field names or the camelCase knob names used by the web
layer (lineageWeight, batchSize, ...); from_dict() merges it with these defaults.
Clock and random source are injected so a call can be replayed exactly.
"""

import random
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Clock = Callable[[], datetime]
RandomSource = Callable[[], float]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ColdMode(str, Enum):
    """How the cold-start strategy is chosen."""

    AUTO = "auto"
    GUESS = "guess"
    EXPLORE = "explore"


class RecommendationConfig(BaseModel):
    """Configuration for one related-content recommendation call."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    # -------------------------------------------------------------------------
    # Signal weights
    # -------------------------------------------------------------------------

    # Flat bonus for candidates sharing a family or a direct parent/child link.
    lineage_weight: float = 100
    # Flat bonus for candidates by the anchor's creator.
    same_creator_weight: float = 50
    # Flat bonus for candidates made with the anchor's server and method.
    same_server_method_weight: float = 80
    # Upper bound of the click-next contribution (counts are normalized to [0, 1]).
    click_next_weight: float = 50
    # Fallback contributes 10% of this weight.
    fallback_weight: float = 20

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    # Max transition records read per anchor (first N encountered).
    transition_cap_per_from: int = Field(default=50, ge=0)
    # Half-life for exponential decay of transition counts. None or <= 0 disables decay.
    decay_half_life_days: Optional[float] = 7
    # Hard recency cutoff, only used when half-life decay is disabled. 0 => no window.
    window_days: float = 0

    # -------------------------------------------------------------------------
    # Batch shape
    # -------------------------------------------------------------------------

    batch_size: int = Field(default=20, ge=0)
    # Slots filled from the shuffled fallback bucket (clamped to [0, batch_size]).
    random_slots_per_batch: int = 0
    # Soft cap on click-next slots when hard_preference is off.
    click_next_priority_fraction: float = Field(default=0.65, ge=0.0, le=1.0)
    # Click-next candidates always precede all other candidates.
    hard_preference: bool = True
    # Each signal bucket is truncated to this many candidates.
    candidate_cap_per_signal: int = Field(default=100, ge=0)
    # Minimum lineage rows kept near the top of the ranking.
    lineage_min_slots: int = 2
    # Time-proximity fallback bucket (also the random/explore pool).
    fallback_enabled: bool = True

    # -------------------------------------------------------------------------
    # Cold start
    # -------------------------------------------------------------------------

    cold_mode: ColdMode = ColdMode.AUTO
    # auto mode: guess iff confidence >= threshold, else explore.
    cold_confidence_threshold: float = 0.35
    # Share of the batch given to shuffled explore rows in explore mode.
    cold_explore_fraction: float = Field(default=0.7, ge=0.0, le=1.0)
    # Top-ranked rows always kept in explore mode.
    cold_explore_min_guess_slots: int = 2

    # -------------------------------------------------------------------------
    # Injected clock and random source
    # -------------------------------------------------------------------------

    now: Clock = Field(default=utc_now, exclude=True)
    rng: RandomSource = Field(default=random.random, exclude=True)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "RecommendationConfig":
        """Create config from a dictionary, merged over the defaults. Unknown keys are ignored."""
        return cls.model_validate(config_dict)

    def current_time(self) -> datetime:
        """Injected clock reading, normalized to an aware UTC datetime."""
        value = self.now()
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


DEFAULT_CONFIG = RecommendationConfig()


def resolve_config(
    config: Union[None, Dict[str, Any], RecommendationConfig],
) -> RecommendationConfig:
    """Return config as a RecommendationConfig; DEFAULT_CONFIG when none is provided."""
    if config is None:
        return DEFAULT_CONFIG
    if isinstance(config, RecommendationConfig):
        return config
    return RecommendationConfig.from_dict(config)
