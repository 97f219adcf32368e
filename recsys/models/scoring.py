"""
Scoring models — reasons, per-candidate rows, output rows, and the async envelope.

Contains:
- Reason: closed set of signal tags attached to a row
- ScoredCandidate: one accumulator row per unique candidate id (ephemeral, per call)
- RecommendedItem: the public output row
- RecommendationInputs / RecommendationResult: loader payload and async envelope
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .item import ContentItem, ItemId
from .transition import Transition


class Reason(str, Enum):
    """Signal that placed a candidate in the batch."""

    LINEAGE = "lineage"
    SAME_CREATOR = "sameCreator"
    SAME_SERVER_METHOD = "sameServerMethod"
    CLICK_NEXT = "clickNext"
    FALLBACK = "fallback"
    EXPLORE_RANDOM = "exploreRandom"


class ColdStrategy(str, Enum):
    GUESS = "guess"
    EXPLORE = "explore"


class ScoredCandidate(BaseModel):
    """A candidate with its accumulated score and the signals that fired for it."""

    item: ContentItem
    score: float = 0.0
    reasons: List[Reason] = Field(default_factory=list)
    click_effective_count: Optional[float] = None
    click_share: Optional[float] = None

    @property
    def id(self) -> ItemId:
        return self.item.id

    def has_reason(self, reason: Reason) -> bool:
        return reason in self.reasons

    def add_reason(self, reason: Reason) -> None:
        """Append reason, keeping reasons an ordered set."""
        if reason not in self.reasons:
            self.reasons.append(reason)

    def with_reason(self, reason: Reason) -> "ScoredCandidate":
        """Copy of this row with reason added; the original row is left untouched."""
        reasons = list(self.reasons)
        if reason not in reasons:
            reasons.append(reason)
        return self.model_copy(update={"reasons": reasons})


class RecommendedItem(BaseModel):
    """Output row: rounded score, reason tags, and click diagnostics."""

    id: ItemId
    score: float
    reasons: List[str]
    click_score: float = 0.0
    click_share: float = 0.0


class RecommendationInputs(BaseModel):
    """What a data-source loader returns: the anchor, its candidate pool, and transitions."""

    anchor: Optional[ContentItem] = None
    pool: List[ContentItem] = Field(default_factory=list)
    transitions: List[Transition] = Field(default_factory=list)


class Timings(BaseModel):
    input_load_ms: float
    score_ms: float
    total_ms: float


class Sizes(BaseModel):
    pool_size: int
    transitions_size: int


class Diagnostics(BaseModel):
    """Per-call explanation of how the batch was assembled."""

    cold_confidence: float
    cold_strategy: ColdStrategy
    bucket_sizes: Dict[str, int]


class RecommendationResult(BaseModel):
    """Envelope returned by the async wrapper."""

    items: List[RecommendedItem]
    timings: Timings
    sizes: Sizes
    diagnostics: Optional[Diagnostics] = None
