"""Data models for the related-content recommender."""

from .config import (
    DEFAULT_CONFIG,
    Clock,
    ColdMode,
    RandomSource,
    RecommendationConfig,
    resolve_config,
)
from .item import ContentItem, ItemMeta, ensure_item, ensure_items
from .scoring import (
    ColdStrategy,
    Diagnostics,
    Reason,
    RecommendationInputs,
    RecommendationResult,
    RecommendedItem,
    ScoredCandidate,
    Sizes,
    Timings,
)
from .transition import Transition, ensure_transitions

__all__ = [
    "DEFAULT_CONFIG",
    "Clock",
    "ColdMode",
    "ColdStrategy",
    "ContentItem",
    "Diagnostics",
    "ItemMeta",
    "RandomSource",
    "Reason",
    "RecommendationConfig",
    "RecommendationInputs",
    "RecommendationResult",
    "RecommendedItem",
    "ScoredCandidate",
    "Sizes",
    "Timings",
    "Transition",
    "ensure_item",
    "ensure_items",
    "ensure_transitions",
    "resolve_config",
]
