"""
Related-content recommender — multi-signal ranking for "more like this" rails.

Single entry point for the package:
- models/: RecommendationConfig, ContentItem, Transition, ScoredCandidate, RecommendedItem
- stages/: buckets (Stage A), ranking (Stage B), orchestrator
- computed_params: related.* policy knobs and derived slot parameters
- settings: environment overrides and logging setup
"""

from .computed_params import (
    RELATED_PARAM_DEFAULTS,
    compute_parameters,
    config_from_params,
    merge_params,
)
from .errors import InvalidArgumentError
from .models import (
    DEFAULT_CONFIG,
    ColdMode,
    ColdStrategy,
    ContentItem,
    Reason,
    RecommendationConfig,
    RecommendationInputs,
    RecommendationResult,
    RecommendedItem,
    Transition,
)
from .settings import EngineSettings, configure_logging, get_settings, load_params
from .stages.orchestrator import recommend, recommend_with_data_source
from .stages.ranking import ReasonDetail, explain_items, reason_details

__all__ = [
    "DEFAULT_CONFIG",
    "RELATED_PARAM_DEFAULTS",
    "ColdMode",
    "ColdStrategy",
    "ContentItem",
    "EngineSettings",
    "InvalidArgumentError",
    "Reason",
    "ReasonDetail",
    "RecommendationConfig",
    "RecommendationInputs",
    "RecommendationResult",
    "RecommendedItem",
    "Transition",
    "compute_parameters",
    "config_from_params",
    "configure_logging",
    "explain_items",
    "get_settings",
    "load_params",
    "merge_params",
    "reason_details",
    "recommend",
    "recommend_with_data_source",
]
