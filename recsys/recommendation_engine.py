"""
Related-Content Recommendation Engine

Thin facade over the modular pipeline:
- Stage A: buckets (lineage, same creator, same server/method, click-next, fallback)
- Stage B: ranking (score merge, lineage slots, cold start, slot allocation)
- Orchestration: recommend (sync) and recommend_with_data_source (async)

All implementation lives in models/, utils/, and stages/.
This module re-exports the public API for callers that import the engine directly.
"""

from .computed_params import compute_parameters, config_from_params
from .errors import InvalidArgumentError
from .models.config import DEFAULT_CONFIG, RecommendationConfig
from .models.scoring import RecommendationResult, RecommendedItem
from .stages.orchestrator import recommend, recommend_with_data_source
from .stages.ranking import explain_items, reason_details

__all__ = [
    "DEFAULT_CONFIG",
    "InvalidArgumentError",
    "RecommendationConfig",
    "RecommendationResult",
    "RecommendedItem",
    "compute_parameters",
    "config_from_params",
    "explain_items",
    "reason_details",
    "recommend",
    "recommend_with_data_source",
]
