"""Pipeline stages: signal buckets (Stage A), ranking (Stage B), orchestration."""

from .buckets import SignalBuckets, build_signal_buckets
from .orchestrator import recommend, recommend_with_data_source, run_pipeline

__all__ = [
    "SignalBuckets",
    "build_signal_buckets",
    "recommend",
    "recommend_with_data_source",
    "run_pipeline",
]
