"""
Cold-start detection for related recommendations.

Confidence blends saturating ratios of the candidate counts per signal;
low confidence switches the slot allocator to the explore strategy.
"""

import logging

import numpy as np

from ...models.config import ColdMode
from ...models.scoring import ColdStrategy

logger = logging.getLogger(__name__)

# Candidate count at which each signal is fully trusted:
# click-next, lineage, same creator, same server/method.
CONFIDENCE_SATURATION = np.array([3.0, 3.0, 5.0, 5.0])
# Contribution of each saturated signal to the confidence (sums to 1).
CONFIDENCE_WEIGHTS = np.array([0.5, 0.2, 0.15, 0.15])


def compute_cold_confidence(
    click_candidate_count: int,
    lineage_candidate_count: int,
    same_creator_candidate_count: int,
    same_server_method_candidate_count: int,
) -> float:
    """Confidence in [0, 1] that the merged ranking is backed by enough evidence."""
    counts = np.array(
        [
            click_candidate_count,
            lineage_candidate_count,
            same_creator_candidate_count,
            same_server_method_candidate_count,
        ],
        dtype=float,
    )
    ratios = np.minimum(1.0, np.maximum(0.0, counts) / CONFIDENCE_SATURATION)
    return float(np.dot(ratios, CONFIDENCE_WEIGHTS))


def resolve_cold_strategy(
    mode: ColdMode,
    confidence: float,
    threshold: float,
) -> ColdStrategy:
    """guess/explore modes are forced; auto guesses iff confidence >= threshold."""
    if mode == ColdMode.GUESS:
        strategy = ColdStrategy.GUESS
    elif mode == ColdMode.EXPLORE:
        strategy = ColdStrategy.EXPLORE
    else:
        strategy = ColdStrategy.GUESS if confidence >= threshold else ColdStrategy.EXPLORE
    logger.debug(
        "cold strategy mode=%s confidence=%.3f threshold=%.3f -> %s",
        mode.value, confidence, threshold, strategy.value,
    )
    return strategy
