"""
Pipeline orchestrator — buckets, scoring, lineage slots, cold start, slot allocation.

recommend() runs the synchronous pipeline over inputs already in memory.
recommend_with_data_source() awaits a data-source loader first and times the
load and scoring phases separately; it is the only suspending entry point.
Neither catches loader or scoring errors: the caller owns retry and fallback.
"""

import inspect
import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..computed_params import compute_slot_plan
from ..errors import InvalidArgumentError
from ..models.config import RecommendationConfig, resolve_config
from ..models.item import ContentItem, ensure_item, ensure_items
from ..models.scoring import (
    Diagnostics,
    RecommendationInputs,
    RecommendationResult,
    RecommendedItem,
    Sizes,
    Timings,
)
from ..models.transition import Transition, ensure_transitions
from .buckets import build_signal_buckets
from .ranking import (
    allocate_slots,
    click_counts_by_id,
    compute_cold_confidence,
    enforce_lineage_min_slots,
    resolve_cold_strategy,
    score_candidates,
    to_recommended_item,
)

logger = logging.getLogger(__name__)

ConfigLike = Union[None, Dict[str, Any], RecommendationConfig]
InputsLike = Union[None, Mapping[str, Any], RecommendationInputs]
LoadInputs = Callable[[Any], Union[Awaitable[InputsLike], InputsLike]]


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _validate_arguments(anchor: Any, pool: Any, transitions: Any) -> None:
    if anchor is None:
        raise InvalidArgumentError("anchor is required")
    if not _is_sequence(pool):
        raise InvalidArgumentError("pool must be a list")
    if not _is_sequence(transitions):
        raise InvalidArgumentError("transitions must be a list")


def run_pipeline(
    anchor: ContentItem,
    pool: List[ContentItem],
    transitions: List[Transition],
    config: RecommendationConfig,
) -> Tuple[List[RecommendedItem], Diagnostics]:
    """
    Score and allocate one batch over typed inputs.

    Returns:
        items: output rows, at most config.batch_size, anchor excluded, ids unique
        diagnostics: cold-start confidence, chosen strategy, bucket sizes
    """
    # 1) Candidate buckets
    buckets = build_signal_buckets(anchor, pool, transitions, config)

    # 2) Score merge, then lineage minimum slots
    ranked = score_candidates(buckets, config)
    lineage_ids = {item.id for item in buckets.lineage}
    ranked = enforce_lineage_min_slots(ranked, lineage_ids, config.lineage_min_slots)

    # 3) Cold start
    confidence = compute_cold_confidence(
        click_candidate_count=len(click_counts_by_id(buckets)),
        lineage_candidate_count=len(buckets.lineage),
        same_creator_candidate_count=len(buckets.same_creator),
        same_server_method_candidate_count=len(buckets.same_server_method),
    )
    strategy = resolve_cold_strategy(
        config.cold_mode, confidence, config.cold_confidence_threshold
    )

    # 4) Slot allocation
    plan = compute_slot_plan(config)
    batch = allocate_slots(ranked, buckets.fallback, strategy, plan, config)

    diagnostics = Diagnostics(
        cold_confidence=confidence,
        cold_strategy=strategy,
        bucket_sizes=buckets.sizes(),
    )
    return [to_recommended_item(row) for row in batch], diagnostics


def _prepare(
    anchor: Any,
    pool: Any,
    transitions: Any,
    config: ConfigLike,
) -> Tuple[ContentItem, List[ContentItem], List[Transition], RecommendationConfig]:
    """Validate argument shapes, then convert inputs and config to models."""
    _validate_arguments(anchor, pool, transitions)
    return (
        ensure_item(anchor),
        ensure_items(list(pool)),
        ensure_transitions(list(transitions)),
        resolve_config(config),
    )


def recommend(
    anchor: Any,
    pool: Sequence[Any],
    transitions: Sequence[Any],
    config: ConfigLike = None,
    user_id: Optional[Any] = None,
) -> List[RecommendedItem]:
    """
    Rank related items for the anchor.

    anchor/pool/transitions may be dicts or models; config may be a dict
    (merged over defaults) or a RecommendationConfig. user_id is accepted
    for callers that pass the viewer along; scoring does not depend on it.

    Raises:
        InvalidArgumentError: anchor missing, or pool/transitions not lists.
    """
    anchor_typed, pool_typed, transitions_typed, cfg = _prepare(anchor, pool, transitions, config)
    items, _ = run_pipeline(anchor_typed, pool_typed, transitions_typed, cfg)
    return items


def _unpack_inputs(inputs: InputsLike) -> Tuple[Any, Any, Any]:
    if isinstance(inputs, RecommendationInputs):
        return inputs.anchor, inputs.pool, inputs.transitions
    # Anything other than a mapping carries no inputs.
    if not isinstance(inputs, Mapping):
        return None, None, None
    return inputs.get("anchor"), inputs.get("pool"), inputs.get("transitions")


def _perf_ms() -> float:
    return time.perf_counter() * 1000.0


async def recommend_with_data_source(
    load_inputs: LoadInputs,
    config: ConfigLike = None,
    context: Optional[Mapping[str, Any]] = None,
    now_ms: Optional[Callable[[], float]] = None,
) -> RecommendationResult:
    """
    Load inputs through the data source, then run the synchronous pipeline.

    load_inputs(context) returns (or resolves to) {anchor, pool, transitions}.
    now_ms is the millisecond clock used for phase timings.

    Raises:
        InvalidArgumentError: load_inputs is not callable, or the loaded inputs
            are missing an anchor or lists.
    """
    if not callable(load_inputs):
        raise InvalidArgumentError("load_inputs must be callable")
    clock = now_ms or _perf_ms
    context = context if context is not None else {}

    total_start = clock()
    input_start = clock()
    inputs = load_inputs(context)
    if inspect.isawaitable(inputs):
        inputs = await inputs
    input_end = clock()

    anchor, pool, transitions = _unpack_inputs(inputs)

    score_start = clock()
    anchor_typed, pool_typed, transitions_typed, cfg = _prepare(anchor, pool, transitions, config)
    items, diagnostics = run_pipeline(anchor_typed, pool_typed, transitions_typed, cfg)
    score_end = clock()

    timings = Timings(
        input_load_ms=input_end - input_start,
        score_ms=score_end - score_start,
        total_ms=score_end - total_start,
    )
    logger.debug(
        "related recommend anchor=%s items=%d load_ms=%.1f score_ms=%.1f strategy=%s",
        anchor_typed.id, len(items), timings.input_load_ms, timings.score_ms,
        diagnostics.cold_strategy.value,
    )
    return RecommendationResult(
        items=items,
        timings=timings,
        sizes=Sizes(
            pool_size=len(pool) if _is_sequence(pool) else 0,
            transitions_size=len(transitions) if _is_sequence(transitions) else 0,
        ),
        diagnostics=diagnostics,
    )
