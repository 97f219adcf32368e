"""Shared fixtures: fixed clock, seeded random source, and a sample pool around anchor 1."""

from datetime import datetime, timezone
from typing import Callable, Dict, List

import pytest

NOW = datetime(2026, 2, 13, tzinfo=timezone.utc)


def seeded_rng(seed: int = 42) -> Callable[[], float]:
    """xorshift32 in [0, 1); the same seed always yields the same sequence."""
    state = seed & 0xFFFFFFFF

    def rng() -> float:
        nonlocal state
        state ^= (state << 13) & 0xFFFFFFFF
        state ^= state >> 17
        state ^= (state << 5) & 0xFFFFFFFF
        return (state % 1000000) / 1000000

    return rng


def fixed_clock() -> datetime:
    return NOW


def make_item(item_id, user_id, family_id, server_id, method, created_at, mutate_of_id=None, **extra) -> Dict:
    meta = {"server_id": server_id, "method": method}
    if mutate_of_id is not None:
        meta["mutate_of_id"] = mutate_of_id
    return {
        "id": item_id,
        "user_id": user_id,
        "family_id": family_id,
        "meta": meta,
        "created_at": created_at,
        "published": True,
        **extra,
    }


def make_transition(to_id, count, last_updated="2026-02-12T23:00:00Z", from_id=1) -> Dict:
    return {
        "from_created_image_id": from_id,
        "to_created_image_id": to_id,
        "count": count,
        "last_updated": last_updated,
    }


@pytest.fixture
def sample_pool() -> List[Dict]:
    return [
        make_item(1, 10, "F1", "p1", "m1", "2026-02-12T00:00:00Z"),
        # lineage + creator + server/method
        make_item(2, 10, "F1", "p1", "m1", "2026-02-12T01:00:00Z", mutate_of_id=1),
        # lineage only
        make_item(3, 11, "F1", "p2", "m2", "2026-02-11T00:00:00Z", mutate_of_id=1),
        # creator + server/method
        make_item(4, 10, "F2", "p1", "m1", "2026-02-12T02:00:00Z"),
        make_item(5, 22, "F3", "p9", "m9", "2026-02-10T00:00:00Z"),
        # old, outside the fallback window
        make_item(6, 33, "F4", "p1", "m1", "2026-01-01T00:00:00Z"),
        make_item(7, 44, "F5", "p8", "m8", "2026-02-12T03:00:00Z"),
    ]


@pytest.fixture
def sample_transitions() -> List[Dict]:
    return [
        # strongest click-next
        make_transition(4, 5),
        make_transition(2, 2),
        make_transition(7, 1),
        # very old; decays hard
        make_transition(6, 10, last_updated="2025-12-01T00:00:00Z"),
    ]


@pytest.fixture
def anchor(sample_pool) -> Dict:
    return sample_pool[0]


@pytest.fixture
def base_config() -> Dict:
    return {"now": fixed_clock, "rng": seeded_rng(1)}
