"""
Sampling helpers — in-place shuffle driven by an injected random source.
"""

import math
from typing import List, TypeVar

from ..models.config import RandomSource

T = TypeVar("T")


def shuffle_in_place(items: List[T], rng: RandomSource) -> List[T]:
    """Fisher-Yates shuffle using rng() in [0, 1); returns items for chaining."""
    for i in range(len(items) - 1, 0, -1):
        j = min(i, math.floor(rng() * (i + 1)))
        items[i], items[j] = items[j], items[i]
    return items
