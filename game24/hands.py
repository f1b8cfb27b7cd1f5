from __future__ import annotations

from itertools import combinations_with_replacement

import numpy as np


def all_hands(operand_count: int = 4, low: int = 1, high: int = 13) -> list[tuple[int, ...]]:
    """Every multiset of ``operand_count`` values in ``[low, high]``, sorted ascending."""

    if high < low:
        raise ValueError(f"high must be >= low, got low={low}, high={high}")
    return list(combinations_with_replacement(range(int(low), int(high) + 1), int(operand_count)))


def sample_hands(
    n_hands: int = 100,
    operand_count: int = 4,
    low: int = 1,
    high: int = 13,
    seed: int = 7,
) -> np.ndarray:
    rng = np.random.default_rng(int(seed))
    return rng.integers(int(low), int(high) + 1, size=(int(n_hands), int(operand_count))).astype(
        np.float64
    )
