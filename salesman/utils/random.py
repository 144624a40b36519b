"""
Random helpers shared by the environment, paths and the engine.

Every helper takes an explicit ``numpy.random.RandomState`` so a run can be
reproduced from a single seed.
"""
from __future__ import annotations

import math
from typing import List, Optional, Sequence, TypeVar

import numpy as np

from salesman.exceptions import ConfigurationError

T = TypeVar("T")


def make_rng(seed: Optional[int] = None) -> np.random.RandomState:
    """Create a seeded RNG (unseeded when ``seed`` is None)."""
    return np.random.RandomState(seed)


def identity_permutation(size: int) -> List[int]:
    """Return ``[0, 1, ..., size - 1]``."""
    if size < 1:
        raise ConfigurationError(f"Permutation size must be positive, got {size}")
    return list(range(size))


def shuffled(values: Sequence[T], rng: np.random.RandomState) -> List[T]:
    """Return a uniformly shuffled copy of ``values`` (input left untouched)."""
    order = rng.permutation(len(values))
    return [values[int(i)] for i in order]


def pick_index(size: int, rng: np.random.RandomState) -> int:
    """Uniform index in ``[0, size)``."""
    return int(rng.randint(0, size))


def roll(
    weights: Sequence[float],
    population_size: int,
    rng: np.random.RandomState,
    exclude_index: int = -1,
) -> int:
    """
    Rank-biased index selection over a population sorted best-first.

    Rank space is split into ``len(weights)`` equal buckets; bucket ``i`` is
    chosen with probability ``weights[i]`` and the position of the draw inside
    that weight's span maps linearly onto the bucket's rank range.

    Args:
        weights: Non-negative bucket weights summing to 1, best bucket first
        population_size: Number of ranked individuals
        rng: Random source
        exclude_index: Index that must not be returned (e.g. the first parent)

    Returns:
        Index in ``[0, population_size)``. If the draw lands on
        ``exclude_index`` the neighbouring index is returned instead.
    """
    if population_size < 1:
        raise ValueError(f"Cannot roll over an empty population (size={population_size})")

    last = population_size - 1
    bucket_size = math.ceil(population_size / len(weights))
    n = rng.random_sample()
    cumulative = 0.0

    for i, weight in enumerate(weights):
        if weight > 0 and cumulative + weight > n:
            fraction = (n - cumulative) / weight
            j = min(i * bucket_size + int(math.floor(fraction * bucket_size)), last)

            if j != exclude_index or population_size == 1:
                return j
            if j + 1 > last:
                return j - 1
            return j + 1
        cumulative += weight

    # Rounding left the draw unclaimed; fall back to a uniform pick.
    return pick_index(population_size, rng)
