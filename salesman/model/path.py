"""
Path (genotype) representation and genetic operators.

A path is an ordered sequence of point indices, e.g. ``(5, 6, 1, 2, ...)``
visits the 5th point first, then the 6th, then the 1st and so on, before
returning to the start.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

import numpy as np

from salesman.model.environment import Environment
from salesman.utils.random import make_rng

logger = logging.getLogger(__name__)

# Score given to paths that repeat an index; selection drives them out.
INVALID_PATH_SCORE = 999_999_999.0


class Path:
    """Immutable visiting order with a score cached at construction."""

    __slots__ = ("_point_index", "_env", "_score")

    def __init__(self, point_index: Iterable[int], env: Environment):
        """
        Args:
            point_index: Ordered point indices into ``env.points``
            env: Environment the indices refer to (not copied)
        """
        self._point_index: Tuple[int, ...] = tuple(int(i) for i in point_index)
        self._env = env

        if not self._point_index:
            raise ValueError("A path must visit at least one point")
        if min(self._point_index) < 0 or max(self._point_index) >= len(env):
            raise IndexError(
                f"Path indices must lie in [0, {len(env)}), got {self._point_index}"
            )

        self._score = self._compute_score()

    @property
    def point_index(self) -> Tuple[int, ...]:
        return self._point_index

    @property
    def env(self) -> Environment:
        return self._env

    @property
    def score(self) -> float:
        """Tour length, or ``INVALID_PATH_SCORE`` when an index repeats."""
        return self._score

    def __len__(self) -> int:
        return len(self._point_index)

    def length(self) -> float:
        """Length of the closed tour start -> points in order -> start."""
        return self._env.tour_length(self._point_index)

    def is_valid(self) -> bool:
        return len(set(self._point_index)) == len(self._point_index)

    def _compute_score(self) -> float:
        if not self.is_valid():
            return INVALID_PATH_SCORE
        return self.length()

    # ==================== Ordering ====================

    def is_shorter_than(self, other: "Path") -> float:
        """
        Compare raw tour lengths.

        Returns:
            Negative if this path is shorter, 0 if equal, positive if ``other``
            is shorter.
        """
        return self.length() - other.length()

    def is_better_than(self, other: "Path") -> float:
        """
        Compare cached scores, which include the invalid-path penalty.

        Returns:
            Negative if this path is better, 0 if equal, positive if ``other``
            is better.
        """
        return self._score - other._score

    def __lt__(self, other: "Path") -> bool:
        return self._score < other._score

    # ==================== Genetic operators ====================

    def mutate(self, count: int = 1, rng: Optional[np.random.RandomState] = None) -> "Path":
        """
        Swap mutation.

        Args:
            count: Number of random position pairs to swap (a pair may pick
                   the same position twice)
            rng: Random source (fresh unseeded RNG when None)

        Returns:
            New path; this one is left unchanged.
        """
        rng = rng if rng is not None else make_rng()
        genes = list(self._point_index)
        size = len(genes)
        for _ in range(count):
            a = int(rng.randint(0, size))
            b = int(rng.randint(0, size))
            genes[a], genes[b] = genes[b], genes[a]
        return Path(genes, self._env)

    def breed(self, other: "Path", rng: Optional[np.random.RandomState] = None) -> "Path":
        """
        Single-point order crossover.

        The offspring copies this path up to a random cut, then takes the
        values of ``other`` from left to right, skipping those already present.
        If ``other`` runs out of unused values (possible when the parents do
        not share an index set), the remaining slots take this path's unused
        values, then any unused index in ascending order.

        Returns:
            New path bound to this path's environment.
        """
        size = len(self._point_index)
        if len(other) != size:
            raise ValueError(f"Cannot breed paths of different lengths ({size} vs {len(other)})")

        rng = rng if rng is not None else make_rng()
        cut = int(rng.randint(0, size))
        offspring = list(self._point_index[:cut])
        used = set(offspring)

        for value in other.point_index:
            if len(offspring) == size:
                break
            if value not in used:
                offspring.append(value)
                used.add(value)

        if len(offspring) < size:
            logger.debug(
                f"Crossover exhausted second parent at {len(offspring)}/{size} genes; "
                "filling from first parent"
            )
            for value in list(self._point_index) + list(range(len(self._env))):
                if len(offspring) == size:
                    break
                if value not in used:
                    offspring.append(value)
                    used.add(value)

        return Path(offspring, self._env)

    # ==================== Helpers ====================

    def reversed(self) -> "Path":
        """Same tour travelled in the opposite direction."""
        return Path(self._point_index[::-1], self._env)

    def tour_coordinates(self) -> np.ndarray:
        """Closed polyline (start, points..., start) for display."""
        return self._env.tour_coordinates(self._point_index)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self._env is other._env and self._point_index == other._point_index

    def __hash__(self) -> int:
        return hash((id(self._env), self._point_index))

    def __repr__(self) -> str:
        return f"Path(points={len(self._point_index)}, score={self._score:.2f})"
