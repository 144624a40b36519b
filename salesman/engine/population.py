"""
Population of candidate paths.
"""
from __future__ import annotations

from typing import Iterable, Iterator, List, Optional

import numpy as np

from salesman.model.environment import Environment
from salesman.model.path import Path
from salesman.utils.random import identity_permutation, shuffled


class Population:
    """Ordered collection of paths; index 0 is the best after ``sort()``."""

    def __init__(self, members: Optional[Iterable[Path]] = None):
        self._members: List[Path] = list(members or [])

    @classmethod
    def random(cls, env: Environment, size: int, rng: np.random.RandomState) -> "Population":
        """Seed ``size`` uniformly shuffled permutations of the environment's points."""
        base = identity_permutation(len(env))
        return cls(Path(shuffled(base, rng), env) for _ in range(size))

    def sort(self) -> None:
        """Order members by ascending score (stable)."""
        self._members.sort(key=lambda path: path.score)

    def trim(self, max_size: int) -> None:
        """Drop members beyond ``max_size``, keeping the current order."""
        del self._members[max_size:]

    def append(self, path: Path) -> None:
        self._members.append(path)

    def extend(self, paths: Iterable[Path]) -> None:
        self._members.extend(paths)

    @property
    def best(self) -> Path:
        """Lowest-score member (does not require a prior sort)."""
        if not self._members:
            raise IndexError("Population is empty")
        return min(self._members, key=lambda path: path.score)

    def scores(self) -> np.ndarray:
        return np.array([path.score for path in self._members], dtype=float)

    def snapshot(self) -> List[Path]:
        """Shallow copy of the members list (paths are immutable)."""
        return list(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def __getitem__(self, index: int) -> Path:
        return self._members[index]

    def __iter__(self) -> Iterator[Path]:
        return iter(self._members)

    def __repr__(self) -> str:
        return f"Population(size={len(self._members)})"
