"""
Environment Module
==================

Start position and target points for a travelling-salesman run.
"""
from __future__ import annotations

import logging
from typing import Iterable, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from salesman.exceptions import ConfigurationError
from salesman.utils.random import make_rng

logger = logging.getLogger(__name__)


class Point(NamedTuple):
    """Immutable 3D coordinate."""

    x: float
    y: float
    z: float

    def distance_to(self, other: "Point") -> float:
        return float(np.linalg.norm(np.subtract(self, other)))


def generate_points(count: int, scale: float, rng: np.random.RandomState) -> np.ndarray:
    """
    Draw ``count`` uniformly random points.

    Each coordinate is uniform in [-0.5, 0.5) and the vector is scaled by
    ``scale``.

    Returns:
        Array of shape (count, 3)
    """
    return (rng.random_sample((count, 3)) - 0.5) * scale


def _readonly(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


class Environment:
    """
    Fixed start position plus ordered target points.

    Paths refer to targets by index only. Pairwise distances are computed once
    here and shared read-only by every path bound to this environment.
    """

    def __init__(self, start: Sequence[float], points: Iterable[Sequence[float]]):
        """
        Initialize environment.

        Args:
            start: (x, y, z) of the shared start location
            points: Target coordinates, one (x, y, z) per point
        """
        start_arr = np.asarray(start, dtype=float)
        points_arr = np.asarray(list(points), dtype=float)

        if start_arr.shape != (3,):
            raise ConfigurationError(f"Start must be a 3D coordinate, got shape {start_arr.shape}")
        if points_arr.ndim != 2 or points_arr.shape[0] < 1 or points_arr.shape[1] != 3:
            raise ConfigurationError(
                f"Environment needs at least one 3D target point, got shape {points_arr.shape}"
            )

        self._start = _readonly(start_arr)
        self._coords = _readonly(points_arr)

        deltas = points_arr[:, None, :] - points_arr[None, :, :]
        self._distances = _readonly(np.sqrt(np.sum(deltas * deltas, axis=-1)))
        self._start_distances = _readonly(np.linalg.norm(points_arr - start_arr, axis=1))

        self.start = Point(*(float(c) for c in start_arr))
        self.points: Tuple[Point, ...] = tuple(Point(*(float(c) for c in row)) for row in points_arr)

    @classmethod
    def generate(
        cls,
        count: int,
        scale: float = 1.0,
        rng: Optional[np.random.RandomState] = None,
    ) -> "Environment":
        """
        Create a random environment.

        The start point is drawn first, then ``count`` target points, all with
        the same distribution.
        """
        if count < 1:
            raise ConfigurationError(f"Cannot generate {count} points; at least one is required")
        if scale <= 0:
            raise ConfigurationError(f"Distance scale must be positive, got {scale}")

        rng = rng if rng is not None else make_rng()
        start = generate_points(1, scale, rng)[0]
        points = generate_points(count, scale, rng)
        logger.debug(f"Generated environment with {count} points (scale={scale})")
        return cls(start, points)

    @classmethod
    def from_points(cls, start: Sequence[float], points: Iterable[Sequence[float]]) -> "Environment":
        """Build an environment from explicit coordinates."""
        return cls(start, points)

    # ==================== Geometry ====================

    def __len__(self) -> int:
        return len(self.points)

    @property
    def coordinates(self) -> np.ndarray:
        """Read-only (n, 3) array of target coordinates."""
        return self._coords

    @property
    def distance_matrix(self) -> np.ndarray:
        """Read-only (n, n) Euclidean distance matrix between targets."""
        return self._distances

    @property
    def start_distances(self) -> np.ndarray:
        """Read-only (n,) distances from the start to each target."""
        return self._start_distances

    def tour_length(self, point_index: Sequence[int]) -> float:
        """Closed-tour length: start -> first, consecutive legs, last -> start."""
        idx = np.asarray(point_index, dtype=int)
        total = float(np.sum(self._distances[idx[:-1], idx[1:]]))
        total += float(self._start_distances[idx[0]])
        total += float(self._start_distances[idx[-1]])
        return total

    def tour_coordinates(self, point_index: Sequence[int]) -> np.ndarray:
        """Polyline start, points in order, start as an (n + 2, 3) array."""
        idx = np.asarray(point_index, dtype=int)
        return np.vstack([self._start, self._coords[idx], self._start])

    def __repr__(self) -> str:
        return f"Environment(points={len(self.points)}, start={tuple(round(c, 3) for c in self.start)})"
