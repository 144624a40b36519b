"""
Pytest configuration and shared fixtures.
"""

import numpy as np
import pytest

from salesman.model.environment import Environment


@pytest.fixture(autouse=True)
def _clean_salesman_env(monkeypatch):
    """Keep SALESMAN_* variables from the host out of settings tests."""
    import os

    for key in list(os.environ):
        if key.startswith("SALESMAN_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def rng():
    """Seeded random source."""
    return np.random.RandomState(42)


@pytest.fixture
def line_env():
    """Start at the origin, three points on the x axis at 1, 2 and 3."""
    return Environment.from_points(
        start=(0.0, 0.0, 0.0),
        points=[(1.0, 0.0, 0.0), (2.0, 0.0, 0.0), (3.0, 0.0, 0.0)],
    )


@pytest.fixture
def random_env(rng):
    """Twelve random points in a cube of side 10."""
    return Environment.generate(12, scale=10.0, rng=rng)


@pytest.fixture
def small_settings():
    """Overrides for a small, fast, seeded run."""
    return {
        "points_count": 8,
        "population_max": 20,
        "mutation_frequency": 0.15,
        "cross_frequency": 0.30,
        "generations": 5,
        "distance_scale": 10.0,
        "seed": 1,
    }
