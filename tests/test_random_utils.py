"""Tests for shuffling, uniform picks and rank-weighted selection."""

import numpy as np
import pytest

from salesman.exceptions import ConfigurationError
from salesman.utils.random import identity_permutation, make_rng, pick_index, roll, shuffled

DEFAULT_WEIGHTS = [0.40, 0.30, 0.17, 0.08, 0.05]


class FixedDraw:
    """RNG stub returning a fixed uniform draw and a fixed integer."""

    def __init__(self, draw: float, integer: int = 0):
        self.draw = draw
        self.integer = integer

    def random_sample(self):
        return self.draw

    def randint(self, low, high):
        return self.integer


def test_identity_permutation():
    assert identity_permutation(4) == [0, 1, 2, 3]
    with pytest.raises(ConfigurationError):
        identity_permutation(0)


def test_shuffled_returns_new_permutation(rng):
    values = list(range(20))
    result = shuffled(values, rng)
    assert sorted(result) == values
    assert values == list(range(20))
    assert result is not values


def test_shuffle_is_reproducible():
    values = list(range(30))
    assert shuffled(values, make_rng(3)) == shuffled(values, make_rng(3))


def test_pick_index_in_range(rng):
    picks = {pick_index(5, rng) for _ in range(500)}
    assert picks == {0, 1, 2, 3, 4}


# ---------------------------------------------------------------------------
# roll
# ---------------------------------------------------------------------------


class TestRoll:
    """Rank-weighted selection over a best-first population."""

    def test_bucket_frequencies_follow_weights(self):
        rng = np.random.RandomState(123)
        draws = np.array([roll(DEFAULT_WEIGHTS, 100, rng) for _ in range(20000)])
        buckets = np.bincount(draws // 20, minlength=5) / len(draws)

        assert buckets == pytest.approx(DEFAULT_WEIGHTS, abs=0.015)

    def test_indices_cover_each_bucket_uniformly(self):
        rng = np.random.RandomState(5)
        draws = np.array([roll(DEFAULT_WEIGHTS, 100, rng) for _ in range(20000)])
        top_bucket = draws[draws < 20]
        counts = np.bincount(top_bucket, minlength=20) / len(top_bucket)
        assert counts.min() > 0.03
        assert counts.max() < 0.07

    def test_first_rank_for_zero_draw(self):
        assert roll(DEFAULT_WEIGHTS, 100, FixedDraw(0.0)) == 0

    def test_last_rank_for_top_draw(self):
        assert roll(DEFAULT_WEIGHTS, 100, FixedDraw(0.9999)) == 99

    def test_maps_fraction_inside_bucket(self):
        # Halfway through the second weight's span -> middle of ranks 20..39
        assert roll(DEFAULT_WEIGHTS, 100, FixedDraw(0.55)) == 30

    def test_exclude_shifts_to_next_index(self):
        assert roll(DEFAULT_WEIGHTS, 100, FixedDraw(0.0), exclude_index=0) == 1

    def test_exclude_at_upper_boundary_shifts_down(self):
        assert roll(DEFAULT_WEIGHTS, 100, FixedDraw(0.9999), exclude_index=99) == 98

    def test_never_returns_excluded_index(self):
        rng = np.random.RandomState(9)
        for _ in range(2000):
            a = roll(DEFAULT_WEIGHTS, 50, rng)
            assert roll(DEFAULT_WEIGHTS, 50, rng, exclude_index=a) != a

    def test_single_member_population(self):
        assert roll(DEFAULT_WEIGHTS, 1, FixedDraw(0.7), exclude_index=0) == 0

    def test_index_clamped_when_buckets_overshoot(self):
        # ceil(52 / 5) = 11 ranks per bucket, so the last bucket would reach 54
        assert roll(DEFAULT_WEIGHTS, 52, FixedDraw(0.9999)) == 51

    def test_arbitrary_number_of_buckets(self):
        rng = np.random.RandomState(77)
        weights = [0.7, 0.3]
        draws = np.array([roll(weights, 10, rng) for _ in range(10000)])
        assert np.mean(draws < 5) == pytest.approx(0.7, abs=0.02)

    def test_zero_weight_bucket_is_never_chosen(self):
        rng = np.random.RandomState(11)
        draws = [roll([0.5, 0.0, 0.5], 30, rng) for _ in range(3000)]
        assert not any(10 <= d < 20 for d in draws)

    def test_unclaimed_draw_falls_back_to_uniform_pick(self):
        # Weights that do not reach the draw leave it unclaimed
        assert roll([0.5], 40, FixedDraw(0.9, integer=17)) == 17

    def test_empty_population_rejected(self):
        with pytest.raises(ValueError):
            roll(DEFAULT_WEIGHTS, 0, FixedDraw(0.1))
