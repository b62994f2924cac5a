"""Tests for attractor seeding."""

import numpy as np
import pytest

from flamescope.core.seeder import initial_batch, seed_attractor
from flamescope.core.transforms import default_transforms


def _identity(points):
    return points.copy()


class TestInitialBatch:
    def test_unit_markers(self):
        batch = initial_batch()
        assert batch.shape == (5, 5)
        np.testing.assert_array_equal(batch, np.eye(5))


class TestSeedAttractor:
    def test_threshold_already_met(self):
        result = seed_attractor([_identity], [_identity, _identity], threshold=5)
        assert result.rounds == 0
        np.testing.assert_array_equal(result.points, initial_batch())

    def test_growth_by_branching_factor(self):
        result = seed_attractor([_identity], [_identity, _identity], threshold=40)
        # 5 -> 10 -> 20 -> 40
        assert result.rounds == 3
        assert len(result) == 40

    def test_overshoots_to_next_power(self):
        result = seed_attractor([_identity], [_identity] * 3, threshold=50)
        # 5 -> 15 -> 45 -> 135
        assert result.rounds == 3
        assert len(result.points) == 135

    def test_parallel_results_concatenated_in_order(self):
        parallel = [lambda p: p * 0.0, lambda p: p + 1.0]
        result = seed_attractor([_identity], parallel, threshold=10)
        np.testing.assert_array_equal(result.points[:5], 0.0)
        np.testing.assert_array_equal(result.points[5:], np.eye(5) + 1.0)

    def test_sequential_round_robin(self):
        calls = []

        def tagged(tag):
            def tx(points):
                calls.append(tag)
                return points.copy()
            return tx

        seed_attractor([tagged("a"), tagged("b")], [_identity] * 2, threshold=80)
        # 5 -> 10 -> 20 -> 40 -> 80
        assert calls == ["a", "b", "a", "b"]

    def test_single_parallel_transform_stops(self):
        result = seed_attractor([_identity], [_identity], threshold=100, max_rounds=7)
        assert result.rounds == 7
        assert len(result) == 5

    def test_default_transforms_finite(self, rng):
        sequential, parallel = default_transforms(rng)
        result = seed_attractor(sequential, parallel, threshold=200)
        assert result.rounds == 3
        assert result.points.shape == (1080, 5)
        assert np.all(np.isfinite(result.points))
