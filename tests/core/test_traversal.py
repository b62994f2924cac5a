"""Tests for the bounded depth-first traversal."""

import itertools

import numpy as np
import pytest

from flamescope.core.seeder import SeedResult, initial_batch
from flamescope.core.traversal import (
    TraversalEngine,
    TraversalPhase,
    compute_max_depth,
)
from flamescope.errors import ConfigurationError


class Shift:
    """Adds a constant to every coordinate."""

    def __init__(self, amount: float):
        self.amount = amount

    def __call__(self, points):
        return points + self.amount


def _identity(points):
    return points.copy()


def _engine(branching: int, max_depth: int, rounds: int = 0, sequential=None):
    parallel = [Shift(10.0 ** i) for i in range(branching)]
    seed = SeedResult(points=initial_batch(), rounds=rounds)
    return TraversalEngine(sequential or [_identity], parallel, seed, max_depth)


def _drain(engine):
    paths = []
    while engine.advance() is not None:
        paths.append(engine.path)
    return paths


class TestComputeMaxDepth:
    def test_exact_power(self):
        assert compute_max_depth(8, 2, 0) == 3

    def test_seed_rounds_subtracted(self):
        # floor(log(3e8) / log(6)) = 10
        assert compute_max_depth(3.0e8, 6, 7) == 3

    def test_clamped_to_zero(self):
        assert compute_max_depth(100, 2, 20) == 0

    def test_single_branch(self):
        assert compute_max_depth(3.0e8, 1, 0) == 0

    def test_no_branches(self):
        with pytest.raises(ConfigurationError):
            compute_max_depth(100, 0, 0)


class TestTraversalEngine:
    def test_leaf_count_binary(self):
        engine = _engine(branching=2, max_depth=3)
        assert len(_drain(engine)) == 8
        assert engine.leaves_visited == 8
        assert engine.total_leaves == 8

    def test_leaf_count_ternary(self):
        assert len(_drain(_engine(branching=3, max_depth=2))) == 9

    def test_every_leaf_visited_once_in_order(self):
        paths = _drain(_engine(branching=3, max_depth=3))
        assert paths == list(itertools.product(range(3), repeat=3))

    def test_zero_depth_visits_root_once(self):
        engine = _engine(branching=4, max_depth=0)
        first = engine.advance()
        np.testing.assert_array_equal(first, initial_batch())
        assert engine.advance() is None
        assert engine.leaves_visited == 1
        assert engine.total_leaves == 1

    def test_depth_invariant(self):
        engine = _engine(branching=2, max_depth=4)
        assert engine.depth == 0
        while engine.advance() is not None:
            assert engine.depth == len(engine.path) == engine.max_depth
        assert engine.depth == 0

    def test_leaf_points_compose_path(self):
        engine = _engine(branching=3, max_depth=2)
        while True:
            points = engine.advance()
            if points is None:
                break
            offset = sum(10.0 ** i for i in engine.path)
            np.testing.assert_allclose(points, initial_batch() + offset)

    def test_sequential_selected_by_depth(self):
        calls = []

        def tagged(tag):
            def tx(points):
                calls.append(tag)
                return points.copy()
            return tx

        sequential = [tagged(0), tagged(1), tagged(2)]
        engine = _engine(branching=2, max_depth=3, rounds=1, sequential=sequential)
        engine.advance()
        # (rounds + depth) % 3 for depths 1, 2, 3
        assert calls == [2, 0, 1]

        calls.clear()
        engine.advance()
        # Sibling at depth 3 only
        assert calls == [1]

    def test_phases(self):
        engine = _engine(branching=2, max_depth=2)
        assert engine.phase is TraversalPhase.IDLE

        engine.advance()
        assert engine.phase is TraversalPhase.DESCENDING
        assert engine.path == (0, 0)

        engine.advance()
        assert engine.phase is TraversalPhase.ADVANCING
        assert engine.path == (0, 1)

        engine.advance()
        assert engine.phase is TraversalPhase.BACKTRACKING
        assert engine.path == (1, 0)

    def test_exhaustion_is_idempotent(self):
        engine = _engine(branching=2, max_depth=2)
        _drain(engine)
        assert engine.exhausted
        for _ in range(3):
            assert engine.advance() is None
        assert engine.phase is TraversalPhase.EXHAUSTED
        assert engine.leaves_visited == 4
        assert engine.points is None

    def test_seed_not_mutated(self):
        engine = _engine(branching=2, max_depth=3)
        _drain(engine)
        np.testing.assert_array_equal(engine.seed.points, initial_batch())

    def test_requires_parallel_transforms(self):
        seed = SeedResult(points=initial_batch(), rounds=0)
        with pytest.raises(ConfigurationError):
            TraversalEngine([_identity], [], seed, 2)

    def test_requires_sequential_transforms(self):
        seed = SeedResult(points=initial_batch(), rounds=0)
        with pytest.raises(ConfigurationError):
            TraversalEngine([], [_identity], seed, 2)
