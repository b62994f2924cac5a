"""
Attractor seeding by brute-force forward iteration.

Each round applies every parallel transform to the working batch,
concatenates the results (growing the batch by the branching factor)
and then applies one sequential transform, chosen round-robin.
"""

from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np

from flamescope.core.transforms import concatenate

Transform = Callable[[np.ndarray], np.ndarray]

SEED_POINT_COUNT = 5


@dataclass(frozen=True)
class SeedResult:
    """Seed batch and the number of rounds it took to build."""

    points: np.ndarray
    rounds: int

    def __len__(self) -> int:
        return len(self.points)


def initial_batch() -> np.ndarray:
    """Five canonical points, one unit marker per axis."""
    return np.eye(SEED_POINT_COUNT, 5, dtype=np.float64)


def seed_attractor(
    sequential: Sequence[Transform],
    parallel: Sequence[Transform],
    threshold: int = 250_000,
    max_rounds: int = 64,
) -> SeedResult:
    """
    Grow a point batch until it holds at least `threshold` points.

    Stops early after `max_rounds` rounds, which only matters when the
    parallel set cannot grow the batch (a single transform).

    Args:
        sequential: Batch-to-batch maps, used in round-robin order.
        parallel: Per-point maps; each round applies all of them.
        threshold: Target batch size.
        max_rounds: Upper bound on rounds.

    Returns:
        SeedResult with the final batch and round count.
    """
    points = initial_batch()
    rounds = 0
    while len(points) < threshold and rounds < max_rounds:
        points = concatenate([tx(points) for tx in parallel])
        points = sequential[rounds % len(sequential)](points)
        rounds += 1
    return SeedResult(points=points, rounds=rounds)
