"""
Bounded depth-first traversal over transform compositions.

The tree of parallel-transform choices is walked one leaf per call
with an explicit stack, so only `max_depth` point batches are alive
at any time. Each level applies one parallel transform to its parent
batch and then one sequential transform picked by depth.
"""

import enum
import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from flamescope.core.seeder import SeedResult
from flamescope.errors import ConfigurationError

Transform = Callable[[np.ndarray], np.ndarray]

DEFAULT_LEAF_BUDGET = 3.0e8


class TraversalPhase(enum.Enum):
    """The last move made by the traversal."""

    IDLE = "idle"
    DESCENDING = "descending"
    ADVANCING = "advancing"
    BACKTRACKING = "backtracking"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class Level:
    """One stack record: chosen transform index and resulting batch."""

    index: int
    points: np.ndarray


def compute_max_depth(
    leaf_budget: float,
    branching: int,
    seed_rounds: int,
) -> int:
    """
    Deepest level whose leaf count stays within `leaf_budget`.

    The seeding rounds already spent count against the budget. A single
    parallel transform has only one path, so its depth is 0.
    """
    if branching < 1:
        raise ConfigurationError("Branching factor must be at least 1")
    if branching == 1:
        return 0
    # Small tolerance so exact powers (8 with branching 2) land on the integer
    levels = math.floor(math.log(leaf_budget) / math.log(branching) + 1e-9)
    return max(levels - seed_rounds, 0)


class TraversalEngine:
    """
    Enumerates every length-`max_depth` sequence of parallel transforms.

    `advance()` returns the point batch of the next leaf, or None once
    the tree is exhausted. With `max_depth == 0` the seed batch itself
    is the single leaf.
    """

    def __init__(
        self,
        sequential: Sequence[Transform],
        parallel: Sequence[Transform],
        seed: SeedResult,
        max_depth: int,
    ):
        if not parallel:
            raise ConfigurationError("At least one parallel transform is required")
        if not sequential:
            raise ConfigurationError("At least one sequential transform is required")
        if max_depth < 0:
            raise ConfigurationError(f"max_depth must be non-negative, got {max_depth}")

        self.sequential = tuple(sequential)
        self.parallel = tuple(parallel)
        self.seed = seed
        self.max_depth = max_depth

        self._stack: List[Level] = []
        self.phase = TraversalPhase.IDLE
        self.leaves_visited = 0

    @property
    def branching_factor(self) -> int:
        return len(self.parallel)

    @property
    def total_leaves(self) -> int:
        return self.branching_factor ** self.max_depth

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def path(self) -> Tuple[int, ...]:
        """Transform indices from depth 1 down to the current depth."""
        return tuple(level.index for level in self._stack)

    @property
    def points(self) -> Optional[np.ndarray]:
        """Batch at the deepest level (the seed batch at depth 0)."""
        if self._stack:
            return self._stack[-1].points
        if self.phase is TraversalPhase.EXHAUSTED:
            return None
        return self.seed.points

    @property
    def exhausted(self) -> bool:
        return self.phase is TraversalPhase.EXHAUSTED

    def _push(self, index: int):
        depth = len(self._stack) + 1
        parent = self._stack[-1].points if self._stack else self.seed.points
        seq = self.sequential[(self.seed.rounds + depth) % len(self.sequential)]
        self._stack.append(Level(index, seq(self.parallel[index](parent))))

    def _finish(self) -> None:
        self._stack.clear()
        self.phase = TraversalPhase.EXHAUSTED

    def advance(self) -> Optional[np.ndarray]:
        """Move to the next leaf and return its batch, or None if exhausted."""
        if self.phase is TraversalPhase.EXHAUSTED:
            return None

        if self.max_depth == 0:
            if self.phase is TraversalPhase.IDLE:
                self.phase = TraversalPhase.DESCENDING
                self.leaves_visited = 1
                return self.seed.points
            self._finish()
            return None

        if self.phase is TraversalPhase.IDLE:
            self.phase = TraversalPhase.DESCENDING
        else:
            last = len(self.parallel) - 1
            popped = False
            while self._stack and self._stack[-1].index == last:
                self._stack.pop()
                popped = True
            if not self._stack:
                self._finish()
                return None

            sibling = self._stack.pop().index + 1
            self._push(sibling)
            self.phase = (
                TraversalPhase.BACKTRACKING if popped else TraversalPhase.ADVANCING
            )

        while len(self._stack) < self.max_depth:
            self._push(0)

        self.leaves_visited += 1
        return self._stack[-1].points
