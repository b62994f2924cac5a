"""
Engine facade: seeding, traversal and accumulation behind three calls.

    state = initialize(sequential, parallel, resolution, color_axis)
    while step(state):
        present(pixel_buffer(state))
"""

from dataclasses import dataclass, field, replace
from typing import Callable, Optional, Sequence

import numpy as np

from flamescope.core.accumulator import PixelAccumulator, validate_color_axis
from flamescope.core.seeder import SeedResult, seed_attractor
from flamescope.core.traversal import (
    DEFAULT_LEAF_BUDGET,
    TraversalEngine,
    compute_max_depth,
)
from flamescope.errors import ConfigurationError

Transform = Callable[[np.ndarray], np.ndarray]


@dataclass
class FlameConfig:
    """Configuration for a flame session."""

    resolution: int = 640
    fps: int = 60

    # Seeding
    seed_threshold: int = 250_000
    max_seed_rounds: int = 64

    # Traversal
    leaf_budget: float = DEFAULT_LEAF_BUDGET
    leaves_per_frame: int = 1

    # Transform construction
    affine_scale: float = 1.0

    def validate(self) -> None:
        """Raise ConfigurationError for values no session can run with."""
        if self.resolution <= 0:
            raise ConfigurationError(f"Resolution must be positive, got {self.resolution}")
        if self.fps <= 0:
            raise ConfigurationError(f"fps must be positive, got {self.fps}")
        if self.seed_threshold <= 0:
            raise ConfigurationError(
                f"seed_threshold must be positive, got {self.seed_threshold}"
            )
        if self.max_seed_rounds < 0:
            raise ConfigurationError(
                f"max_seed_rounds must be non-negative, got {self.max_seed_rounds}"
            )
        if self.leaf_budget < 1:
            raise ConfigurationError(f"leaf_budget must be >= 1, got {self.leaf_budget}")
        if self.leaves_per_frame < 1:
            raise ConfigurationError(
                f"leaves_per_frame must be >= 1, got {self.leaves_per_frame}"
            )


@dataclass
class EngineState:
    """Everything one session owns: traversal stack and pixel accumulator."""

    traversal: TraversalEngine
    accumulator: PixelAccumulator
    config: FlameConfig = field(default_factory=FlameConfig)

    @property
    def seed(self) -> SeedResult:
        return self.traversal.seed

    @property
    def seed_rounds(self) -> int:
        return self.traversal.seed.rounds

    @property
    def max_depth(self) -> int:
        return self.traversal.max_depth

    @property
    def branching_factor(self) -> int:
        return self.traversal.branching_factor

    @property
    def total_leaves(self) -> int:
        return self.traversal.total_leaves

    @property
    def leaves_visited(self) -> int:
        return self.traversal.leaves_visited

    @property
    def exhausted(self) -> bool:
        return self.traversal.exhausted

    @property
    def resolution(self) -> int:
        return self.accumulator.resolution

    @property
    def counts(self) -> np.ndarray:
        return self.accumulator.counts

    @property
    def sums(self) -> np.ndarray:
        return self.accumulator.sums


def initialize(
    sequential: Sequence[Transform],
    parallel: Sequence[Transform],
    resolution: int,
    color_axis,
    config: Optional[FlameConfig] = None,
) -> EngineState:
    """
    Seed the attractor and allocate the pixel accumulator.

    All arguments are checked before any seeding work starts. The
    `resolution` argument overrides `config.resolution`.

    Raises:
        ConfigurationError: Empty transform lists, bad resolution,
            degenerate colour axis or invalid config values.
    """
    if not parallel:
        raise ConfigurationError("At least one parallel transform is required")
    if not sequential:
        raise ConfigurationError("At least one sequential transform is required")
    if resolution <= 0:
        raise ConfigurationError(f"Resolution must be positive, got {resolution}")
    cfg = replace(config or FlameConfig(), resolution=resolution)
    cfg.validate()
    axis = validate_color_axis(color_axis)

    seed = seed_attractor(
        sequential,
        parallel,
        threshold=cfg.seed_threshold,
        max_rounds=cfg.max_seed_rounds,
    )
    max_depth = compute_max_depth(cfg.leaf_budget, len(parallel), seed.rounds)

    return EngineState(
        traversal=TraversalEngine(sequential, parallel, seed, max_depth),
        accumulator=PixelAccumulator(resolution, axis),
        config=cfg,
    )


def step(state: EngineState) -> bool:
    """
    Advance one leaf and accumulate it.

    Returns:
        False once the traversal is exhausted; every later call is a
        no-op that also returns False.
    """
    points = state.traversal.advance()
    if points is None:
        return False
    state.accumulator.accumulate(points)
    return True


def pixel_buffer(state: EngineState) -> np.ndarray:
    """Read-only (res, res, 4) uint8 RGBA view of the accumulated image."""
    return state.accumulator.pixels
