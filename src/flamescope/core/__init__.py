"""Attractor generation and accumulation core."""

from flamescope.core.accumulator import PixelAccumulator
from flamescope.core.seeder import SeedResult, seed_attractor
from flamescope.core.transforms import default_transforms, make_color_axis
from flamescope.core.traversal import TraversalEngine, TraversalPhase, compute_max_depth

__all__ = [
    "PixelAccumulator",
    "SeedResult",
    "seed_attractor",
    "default_transforms",
    "make_color_axis",
    "TraversalEngine",
    "TraversalPhase",
    "compute_max_depth",
]
