"""Pytest configuration and shared fixtures."""

import os

import numpy as np
import pytest

from flamescope.engine import FlameConfig

# pygame windows go to the dummy driver under test
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded generator for reproducible transforms."""
    return np.random.default_rng(1234)


@pytest.fixture
def wrapped_batch(rng) -> np.ndarray:
    """
    A batch of 500 points already inside [-2π, 2π).

    Returns:
        (500, 5) float64 array.
    """
    return rng.uniform(-2 * np.pi, 2 * np.pi, size=(500, 5))


@pytest.fixture
def small_config() -> FlameConfig:
    """
    Config that seeds in a few rounds and traverses quickly.

    With the default transforms (branching 6) the seed batch has 1080
    points after 3 rounds and the traversal is 2 levels deep (36 leaves).
    """
    return FlameConfig(
        resolution=64,
        fps=30,
        seed_threshold=200,
        leaf_budget=1.0e4,
    )
