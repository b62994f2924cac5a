"""
Point-batch transform library.

Every transform maps an (N, 5) float64 batch of points (x, y, r, g, b)
to a new (N, 5) batch. Inputs are never modified in place.

Parallel transforms act on each point independently. Sequential
transforms may look at neighbouring points in batch order.
"""

import math
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

import numpy as np

TWO_PI = 2.0 * math.pi
FOUR_PI = 4.0 * math.pi

# Squared norms below this are clamped before negative powers
NORM_EPSILON = 1e-12

CONTRACTION_EXPONENT = -1.0 / 3.0
EXPANSION_EXPONENT = 0.25


def wrap(values: np.ndarray) -> np.ndarray:
    """Fold every coordinate into [-2π, 2π)."""
    folded = np.mod(values + TWO_PI, FOUR_PI)
    # np.mod can round up to exactly 4π for tiny negative inputs
    folded = np.where(folded >= FOUR_PI, folded - FOUR_PI, folded)
    return folded - TWO_PI


def _squared_norms(points: np.ndarray) -> np.ndarray:
    return np.einsum("ij,ij->i", points, points)


def box_muller(rng: np.random.Generator, shape) -> np.ndarray:
    """Standard normal samples via the Box-Muller transform."""
    # 1 - U(0, 1] keeps the log argument strictly positive
    u1 = 1.0 - rng.random(shape)
    u2 = rng.random(shape)
    return np.sqrt(-2.0 * np.log(u1)) * np.cos(TWO_PI * u2)


def make_color_axis(rng: np.random.Generator) -> np.ndarray:
    """Random unit vector in colour space."""
    axis = box_muller(rng, 3)
    length = float(np.linalg.norm(axis))
    while length == 0.0:
        axis = box_muller(rng, 3)
        length = float(np.linalg.norm(axis))
    return axis / length


def concatenate(batches: Sequence[np.ndarray]) -> np.ndarray:
    """Append batches in order."""
    return np.concatenate(batches, axis=0)


# ---------------------------------------------------------------------------
# Parallel transforms
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class AffineTransform:
    """Fixed 5x5 linear map followed by a wrap."""

    matrix: np.ndarray = field(repr=False)
    name: str = "affine"

    def __post_init__(self):
        matrix = np.array(self.matrix, dtype=np.float64)
        if matrix.shape != (5, 5):
            raise ValueError(f"Affine matrix must be 5x5, got {matrix.shape}")
        matrix.flags.writeable = False
        object.__setattr__(self, "matrix", matrix)

    @classmethod
    def random(cls, rng: np.random.Generator, scale: float = 1.0) -> "AffineTransform":
        """Draw a fresh matrix of scaled standard normals."""
        return cls(scale * box_muller(rng, (5, 5)))

    def __call__(self, points: np.ndarray) -> np.ndarray:
        return wrap(points @ self.matrix.T)


@dataclass(frozen=True)
class CosineMap:
    name: str = "cosine"

    def __call__(self, points: np.ndarray) -> np.ndarray:
        return wrap(np.cos(points))


@dataclass(frozen=True)
class ScaledSineMap:
    factor: float = 2.0
    name: str = "sine"

    def __call__(self, points: np.ndarray) -> np.ndarray:
        return wrap(self.factor * np.sin(points))


@dataclass(frozen=True)
class ContractionMap:
    """
    Pull each point toward the origin: v * (|v|²)^(-1/3).

    Not wrapped. Usable both as a parallel and a sequential transform.
    """

    name: str = "contract"

    def __call__(self, points: np.ndarray) -> np.ndarray:
        sq = np.maximum(_squared_norms(points), NORM_EPSILON)
        return points * np.power(sq, CONTRACTION_EXPONENT)[:, np.newaxis]


# ---------------------------------------------------------------------------
# Sequential transforms
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WeightedMeanMap:
    """Average each point with its predecessor; the first pairs with the last."""

    weight: float = 0.5
    name: str = "wmean"

    def __call__(self, points: np.ndarray) -> np.ndarray:
        previous = np.roll(points, 1, axis=0)
        return self.weight * points + (1.0 - self.weight) * previous


@dataclass(frozen=True)
class ExpansionMap:
    """Shift every coordinate by (|v|²)^(1/4), then wrap."""

    name: str = "expand"

    def __call__(self, points: np.ndarray) -> np.ndarray:
        delta = np.power(_squared_norms(points), EXPANSION_EXPONENT)
        return wrap(points + delta[:, np.newaxis])


def default_transforms(
    rng: np.random.Generator,
    affine_scale: float = 1.0,
) -> Tuple[List, List]:
    """
    Build the standard transform set for one session.

    Returns:
        (sequential, parallel). The parallel list interleaves three
        independently drawn affines with cosine, 2·sine and contraction.
    """
    sequential = [WeightedMeanMap(), ExpansionMap(), ContractionMap()]

    parallel = []
    for nonlinear in (CosineMap(), ScaledSineMap(2.0), ContractionMap()):
        parallel.append(AffineTransform.random(rng, affine_scale))
        parallel.append(nonlinear)

    return sequential, parallel
