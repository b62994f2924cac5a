"""
Projection and running-mean colour accumulation.

Spatial coordinates in [-2π, 2π) map onto a square pixel grid (row
axis flipped so +y points up). Colour has its component along a fixed
axis removed, is summed per pixel, and the presented colour is the
periodic tone curve 127.5 * (1 - cos(mean)).
"""

import math

import numpy as np

from flamescope.core.transforms import FOUR_PI, TWO_PI
from flamescope.errors import ConfigurationError


def project(points: np.ndarray, resolution: int):
    """
    Map point positions to (rows, cols) pixel indices.

    Returns:
        Tuple of int64 arrays. Values may fall outside the grid when
        the points were not wrapped.
    """
    scale = (resolution - 1) / FOUR_PI
    cols = np.floor((TWO_PI + points[:, 0]) * scale)
    rows = np.floor((TWO_PI - points[:, 1]) * scale)
    return rows, cols


def remove_axis(colors: np.ndarray, axis: np.ndarray) -> np.ndarray:
    """Subtract each colour's component along the unit `axis`."""
    return colors - np.outer(colors @ axis, axis)


def tone_map(mean: np.ndarray) -> np.ndarray:
    """Periodic tone curve from running-mean colour to 0-255."""
    values = np.floor(127.5 * (1.0 - np.cos(mean)))
    return np.clip(values, 0, 255).astype(np.uint8)


def validate_color_axis(axis) -> np.ndarray:
    """Return `axis` as a unit float64 3-vector."""
    arr = np.array(axis, dtype=np.float64)
    if arr.shape != (3,) or not np.all(np.isfinite(arr)):
        raise ConfigurationError(f"Colour axis must be a finite 3-vector, got {axis!r}")
    length = float(np.linalg.norm(arr))
    if length == 0.0:
        raise ConfigurationError("Colour axis must be non-zero")
    if not math.isclose(length, 1.0, rel_tol=1e-9):
        arr = arr / length
    return arr


class PixelAccumulator:
    """
    Per-pixel sample counts, colour sums and the presented RGBA buffer.

    Owned by one engine and only ever grown; there is no reset.
    """

    def __init__(self, resolution: int, color_axis):
        if resolution <= 0:
            raise ConfigurationError(f"Resolution must be positive, got {resolution}")

        self.resolution = resolution
        self.color_axis = validate_color_axis(color_axis)
        self.color_axis.flags.writeable = False

        n_pixels = resolution * resolution
        self._counts = np.zeros(n_pixels, dtype=np.int64)
        self._sums = np.zeros((n_pixels, 3), dtype=np.float64)

        self._pixels = np.zeros((resolution, resolution, 4), dtype=np.uint8)
        self._pixels[..., 3] = 255

        self.samples = 0

    @property
    def counts(self) -> np.ndarray:
        """(res, res) sample counts, read-only."""
        return _readonly(self._counts.reshape(self.resolution, self.resolution))

    @property
    def sums(self) -> np.ndarray:
        """(res, res, 3) colour sums, read-only."""
        return _readonly(self._sums.reshape(self.resolution, self.resolution, 3))

    @property
    def pixels(self) -> np.ndarray:
        """(res, res, 4) uint8 RGBA buffer, read-only."""
        return _readonly(self._pixels)

    def mean_colors(self) -> np.ndarray:
        """Running mean colour per pixel; zero where nothing has landed."""
        counts = self._counts[:, np.newaxis]
        mean = np.divide(
            self._sums, counts,
            out=np.zeros_like(self._sums),
            where=counts > 0,
        )
        return mean.reshape(self.resolution, self.resolution, 3)

    def accumulate(self, points: np.ndarray) -> int:
        """
        Splat a batch into the grid and refresh the touched pixels.

        Points that are non-finite or land outside the grid are dropped.

        Returns:
            Number of points accumulated.
        """
        res = self.resolution
        rows, cols = project(points, res)
        inside = (
            np.isfinite(rows) & np.isfinite(cols)
            & (rows >= 0) & (rows < res)
            & (cols >= 0) & (cols < res)
        )
        inside &= np.all(np.isfinite(points[:, 2:5]), axis=1)
        if not np.any(inside):
            return 0

        flat = rows[inside].astype(np.int64) * res + cols[inside].astype(np.int64)
        colors = remove_axis(points[inside, 2:5], self.color_axis)

        n_pixels = res * res
        hits = np.bincount(flat, minlength=n_pixels)
        self._counts += hits
        for channel in range(3):
            self._sums[:, channel] += np.bincount(
                flat, weights=colors[:, channel], minlength=n_pixels
            )

        touched = np.flatnonzero(hits)
        mean = self._sums[touched] / self._counts[touched, np.newaxis]
        self._pixels.reshape(-1, 4)[touched, :3] = tone_map(mean)

        added = int(flat.size)
        self.samples += added
        return added


def _readonly(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view
