"""
Frame driver for the flame engine.

Owns one engine session, advances it a fixed number of leaves per
frame and yields presentable RGB frames as a generator so they can be
piped to the encoder or a preview window.
"""

import math
from typing import Callable, Iterator, Optional

import numpy as np

from flamescope.core.transforms import default_transforms, make_color_axis
from flamescope.engine import FlameConfig, initialize, pixel_buffer, step


class FlameRenderer:
    """
    Renders the progressively refined attractor image.

    Transforms and the colour axis are drawn from a local rng, so a
    fixed `seed` reproduces a session exactly; `seed=None` draws fresh
    entropy.
    """

    def __init__(self, config: FlameConfig | None = None, seed: int | None = None):
        self.cfg = config or FlameConfig()
        self.cfg.validate()
        self.seed = seed
        self.rng = np.random.default_rng(seed)

        self.sequential, self.parallel = default_transforms(
            self.rng, self.cfg.affine_scale
        )
        self.color_axis = make_color_axis(self.rng)
        self.state = initialize(
            self.sequential,
            self.parallel,
            self.cfg.resolution,
            self.color_axis,
            self.cfg,
        )
        self.frames_rendered = 0

    @property
    def total_frames(self) -> int:
        return math.ceil(self.state.total_leaves / self.cfg.leaves_per_frame)

    @property
    def finished(self) -> bool:
        return self.state.exhausted

    def pixel_buffer(self) -> np.ndarray:
        return pixel_buffer(self.state)

    def render_frame(self) -> Optional[np.ndarray]:
        """
        Advance up to `leaves_per_frame` leaves.

        Returns:
            (res, res, 3) uint8 RGB copy of the buffer, or None when
            there was nothing left to traverse.
        """
        advanced = 0
        for _ in range(self.cfg.leaves_per_frame):
            if not step(self.state):
                break
            advanced += 1

        if advanced == 0:
            return None

        self.frames_rendered += 1
        return np.ascontiguousarray(self.pixel_buffer()[..., :3])

    def render_frames(
        self,
        max_frames: int | None = None,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> Iterator[np.ndarray]:
        """
        Render frames until the traversal is exhausted.

        Args:
            max_frames: Optional cap on frames yielded.
            progress_callback: Optional callback(current, total).

        Yields:
            (res, res, 3) uint8 RGB arrays, one per frame.
        """
        total = self.total_frames
        if max_frames is not None:
            total = min(total, max_frames)

        count = 0
        while max_frames is None or count < max_frames:
            frame = self.render_frame()
            if frame is None:
                break
            count += 1
            yield frame

            if progress_callback:
                progress_callback(count, total)
