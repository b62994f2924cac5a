"""
Live pygame preview: the drive loop that presents the buffer each tick.
"""

import time
from typing import Callable

import numpy as np
import pygame

from flamescope.render.renderer import FlameRenderer


def buffer_to_surface(frame: np.ndarray) -> pygame.Surface:
    """Convert an (H, W, 3|4) uint8 buffer to a pygame Surface."""
    # pygame uses (width, height) but numpy stores (height, width)
    rgb = np.ascontiguousarray(frame[..., :3].swapaxes(0, 1))
    return pygame.surfarray.make_surface(rgb)


def _quit_requested() -> bool:
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            return True
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            return True
    return False


def run_preview(
    renderer: FlameRenderer,
    max_frames: int | None = None,
    hold: bool = True,
    progress_callback: Callable[[int, int], None] | None = None,
) -> int:
    """
    Present frames in a window until exhaustion or the window closes.

    Args:
        renderer: Session to drive.
        max_frames: Optional cap on frames presented.
        hold: Keep the finished image on screen until the window closes.
        progress_callback: Optional callback(current, total).

    Returns:
        Number of frames presented.
    """
    res = renderer.cfg.resolution
    pygame.init()
    try:
        screen = pygame.display.set_mode((res, res))
        pygame.display.set_caption("flamescope")
        clock = pygame.time.Clock()

        presented = 0
        closed = False
        for frame in renderer.render_frames(max_frames, progress_callback):
            if _quit_requested():
                closed = True
                break
            screen.blit(buffer_to_surface(frame), (0, 0))
            pygame.display.flip()
            presented += 1
            clock.tick(renderer.cfg.fps)

        while hold and not closed:
            if _quit_requested():
                break
            time.sleep(0.05)

        return presented
    finally:
        pygame.quit()
