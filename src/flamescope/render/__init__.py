"""Drive loop, encoding and live preview for the flame engine."""

from flamescope.render.encoder import encode_video
from flamescope.render.renderer import FlameRenderer

__all__ = ["FlameRenderer", "encode_video"]
