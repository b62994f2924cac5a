"""Fractal flame attractor generation and progressive rendering."""

from flamescope.engine import EngineState, FlameConfig, initialize, pixel_buffer, step
from flamescope.errors import ConfigurationError, FlamescopeError

__version__ = "0.1.0"
__all__ = [
    "EngineState",
    "FlameConfig",
    "initialize",
    "pixel_buffer",
    "step",
    "ConfigurationError",
    "FlamescopeError",
]
