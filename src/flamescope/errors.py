"""Exceptions raised by the flamescope engine."""


class FlamescopeError(Exception):
    """Base class for all flamescope errors."""


class ConfigurationError(FlamescopeError, ValueError):
    """Invalid construction parameters, detected before any state is built."""
