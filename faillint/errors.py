"""Exceptions raised outside of the analysis itself.

Analysis never raises on malformed input; problems in analyzed code are
reported as diagnostics.
"""


class FaillintError(Exception):
    """Base class for faillint errors."""


class ConfigError(FaillintError):
    """Configuration file could not be loaded."""


class SourceError(FaillintError):
    """Source file could not be read."""
