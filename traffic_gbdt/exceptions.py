"""
Exception hierarchy

All errors raised by the package derive from TrafficGBDTError so callers
can catch them in one place. Each concrete error also derives from the
builtin exception it most resembles.
"""


class TrafficGBDTError(Exception):
    """Base class for every error raised by traffic_gbdt."""


class DataError(TrafficGBDTError, ValueError):
    """
    Invalid input data: empty dataset, missing labels, NaN/inf or
    negative feature values.
    """


class ConfigError(TrafficGBDTError, ValueError):
    """Invalid configuration value (non-positive tree count, learning rate, ...)."""


class ModelStateError(TrafficGBDTError, RuntimeError):
    """Scoring was attempted with a model that has not been fitted."""
