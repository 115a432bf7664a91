"""
Exception hierarchy for Heightify.

Acquisition misses and out-of-order transitions are reported through
status codes on the measurement snapshot; exceptions are reserved for
bad caller input, bad configuration and controller misuse.
"""


class HeightifyError(Exception):
    """Base class for all Heightify errors."""


class InputValidationError(HeightifyError, ValueError):
    """Raised when a numeric or point input cannot be parsed."""


class ConfigError(HeightifyError):
    """Raised when a configuration file is missing or malformed."""


class TrackingUnavailableError(HeightifyError):
    """Raised when a measurement is started on a source without tracking."""


class MeasurementIncompleteError(HeightifyError):
    """Raised when a measurement result is requested before completion."""
