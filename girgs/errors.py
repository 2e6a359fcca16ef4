"""Exception taxonomy for GIRG generation.

All failures are local and synchronous. Nothing is retried internally:
re-deriving a calibration interval or re-sampling is left to the caller.
"""


class GirgError(Exception):
    """Base class for every error raised by the generator."""


class InvalidParameterError(GirgError, ValueError):
    """Raised when a model parameter or an explicit input is out of range."""


class NotReadyError(GirgError, RuntimeError):
    """Raised when an operation runs before its upstream state exists."""


class CalibrationError(GirgError):
    """Raised when no scaling constant reaches the desired average degree."""
