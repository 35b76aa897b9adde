"""Exceptions raised by the Gray-Scott field core."""


class GrayScottError(Exception):
    """Base class for every error raised by this package."""


class InvalidGridSizeError(GrayScottError, ValueError):
    """Grid width or height is not a positive integer."""


class GridAllocationError(GrayScottError, MemoryError):
    """The concentration buffers could not be allocated."""


class InvalidParameterError(GrayScottError, ValueError):
    """A parameter set entry cannot be used."""


class DegenerateThresholdError(InvalidParameterError):
    """threshold >= 0.9 leaves the intensity curve without a denominator."""


class UnknownBackendError(GrayScottError, KeyError):
    pass


class BackendUnavailableError(GrayScottError, RuntimeError):
    """The backend exists but its runtime (library or device) is missing."""
