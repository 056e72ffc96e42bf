"""
errors.py

Exception types raised by the noise fields.
"""


class NoiseError(Exception):
    """Base class for every error raised by tilenoise."""


class ConfigurationError(NoiseError, ValueError):
    """
    Raised when a field is created from an invalid configuration: unknown
    generation algorithm or selection criteria, octave weights that cannot be
    normalized, a non-positive point count, and similar.
    """


class InsufficientNeighborsError(NoiseError, RuntimeError):
    """
    Raised when a cellular query collects fewer feature points than its
    selection strategy needs.
    """

    def __init__(self, required: int, found: int, position=None):
        self.required = required
        self.found = found
        self.position = position
        message = f"Selection needs at least {required} feature point(s) but the search found {found}"
        if position is not None:
            message += f" around {position}"
        super().__init__(message)
