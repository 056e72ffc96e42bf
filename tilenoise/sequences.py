"""
sequences.py

Low-discrepancy sequences used to distribute cellular feature points.
"""

from typing import Tuple

from .errors import ConfigurationError


def halton(index, base):
    """
    Compute the radical inverse of an index in a given base, i.e. the
    ``index``-th element of the Halton sequence in that base.

    Parameters:
    -----------
    index : int
        Non-negative position in the sequence.
    base  : int
        The base for the radical inverse (at least 2).

    Returns:
    --------
    float
        Value in [0, 1).
    """
    if index < 0:
        raise ConfigurationError(f"Halton index must be non-negative, got {index}")
    if base < 2:
        raise ConfigurationError(f"Halton base must be at least 2, got {base}")

    inverse = 0.0
    f = 1.0 / base
    i = index
    while i > 0:
        inverse += f * (i % base)
        i = i // base
        f /= base
    return inverse


def hammersley(index: int, total_count: int) -> Tuple[float, float]:
    """2D Hammersley point: a linear first coordinate and base-2 Halton second coordinate."""
    if total_count <= 0:
        raise ConfigurationError(f"Hammersley total count must be positive, got {total_count}")
    return index / total_count, halton(index, 2)
