"""
rng.py

Deterministic random source seeded from a string or a number.
"""

import hashlib
from typing import Union

import numpy as np

from .errors import ConfigurationError

Seed = Union[str, int, float]

_SEED_MODULUS = 2**128


def stable_seed(seed: Seed) -> int:
    """
    Map a seed to a 128-bit integer that does not depend on the interpreter's
    hash randomization. Numbers are hashed through their string form, so the
    seeds ``5`` and ``"5"`` are the same stream.
    """
    if seed is None:
        raise ConfigurationError("A seed is required; generate one at the call site for fresh entropy.")
    digest = hashlib.blake2b(str(seed).encode("utf-8"), digest_size=16).digest()
    return int.from_bytes(digest, "big") % _SEED_MODULUS


class SeededRandom:
    """Uniform floats in [0, 1) from a PCG64 stream."""

    def __init__(self, seed: Seed):
        self.seed = seed
        self._generator = np.random.Generator(np.random.PCG64(stable_seed(seed)))

    def next(self) -> float:
        return float(self._generator.random())

    def next_index(self, upper: int) -> int:
        """Uniform integer in [0, upper), drawn as ``floor(next() * upper)``."""
        return min(int(self.next() * upper), upper - 1)
