"""
perlin.py

Multi-octave gradient (Perlin) noise that tiles seamlessly over the unit
square. Each octave hashes its lattice corners through a permutation table,
takes the dot product of a fixed gradient with the offset to the sample and
blends the four corners with the quintic fade curve.
"""

import logging
import math
from typing import Iterable, Mapping, Optional, Tuple

from .config import (
    CONTRAST,
    DEFAULT_OCTAVE_WEIGHTS,
    DEFAULT_SCALE,
    DEFAULT_STARTING_OCTAVE_INDEX,
    PERLIN_SCHEMA,
    integral,
    validate_config,
)
from .errors import ConfigurationError
from .permutation import PermutationTable, wrap
from .rng import Seed
from .vectors import Vector2

logger = logging.getLogger(__name__)

GRADIENT_COUNT = 16
GRADIENTS: Tuple[Vector2, ...] = tuple(
    Vector2(math.cos(2.0 * math.pi * i / GRADIENT_COUNT), math.sin(2.0 * math.pi * i / GRADIENT_COUNT))
    for i in range(GRADIENT_COUNT)
)


def fade(t):
    "6t^5 - 15t^4 + 10t^3"
    return t * t * t * (t * (t * 6 - 15) + 10)


def lerp(a, b, x):
    "Linear interpolation."
    return a + x * (b - a)


def normalize_weights(weights: Iterable[float]) -> Tuple[float, ...]:
    """
    Scale octave weights so they sum to 1.

    Raises ConfigurationError for negative weights or when the weights sum to
    zero (which includes an empty sequence).
    """
    raw = [float(w) for w in weights]
    negative = [w for w in raw if w < 0]
    if negative:
        logger.error(f"Negative octave weights are not allowed: {negative}")
        raise ConfigurationError(f"Octave weights must be non-negative, got {raw}")
    total = sum(raw)
    if total == 0:
        logger.error(f"Octave weights sum to zero: {raw}")
        raise ConfigurationError("Octave weights must not sum to zero")
    return tuple(w / total for w in raw)


class GradientNoiseField:
    """
    Immutable gradient noise field.

    Use :meth:`create` (keyword options) or :meth:`from_config` (JSON-style
    mapping) rather than calling the constructor directly.
    """

    def __init__(
        self,
        starting_octave_index: int,
        octave_weights: Tuple[float, ...],
        permutation: PermutationTable,
        scale: Vector2,
    ):
        self.starting_octave_index = starting_octave_index
        self.octave_weights = octave_weights
        self.permutation = permutation
        self.scale = scale

    @classmethod
    def create(
        cls,
        starting_octave_index: int = DEFAULT_STARTING_OCTAVE_INDEX,
        octave_weights: Optional[Iterable[float]] = None,
        seed: Optional[Seed] = None,
        scale=None,
    ) -> "GradientNoiseField":
        """
        Build a field.

        Parameters:
        -----------
        starting_octave_index : int
            Octave of the first weight; octave ``o`` uses a ``2**(o+1)`` grid.
        octave_weights : iterable of float or None
            Relative weight of each octave, normalized to sum to 1.
        seed : str, int, float or None
            Shuffles the permutation table. None keeps the canonical table.
        scale : Vector2, (x, y) or None
            Per-axis multiplier of the grid resolution.
        """
        if isinstance(starting_octave_index, bool) or not isinstance(starting_octave_index, int) \
                or starting_octave_index < 0:
            raise ConfigurationError(
                f"starting_octave_index must be a non-negative integer, got {starting_octave_index!r}"
            )

        weights = normalize_weights(DEFAULT_OCTAVE_WEIGHTS if octave_weights is None else octave_weights)
        scale = Vector2.of(DEFAULT_SCALE if scale is None else scale)
        if scale.x <= 0 or scale.y <= 0:
            raise ConfigurationError(f"scale must be positive on both axes, got {scale}")

        permutation = PermutationTable(seed)
        logger.debug(
            f"Created gradient noise field: octaves {starting_octave_index}.."
            f"{starting_octave_index + len(weights) - 1}, scale=({scale.x}, {scale.y}), "
            f"seeded={seed is not None}"
        )
        return cls(starting_octave_index, weights, permutation, scale)

    @classmethod
    def from_config(cls, config: Optional[Mapping] = None) -> "GradientNoiseField":
        """Build a field from ``{startingOctaveIndex, octaveWeights, seed, scale: {x, y}}``."""
        config = dict(config or {})
        validate_config(config, PERLIN_SCHEMA, "perlin")
        scale = config.get("scale")
        return cls.create(
            starting_octave_index=integral(config.get("startingOctaveIndex", DEFAULT_STARTING_OCTAVE_INDEX)),
            octave_weights=config.get("octaveWeights"),
            seed=config.get("seed"),
            scale=(scale["x"], scale["y"]) if scale else None,
        )

    @property
    def octaves(self) -> range:
        return range(self.starting_octave_index, self.starting_octave_index + len(self.octave_weights))

    def at(self, position) -> float:
        """
        Sample the field. Positions in [0, 1) cover one period; anything else
        wraps. The result is centred on 0.5 and stays within [0, 1] for the
        default weights.
        """
        position = Vector2.of(position)
        intensity = 0.0
        for octave_index, weight in zip(self.octaves, self.octave_weights):
            if weight == 0:
                continue
            contribution = self._octave_value(position, octave_index) * weight * CONTRAST
            intensity += max(-1.0, min(1.0, contribution))
        return (intensity + 1.0) * 0.5

    def _octave_value(self, position: Vector2, octave_index: int) -> float:
        grid_size = 2 ** (octave_index + 1)
        wrap_x = math.ceil(grid_size * self.scale.x)
        wrap_y = math.ceil(grid_size * self.scale.y)

        point = position.times(self.scale) * grid_size
        x0 = math.floor(point.x)
        y0 = math.floor(point.y)
        x1 = x0 + 1
        y1 = y0 + 1

        u = fade(point.x - x0)
        v = fade(point.y - y0)

        n0 = self._dot_grid_gradient(x0, y0, point, wrap_x, wrap_y)
        n1 = self._dot_grid_gradient(x1, y0, point, wrap_x, wrap_y)
        ix0 = lerp(n0, n1, u)

        n0 = self._dot_grid_gradient(x0, y1, point, wrap_x, wrap_y)
        n1 = self._dot_grid_gradient(x1, y1, point, wrap_x, wrap_y)
        ix1 = lerp(n0, n1, u)

        return lerp(ix0, ix1, v)

    def _dot_grid_gradient(self, ix: int, iy: int, point: Vector2, wrap_x: int, wrap_y: int) -> float:
        # The corner is wrapped for hashing only; the offset uses the real corner.
        h = self.permutation.hash(wrap(ix, wrap_x), wrap(iy, wrap_y))
        gradient = GRADIENTS[h % GRADIENT_COUNT]
        return gradient.dot(Vector2(point.x - ix, point.y - iy))
