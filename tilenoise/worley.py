"""
worley.py

Cellular (Worley) noise over a toroidal grid of feature points.

The unit square is split into ``side x side`` cells, ``side`` being
``ceil(sqrt(num_points))``. Feature points are distributed with a seeded
random generator or with a Halton/Hammersley low-discrepancy sequence, and a
query returns a function of the distances to the nearest of them.
"""

import logging
import math
from enum import Enum
from typing import List, Mapping, Optional, Tuple

from .config import (
    DEFAULT_NUM_POINTS,
    DEFAULT_POINT_GEN_ALGORITHM,
    DEFAULT_POINT_SELECTION_CRITERIA,
    DEFAULT_WORLEY_SEED,
    WORLEY_SCHEMA,
    integral,
    validate_config,
)
from .errors import ConfigurationError, InsufficientNeighborsError
from .rng import Seed, SeededRandom
from .sequences import halton, hammersley
from .vectors import Vector2

logger = logging.getLogger(__name__)


class _Selector(Enum):
    """Enum accepting its members, their values or their names (any case)."""

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().lower().replace("-", "_")
            for member in cls:
                if key in (member.value, member.name.lower(), member.value.replace("_", "")):
                    return member
        return None

    @classmethod
    def parse(cls, value):
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            logger.error(f"Unknown {cls.__name__} {value!r}")
            raise ConfigurationError(f"Invalid {cls.__name__} {value!r}; expected one of: {choices}") from None


class PointGenerationAlgorithm(_Selector):
    RANDOM = "random"
    HALTON = "halton"
    HAMMERSLEY = "hammersley"


class PointSelectionCriteria(_Selector):
    CLOSEST = "closest"
    SECOND_CLOSEST = "second_closest"
    SECOND_MINUS_CLOSEST = "second_minus_closest"

    @property
    def search_radius(self) -> int:
        return 1 if self is PointSelectionCriteria.CLOSEST else 2

    @property
    def required_points(self) -> int:
        return 1 if self is PointSelectionCriteria.CLOSEST else 2


def grid_side(num_points: int) -> int:
    return math.ceil(math.sqrt(num_points))


class CellPointField:
    """
    Square grid of cells, each holding the offsets (in [0, 1)) of its feature
    points. ``cells[y][x]`` is the tuple of points of cell ``(x, y)``.
    """

    def __init__(self, side: int, cells: Tuple[Tuple[Tuple[Vector2, ...], ...], ...]):
        self.side = side
        self.cells = cells

    def __getitem__(self, cell):
        x, y = cell
        return self.cells[y][x]

    @property
    def point_count(self) -> int:
        return sum(len(cell) for row in self.cells for cell in row)

    @classmethod
    def generate(cls, num_points: int, seed: Seed, algorithm) -> "CellPointField":
        algorithm = PointGenerationAlgorithm.parse(algorithm)
        if algorithm is PointGenerationAlgorithm.RANDOM:
            return cls.random_points(num_points, seed)
        elif algorithm is PointGenerationAlgorithm.HALTON:
            return cls.halton_points(num_points)
        else:
            return cls.hammersley_points(num_points)

    @classmethod
    def random_points(cls, num_points: int, seed: Seed) -> "CellPointField":
        """One uniformly random point in every cell; ``side**2`` points in total."""
        side = grid_side(num_points)
        rng = SeededRandom(seed)
        cells = []
        for _y in range(side):
            row = []
            for _x in range(side):
                row.append((Vector2(rng.next(), rng.next()),))
            cells.append(tuple(row))
        return cls(side, tuple(cells))

    @classmethod
    def halton_points(cls, num_points: int) -> "CellPointField":
        """Exactly ``num_points`` points from the (2, 3) Halton sequence."""
        return cls._from_unit_points(num_points, ((halton(i, 2), halton(i, 3)) for i in range(num_points)))

    @classmethod
    def hammersley_points(cls, num_points: int) -> "CellPointField":
        """Exactly ``num_points`` points from the Hammersley set of that size."""
        return cls._from_unit_points(num_points, (hammersley(i, num_points) for i in range(num_points)))

    @classmethod
    def _from_unit_points(cls, num_points: int, points) -> "CellPointField":
        side = grid_side(num_points)
        cells: List[List[List[Vector2]]] = [[[] for _x in range(side)] for _y in range(side)]
        for px, py in points:
            gx = px * side
            gy = py * side
            # Rounding can land a point exactly on the far edge; that is cell 0 on the torus.
            ix = math.floor(gx) % side
            iy = math.floor(gy) % side
            cells[iy][ix].append(Vector2(gx % 1.0, gy % 1.0))
        return cls(side, tuple(tuple(tuple(cell) for cell in row) for row in cells))


class WorleyField:
    """
    Immutable cellular noise field.

    Use :meth:`create` (keyword options) or :meth:`from_config` (JSON-style
    mapping) rather than calling the constructor directly.
    """

    def __init__(
        self,
        num_points: int,
        dots: CellPointField,
        point_selection_criteria: PointSelectionCriteria,
    ):
        self.num_points = num_points
        self.dots = dots
        self.point_selection_criteria = point_selection_criteria
        self.search_radius = point_selection_criteria.search_radius

    @classmethod
    def create(
        cls,
        seed: Seed = DEFAULT_WORLEY_SEED,
        num_points: int = DEFAULT_NUM_POINTS,
        point_gen_algorithm=DEFAULT_POINT_GEN_ALGORITHM,
        point_selection_criteria=DEFAULT_POINT_SELECTION_CRITERIA,
    ) -> "WorleyField":
        """
        Build a field.

        Parameters:
        -----------
        seed : str, int or float
            Seed of the random point generator. Ignored by Halton and
            Hammersley, which are deterministic by construction.
        num_points : int
            Requested number of feature points; sizes the grid.
        point_gen_algorithm : PointGenerationAlgorithm or str
            ``random``, ``halton`` or ``hammersley``.
        point_selection_criteria : PointSelectionCriteria or str
            ``closest``, ``second_closest`` or ``second_minus_closest``.
        """
        if isinstance(num_points, bool) or not isinstance(num_points, int) or num_points < 1:
            raise ConfigurationError(f"num_points must be a positive integer, got {num_points!r}")
        algorithm = PointGenerationAlgorithm.parse(point_gen_algorithm)
        criteria = PointSelectionCriteria.parse(point_selection_criteria)

        dots = CellPointField.generate(num_points, seed, algorithm)
        logger.debug(
            f"Created worley field: {algorithm.value} points, {dots.point_count} in a "
            f"{dots.side}x{dots.side} grid, {criteria.value} within radius {criteria.search_radius}"
        )
        return cls(num_points, dots, criteria)

    @classmethod
    def from_config(cls, config: Optional[Mapping] = None) -> "WorleyField":
        """Build a field from ``{seed, numPoints, pointGenAlgorithm, pointSelectionCriteria}``."""
        config = dict(config or {})
        validate_config(config, WORLEY_SCHEMA, "worley")
        return cls.create(
            seed=config.get("seed", DEFAULT_WORLEY_SEED),
            num_points=integral(config.get("numPoints", DEFAULT_NUM_POINTS)),
            point_gen_algorithm=config.get("pointGenAlgorithm", DEFAULT_POINT_GEN_ALGORITHM),
            point_selection_criteria=config.get("pointSelectionCriteria", DEFAULT_POINT_SELECTION_CRITERIA),
        )

    def neighbor_points(self, grid_pos: Vector2) -> List[Vector2]:
        """
        Feature points of the cells within the search radius of ``grid_pos``,
        in grid space. Points of wrapped cells are placed next to the query
        cell rather than at their stored position.
        """
        side = self.dots.side
        radius = self.search_radius
        cx = math.floor(grid_pos.x)
        cy = math.floor(grid_pos.y)

        points = []
        for y_offset in range(-radius, radius + 1):
            y = (cy + y_offset) % side
            for x_offset in range(-radius, radius + 1):
                x = (cx + x_offset) % side
                origin = Vector2(cx + x_offset, cy + y_offset)
                for point in self.dots[x, y]:
                    points.append(origin + point)
        return points

    def at(self, position) -> float:
        position = Vector2.of(position)
        grid_pos = position * self.dots.side
        points = self.neighbor_points(grid_pos)

        criteria = self.point_selection_criteria
        if len(points) < criteria.required_points:
            raise InsufficientNeighborsError(criteria.required_points, len(points), position)

        distances = [(grid_pos - point).length() for point in points]
        if criteria is PointSelectionCriteria.CLOSEST:
            return min(distances)

        closest, second = _two_smallest(distances)
        if criteria is PointSelectionCriteria.SECOND_CLOSEST:
            return second
        return second - closest


def _two_smallest(distances) -> Tuple[float, float]:
    closest = second = math.inf
    for distance in distances:
        if distance < closest:
            second = closest
            closest = distance
        elif distance < second:
            second = distance
    return closest, second
