from .errors import ConfigurationError, InsufficientNeighborsError, NoiseError
from .perlin import GradientNoiseField
from .vectors import Vector2
from .worley import CellPointField, PointGenerationAlgorithm, PointSelectionCriteria, WorleyField

__all__ = [
    "CellPointField",
    "ConfigurationError",
    "GradientNoiseField",
    "InsufficientNeighborsError",
    "NoiseError",
    "PointGenerationAlgorithm",
    "PointSelectionCriteria",
    "Vector2",
    "WorleyField",
]
