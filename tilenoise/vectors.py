"""
vectors.py

Minimal immutable 2D vector used by both noise families.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Vector2:
    x: float
    y: float

    @classmethod
    def of(cls, value) -> "Vector2":
        """Coerce a Vector2, an object with x/y attributes or an (x, y) pair."""
        if isinstance(value, cls):
            return value
        if hasattr(value, "x") and hasattr(value, "y"):
            return cls(float(value.x), float(value.y))
        x, y = value
        return cls(float(x), float(y))

    def __add__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> "Vector2":
        return Vector2(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __iter__(self):
        yield self.x
        yield self.y

    def times(self, other: "Vector2") -> "Vector2":
        """Component-wise product."""
        return Vector2(self.x * other.x, self.y * other.y)

    def dot(self, other: "Vector2") -> float:
        return self.x * other.x + self.y * other.y

    def length(self) -> float:
        return math.hypot(self.x, self.y)
