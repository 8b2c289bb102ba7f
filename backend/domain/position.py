"""
Position value type for grid coordinates.
"""

import math
from typing import NamedTuple

from .constants import DIRECTION_DELTAS


class Position(NamedTuple):
    """An immutable (column, row) cell address. Compares equal to plain tuples."""

    x: int
    y: int

    def add(self, dx: int, dy: int) -> "Position":
        return Position(self.x + dx, self.y + dy)

    def step(self, direction: str) -> "Position":
        """Return the neighbouring cell one step in *direction*."""
        if direction not in DIRECTION_DELTAS:
            raise ValueError(f"Unknown direction: {direction!r}")
        dx, dy = DIRECTION_DELTAS[direction]
        return self.add(dx, dy)

    def distance_to(self, other) -> float:
        return math.hypot(self.x - other[0], self.y - other[1])

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"
