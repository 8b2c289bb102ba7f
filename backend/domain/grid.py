"""
Grid entity - the square board the snake moves on.
"""

from typing import Iterable, List

from .position import Position


class Grid:
    """
    A square board of size x size cells.

    The grid never changes once built; a different board size means a new
    Grid and a fresh engine.
    """

    def __init__(self, size: int):
        if size <= 0:
            raise ValueError(f"Grid size must be positive, got {size}.")
        self._size = size

    @property
    def size(self) -> int:
        return self._size

    def is_in_bounds(self, pos) -> bool:
        x, y = pos
        return 0 <= x < self._size and 0 <= y < self._size

    def cells(self) -> List[Position]:
        """Every cell on the board in row-major order."""
        return [Position(x, y) for y in range(self._size) for x in range(self._size)]

    def free_cells(self, occupied: Iterable) -> List[Position]:
        """
        Return all cells not in *occupied*, row-major.

        An empty result means the board is full and no food can spawn.
        """
        taken = set(occupied)
        return [cell for cell in self.cells() if cell not in taken]

    def center(self) -> Position:
        half = self._size // 2
        return Position(half, half)

    def __repr__(self):
        return f"<Grid size={self._size}>"
