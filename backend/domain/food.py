"""
Food entity - the single consumable on the board.
"""

import random
from dataclasses import dataclass
from typing import Optional, Sequence

from .constants import BONUS, FOOD_POINTS, ORDINARY
from .position import Position


class BoardFullError(Exception):
    """Raised when food has to spawn but every cell is taken."""


@dataclass(frozen=True)
class Food:
    """
    An immutable food value. Respawning produces a new Food rather than
    moving an existing one.
    """

    position: Position
    food_type: str = ORDINARY

    @property
    def points(self) -> int:
        return FOOD_POINTS[self.food_type]

    @property
    def is_bonus(self) -> bool:
        return self.food_type == BONUS

    def overlaps(self, pos) -> bool:
        return self.position == pos

    @classmethod
    def spawn(
        cls,
        free_cells: Sequence,
        bonus_chance: float = 0.1,
        rng: Optional[random.Random] = None,
    ) -> "Food":
        """
        Place new food uniformly at random on one of *free_cells*.

        The type is drawn independently of the position: BONUS with
        probability *bonus_chance*, ORDINARY otherwise.

        Raises:
            BoardFullError: If there are no free cells.
        """
        if not free_cells:
            raise BoardFullError("No free cells left to spawn food on.")
        rng = rng or random
        position = Position(*rng.choice(free_cells))
        food_type = BONUS if rng.random() < bonus_chance else ORDINARY
        return cls(position=position, food_type=food_type)

    def to_dict(self) -> dict:
        return {
            "position": list(self.position),
            "type": self.food_type,
            "points": self.points,
        }
