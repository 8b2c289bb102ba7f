"""
Read-only views of the game handed to renderers and listeners.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, NamedTuple, Optional, Tuple


class Segment(NamedTuple):
    position: Tuple[int, int]
    is_head: bool


@dataclass(frozen=True)
class ScoreSummary:
    """
    Attributes:
        current_score: points earned this game
        best_score: highest score ever recorded
        length: current snake length
        food_eaten: items consumed this game
        elapsed_seconds: whole seconds spent playing (pauses excluded)
    """

    current_score: int = 0
    best_score: int = 0
    length: int = 0
    food_eaten: int = 0
    elapsed_seconds: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "current_score": self.current_score,
            "best_score": self.best_score,
            "length": self.length,
            "food_eaten": self.food_eaten,
            "elapsed_seconds": self.elapsed_seconds,
        }


@dataclass(frozen=True)
class GameSnapshot:
    """
    A snapshot of the game at a specific point in time.

    Attributes:
        segments: snake segments, head first
        food: the current Food value, or None before the first spawn
        score: ScoreSummary at the time of the snapshot
        state: engine state (MENU, PLAYING, PAUSED, GAME_OVER)
        grid_size: board width and height
    """

    segments: List[Segment]
    food: Optional[Any]
    score: ScoreSummary
    state: str
    grid_size: int
    tick_number: int = 0

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        F = ordinary food, B = bonus food
        H = snake head
        S = snake body
        Row 0 is printed first, x-axis labels at the bottom.
        """
        board = [['.' for _ in range(self.grid_size)] for _ in range(self.grid_size)]

        if self.food is not None:
            fx, fy = self.food.position
            board[fy][fx] = 'B' if self.food.is_bonus else 'F'

        # Body first so the head wins if a grown tail overlaps it
        for (x, y), is_head in reversed(self.segments):
            if 0 <= x < self.grid_size and 0 <= y < self.grid_size:
                board[y][x] = 'H' if is_head else 'S'

        result = []
        for y in range(self.grid_size):
            result.append(f"{y:2d} {' '.join(board[y])}")

        result.append("   " + " ".join(str(i % 10) for i in range(self.grid_size)))

        return "\n".join(result)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "segments": [
                {"position": list(seg.position), "is_head": seg.is_head}
                for seg in self.segments
            ],
            "food": self.food.to_dict() if self.food is not None else None,
            "score": self.score.to_dict(),
            "state": self.state,
            "grid_size": self.grid_size,
            "tick_number": self.tick_number,
        }

    def __repr__(self):
        return (
            f"<GameSnapshot tick={self.tick_number}, state={self.state}, "
            f"length={len(self.segments)}, score={self.score.current_score}>"
        )
