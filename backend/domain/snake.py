"""
Snake entity for the game engine.
"""

from collections import deque
from typing import List, Tuple

from .constants import OPPOSITE_DIRECTIONS, RIGHT, VALID_MOVES
from .game_state import Segment
from .position import Position


class Snake:
    """
    Represents the player's snake.

    Attributes:
        positions: deque of Position from head at index 0 to tail at the end
        direction: the direction applied by the most recent advance
        pending_direction: the direction the next advance will apply

    The snake knows nothing about board edges; the engine checks bounds
    after each advance.
    """

    def __init__(self, start: Tuple[int, int], initial_length: int = 3):
        if initial_length < 1:
            raise ValueError(f"Snake length must be at least 1, got {initial_length}.")
        self.start = Position(*start)
        self.initial_length = initial_length
        self.positions: deque = deque()
        self.direction = RIGHT
        self.pending_direction = RIGHT
        self._lay_out()

    def _lay_out(self) -> None:
        # Horizontal, head on the right, body trailing to the left.
        self.positions = deque(
            Position(self.start.x - i, self.start.y) for i in range(self.initial_length)
        )

    @property
    def head(self) -> Position:
        """Return the head position (first element)."""
        return self.positions[0]

    def __len__(self) -> int:
        return len(self.positions)

    def request_direction(self, direction: str) -> bool:
        """
        Queue *direction* for the next advance.

        A reversal relative to the current direction is dropped, even if a
        different direction is already pending. Returns True when accepted.
        """
        if direction not in VALID_MOVES:
            raise ValueError(f"Unknown direction: {direction!r}")
        if OPPOSITE_DIRECTIONS[self.direction] == direction:
            return False
        self.pending_direction = direction
        return True

    def advance(self) -> Position:
        """Move one cell in the pending direction; length is unchanged."""
        if not self.positions:
            raise RuntimeError("Cannot advance a snake with no segments.")
        self.direction = self.pending_direction
        new_head = self.head.step(self.direction)
        self.positions.appendleft(new_head)
        self.positions.pop()
        return new_head

    def grow(self) -> None:
        """
        Duplicate the tail so the next advance leaves the snake one longer.
        """
        self.positions.append(self.positions[-1])

    def has_self_collision(self) -> bool:
        head = self.head
        return any(pos == head for pos in list(self.positions)[1:])

    def occupies(self, pos) -> bool:
        return pos in self.positions

    def segments(self) -> List[Segment]:
        return [Segment(pos, i == 0) for i, pos in enumerate(self.positions)]

    def reset(self) -> None:
        self.direction = RIGHT
        self.pending_direction = RIGHT
        self._lay_out()

    def __repr__(self):
        return f"<Snake head={self.head}, length={len(self)}, direction={self.direction}>"
