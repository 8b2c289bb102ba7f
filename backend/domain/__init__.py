"""
Domain entities for the snake game engine.

This module contains the core game entities that are independent of
infrastructure concerns (storage, scheduling, logging sinks).
"""

from .constants import (
    UP, DOWN, LEFT, RIGHT, VALID_MOVES,
    MENU, PLAYING, PAUSED, GAME_OVER,
    ORDINARY, BONUS, FOOD_POINTS,
)
from .position import Position
from .grid import Grid
from .game_state import Segment, ScoreSummary, GameSnapshot
from .snake import Snake
from .food import Food, BoardFullError

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'VALID_MOVES',
    'MENU', 'PLAYING', 'PAUSED', 'GAME_OVER',
    'ORDINARY', 'BONUS', 'FOOD_POINTS',
    'Position',
    'Grid',
    'Segment', 'ScoreSummary', 'GameSnapshot',
    'Snake',
    'Food', 'BoardFullError',
]
