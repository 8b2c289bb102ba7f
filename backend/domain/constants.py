"""
Game constants for the snake engine.
"""

# Movement directions
UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"
VALID_MOVES = {UP, DOWN, LEFT, RIGHT}

# Column / row deltas; row 0 is the top of the board.
DIRECTION_DELTAS = {
    UP:    (0, -1),
    DOWN:  (0,  1),
    LEFT:  (-1, 0),
    RIGHT: (1,  0),
}

OPPOSITE_DIRECTIONS = {
    UP: DOWN,
    DOWN: UP,
    LEFT: RIGHT,
    RIGHT: LEFT,
}

# Engine states
MENU = "MENU"
PLAYING = "PLAYING"
PAUSED = "PAUSED"
GAME_OVER = "GAME_OVER"

# Food types and their point values
ORDINARY = "ORDINARY"
BONUS = "BONUS"
FOOD_POINTS = {
    ORDINARY: 10,
    BONUS: 25,
}

# Game-over reasons
DEATH_WALL = "wall"
DEATH_SELF = "self"
BOARD_FULL = "board_full"

# Notification names published by the engine
GAME_STARTED = "game:start"
GAME_PAUSED = "game:pause"
GAME_RESUMED = "game:resume"
GAME_OVER_EVENT = "game:over"
GAME_RESET = "game:reset"
SNAKE_MOVED = "snake:move"
SNAKE_GREW = "snake:grow"
DIRECTION_CHANGED = "snake:direction-change"
FOOD_EATEN = "food:eaten"
FOOD_SPAWNED = "food:spawn"
SCORE_UPDATED = "score:update"
SNAPSHOT = "snapshot"
