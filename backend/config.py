"""
Game configuration and difficulty presets.

Values come from code defaults, optionally overridden by a difficulty preset
and then by environment variables (a local .env file is loaded first).
"""

import os
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from dotenv import load_dotenv


# Difficulty levels
EASY = "EASY"
NORMAL = "NORMAL"
HARD = "HARD"
EXPERT = "EXPERT"

DEFAULT_GRID_SIZE = 20
DEFAULT_GAME_SPEED_MS = 150
DEFAULT_INITIAL_SNAKE_LENGTH = 3
DEFAULT_BONUS_FOOD_CHANCE = 0.1  # 10% of spawns are bonus food


@dataclass(frozen=True)
class GameConfig:
    grid_size: int = DEFAULT_GRID_SIZE
    game_speed_ms: int = DEFAULT_GAME_SPEED_MS
    initial_snake_length: int = DEFAULT_INITIAL_SNAKE_LENGTH
    bonus_food_chance: float = DEFAULT_BONUS_FOOD_CHANCE

    def validate(self) -> None:
        """
        Raise ValueError if the configuration cannot produce a playable game.
        """
        if self.grid_size <= 0:
            raise ValueError(f"grid_size must be positive, got {self.grid_size}.")
        if self.game_speed_ms <= 0:
            raise ValueError(f"game_speed_ms must be positive, got {self.game_speed_ms}.")
        if self.initial_snake_length <= 0:
            raise ValueError(
                f"initial_snake_length must be positive, got {self.initial_snake_length}."
            )
        # The body trails left of the centre cell and has to stay on the board
        if self.initial_snake_length > self.grid_size // 2 + 1:
            raise ValueError(
                f"A snake of length {self.initial_snake_length} does not fit on a "
                f"{self.grid_size}x{self.grid_size} grid."
            )
        if self.grid_size * self.grid_size <= self.initial_snake_length:
            raise ValueError("The board has no room left for food.")
        if not 0.0 <= self.bonus_food_chance <= 1.0:
            raise ValueError(
                f"bonus_food_chance must be within [0, 1], got {self.bonus_food_chance}."
            )


DIFFICULTY_CONFIGS: Dict[str, Dict[str, Any]] = {
    EASY: {
        "grid_size": 15,
        "game_speed_ms": 200,
        "bonus_food_chance": 0.15,
    },
    NORMAL: {
        "grid_size": 20,
        "game_speed_ms": 150,
        "bonus_food_chance": 0.1,
    },
    HARD: {
        "grid_size": 25,
        "game_speed_ms": 100,
        "bonus_food_chance": 0.05,
    },
    EXPERT: {
        "grid_size": 30,
        "game_speed_ms": 80,
        "bonus_food_chance": 0.02,
    },
}

AVAILABLE_DIFFICULTIES = list(DIFFICULTY_CONFIGS.keys())


def get_config_for_difficulty(difficulty: Optional[str] = None) -> GameConfig:
    """
    Get the game configuration for a difficulty level.

    Args:
        difficulty: One of EASY, NORMAL, HARD, EXPERT (case-insensitive).
                    If None or empty, returns NORMAL.

    Raises:
        ValueError: If difficulty is not recognized.
    """
    if not difficulty or difficulty.strip() == "":
        difficulty = NORMAL

    difficulty = difficulty.strip().upper()

    if difficulty not in DIFFICULTY_CONFIGS:
        available = ", ".join(AVAILABLE_DIFFICULTIES)
        raise ValueError(
            f"Unknown difficulty '{difficulty}'. Available difficulties: {available}"
        )

    return GameConfig(**DIFFICULTY_CONFIGS[difficulty])


def _env_number(name: str, cast):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}.")


def load_config_from_env() -> GameConfig:
    """
    Build a GameConfig from SNAKE_* environment variables.

    SNAKE_DIFFICULTY picks the preset; SNAKE_GRID_SIZE, SNAKE_GAME_SPEED_MS,
    SNAKE_INITIAL_LENGTH and SNAKE_BONUS_FOOD_CHANCE override single fields.
    """
    load_dotenv()

    config = get_config_for_difficulty(os.getenv('SNAKE_DIFFICULTY'))

    overrides = {
        "grid_size": _env_number('SNAKE_GRID_SIZE', int),
        "game_speed_ms": _env_number('SNAKE_GAME_SPEED_MS', int),
        "initial_snake_length": _env_number('SNAKE_INITIAL_LENGTH', int),
        "bonus_food_chance": _env_number('SNAKE_BONUS_FOOD_CHANCE', float),
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        config = replace(config, **overrides)

    config.validate()
    return config
