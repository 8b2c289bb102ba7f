import argparse
import json
import logging
import random
import sqlite3
from collections import deque
from dataclasses import replace
from typing import Callable, Iterable, Optional

from config import (
    AVAILABLE_DIFFICULTIES,
    GameConfig,
    get_config_for_difficulty,
    load_config_from_env,
)
from domain.constants import PLAYING, SNAPSHOT, VALID_MOVES
from domain.game_state import GameSnapshot, ScoreSummary
from game_engine import SnakeGame
from services.diagnostics import DiagnosticSink, LoggingDiagnosticSink
from services.score_tracker import ScoreTracker
from services.storage import KeyValueStorage, MemoryStorage, SqliteStorage
from services.ticker import ScheduleTicker


logger = logging.getLogger(__name__)


# -------------------------------
# Session Function
# -------------------------------

def run_session(
    game: SnakeGame,
    moves: Optional[Iterable[str]] = None,
    max_ticks: Optional[int] = None,
    on_snapshot: Optional[Callable[[GameSnapshot], None]] = None,
) -> ScoreSummary:
    """
    Play one game to completion on the game's own ticker.

    Args:
        game: A SnakeGame in MENU or GAME_OVER state.
        moves: Directions to request, one per tick. The first is requested
               before the first advance; once exhausted the snake keeps going.
        max_ticks: Stop the game after this many ticks (None = play until game over).
        on_snapshot: Called with every published snapshot (e.g. to draw it).

    Returns:
        The final ScoreSummary.
    """
    pending = deque(moves or [])

    def _next_move() -> None:
        if pending:
            game.change_direction(pending.popleft())

    def _handle_snapshot(snapshot: GameSnapshot) -> None:
        if on_snapshot:
            on_snapshot(snapshot)
        if snapshot.state != PLAYING:
            return
        if max_ticks is not None and snapshot.tick_number >= max_ticks:
            logger.info(f"Reached max ticks ({max_ticks}); stopping.")
            game.stop()
            return
        _next_move()

    game.on(SNAPSHOT, _handle_snapshot)
    try:
        game.start()
        _next_move()
        game.ticker.run_until(lambda: game.state != PLAYING)
    finally:
        game.off(SNAPSHOT, _handle_snapshot)

    return game.get_score()


def build_config(args: argparse.Namespace) -> GameConfig:
    if args.difficulty:
        config = get_config_for_difficulty(args.difficulty)
    else:
        config = load_config_from_env()

    overrides = {}
    if args.grid_size is not None:
        overrides["grid_size"] = args.grid_size
    if args.speed is not None:
        overrides["game_speed_ms"] = args.speed
    if overrides:
        config = replace(config, **overrides)

    config.validate()
    return config


def open_storage(db_path: Optional[str], diagnostics: DiagnosticSink) -> KeyValueStorage:
    """
    Open the SQLite best-score store, or fall back to memory if it cannot be opened.
    """
    try:
        return SqliteStorage(db_path)
    except (sqlite3.Error, OSError) as e:
        diagnostics.report("Opening best-score storage", e)
        logger.warning("Best score will not be saved for this session")
        return MemoryStorage()


def _parse_moves(raw_moves) -> list:
    moves = []
    for chunk in raw_moves or []:
        for move in chunk.replace(",", " ").split():
            move = move.upper()
            if move not in VALID_MOVES:
                raise ValueError(f"Invalid move '{move}'. Use UP, DOWN, LEFT or RIGHT.")
            moves.append(move)
    return moves


# -------------------------------
# Example Usage (Main Entry Point)
# -------------------------------
def main():
    parser = argparse.ArgumentParser(
        description="Play a scripted, headless snake game and print the board every tick."
    )
    parser.add_argument("--difficulty", type=str.upper, choices=AVAILABLE_DIFFICULTIES,
                        help="Difficulty preset (defaults to SNAKE_* env vars)")
    parser.add_argument("--grid-size", type=int, required=False, default=None,
                        help="Board width and height in cells")
    parser.add_argument("--speed", type=int, required=False, default=None,
                        help="Milliseconds between ticks")
    parser.add_argument("--moves", type=str, nargs='*', default=[],
                        help="Directions to apply, one per tick (e.g. 'UP UP LEFT' or 'UP,UP,LEFT')")
    parser.add_argument("--max-ticks", type=int, required=False, default=200,
                        help="Stop after this many ticks")
    parser.add_argument("--seed", type=int, required=False, default=None,
                        help="Seed for food placement")
    parser.add_argument("--db-path", type=str, required=False, default=None,
                        help="SQLite file for the best score (defaults to SNAKE_DB_PATH or backend/snake.db)")
    parser.add_argument("--log-level", type=str, required=False, default="INFO",
                        help="Logging level")

    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    config = build_config(args)
    moves = _parse_moves(args.moves)

    diagnostics = LoggingDiagnosticSink()
    game = SnakeGame(
        config=config,
        score_tracker=ScoreTracker(
            storage=open_storage(args.db_path, diagnostics),
            diagnostics=diagnostics,
            initial_length=config.initial_snake_length,
        ),
        ticker=ScheduleTicker(),
        rng=random.Random(args.seed),
        diagnostics=diagnostics,
    )

    def _draw(snapshot: GameSnapshot) -> None:
        print(f"\nTick {snapshot.tick_number} [{snapshot.state}]")
        print(snapshot.print_board())

    result = run_session(game, moves=moves, max_ticks=args.max_ticks, on_snapshot=_draw)

    print("\nSession Summary:")
    print(json.dumps({"reason": game.death_reason, **result.to_dict()}, indent=2))


if __name__ == "__main__":
    main()
