"""
Snake game engine.

Manages:
  - Board (Grid), the Snake and the current Food
  - Score tracking and best-score persistence
  - Engine state: MENU -> PLAYING <-> PAUSED -> GAME_OVER
  - The fixed-cadence simulation tick
  - Notifications for renderers and other listeners
"""

import logging
import random
import time
from typing import Any, Callable, Optional

from config import GameConfig
from domain.constants import (
    BOARD_FULL, DEATH_SELF, DEATH_WALL,
    MENU, PLAYING, PAUSED, GAME_OVER,
    GAME_STARTED, GAME_PAUSED, GAME_RESUMED, GAME_OVER_EVENT, GAME_RESET,
    SNAKE_MOVED, SNAKE_GREW, DIRECTION_CHANGED,
    FOOD_EATEN, FOOD_SPAWNED, SCORE_UPDATED, SNAPSHOT,
)
from domain.food import BoardFullError, Food
from domain.game_state import GameSnapshot, ScoreSummary
from domain.grid import Grid
from domain.snake import Snake
from services.diagnostics import DiagnosticSink, LoggingDiagnosticSink
from services.event_bus import EventBus
from services.score_tracker import ScoreTracker
from services.ticker import ScheduleTicker, Ticker


logger = logging.getLogger(__name__)


class SnakeGame:
    """
    Single-player snake engine.

    Every command is synchronous and safe to call in any state: commands that
    make no sense in the current state are ignored. Simulation only advances
    through tick(), which the ticker calls every config.game_speed_ms while
    the game is PLAYING; a tick that fires in any other state does nothing.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        score_tracker: Optional[ScoreTracker] = None,
        events: Optional[EventBus] = None,
        ticker: Optional[Ticker] = None,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
        diagnostics: Optional[DiagnosticSink] = None,
    ):
        self.config = config or GameConfig()
        self.config.validate()

        self.diagnostics = diagnostics or LoggingDiagnosticSink()
        self.grid = Grid(self.config.grid_size)
        self.snake = Snake(self.grid.center(), self.config.initial_snake_length)
        self.score_tracker = score_tracker or ScoreTracker(
            diagnostics=self.diagnostics,
            initial_length=self.config.initial_snake_length,
        )
        self.events = events or EventBus(self.diagnostics)
        self.ticker = ticker or ScheduleTicker()
        self.clock = clock
        self.rng = rng or random.Random()

        self.state = MENU
        self.tick_number = 0
        self.death_reason: Optional[str] = None
        self.food: Optional[Food] = self._spawn_food()

        self._tick_handle: Any = None
        self._elapsed_before = 0.0
        self._playing_since: Optional[float] = None

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin a fresh game from MENU or GAME_OVER."""
        if self.state not in (MENU, GAME_OVER):
            return

        self._reinitialize()
        self.state = PLAYING
        self._playing_since = self.clock()
        self._schedule_ticks()

        logger.info(
            f"Game started on a {self.grid.size}x{self.grid.size} grid "
            f"({self.config.game_speed_ms}ms per tick)"
        )
        self.events.emit(GAME_STARTED, {"config": self.config})

    def pause(self) -> None:
        if self.state != PLAYING:
            return

        self._cancel_ticks()
        self._freeze_elapsed()
        self.state = PAUSED
        logger.info(f"Game paused at tick {self.tick_number}")
        self.events.emit(GAME_PAUSED, {"timestamp": self.clock()})

    def resume(self) -> None:
        if self.state != PAUSED:
            return

        self.state = PLAYING
        self._playing_since = self.clock()
        self._schedule_ticks()
        logger.info(f"Game resumed at tick {self.tick_number}")
        self.events.emit(GAME_RESUMED, {"timestamp": self.clock()})

    def toggle_pause(self) -> None:
        if self.state == PLAYING:
            self.pause()
        elif self.state == PAUSED:
            self.resume()

    def stop(self) -> None:
        """Halt the tick and drop back to MENU from any state (teardown)."""
        self._cancel_ticks()
        self._freeze_elapsed()
        self.state = MENU

    def reset(self) -> None:
        """Return to MENU with a fresh snake, food and score; best score is kept."""
        self._reinitialize()
        self.state = MENU
        self.events.emit(GAME_RESET, {"timestamp": self.clock()})

    def change_direction(self, direction: str) -> None:
        if self.state != PLAYING:
            return

        if self.snake.request_direction(direction):
            self.events.emit(DIRECTION_CHANGED, {"direction": direction})

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def tick(self) -> None:
        """
        Execute one simulation step:
          1) Advance the snake
          2) End the game on a wall or self collision
          3) Eat food if the head landed on it (grow, score, respawn)
          4) Update elapsed time and publish a fresh snapshot

        Listeners may issue commands while the tick emits; once the state
        leaves PLAYING the rest of the step is skipped.
        """
        if self.state != PLAYING:
            return

        head = self.snake.advance()
        self.tick_number += 1
        logger.debug(f"Tick {self.tick_number}: head at {head}")

        if not self.grid.is_in_bounds(head):
            self._game_over(DEATH_WALL)
            return
        if self.snake.has_self_collision():
            self._game_over(DEATH_SELF)
            return

        self.events.emit(SNAKE_MOVED, {"position": head})
        if self.state != PLAYING:
            return

        if self.food is not None and self.food.overlaps(head):
            self._consume_food()
            if self.state != PLAYING:
                return

        self.score_tracker.tick(self._elapsed_seconds())
        self.score_tracker.set_length(len(self.snake))
        self.events.emit(SCORE_UPDATED, {"score": self.score_tracker.summary()})
        if self.state != PLAYING:
            return

        self._publish_snapshot()

    def _consume_food(self) -> None:
        eaten = self.food
        self.snake.grow()
        self.score_tracker.award(eaten.points)
        self.score_tracker.record_consumption()
        self.score_tracker.set_length(len(self.snake))

        try:
            self.food = self._spawn_food()
        except BoardFullError:
            self.food = None
            logger.info("No free cells left; the board is full")

        for event, payload in (
            (FOOD_EATEN, {"food": eaten, "score": self.score_tracker.current_score}),
            (SNAKE_GREW, {"length": len(self.snake)}),
        ):
            self.events.emit(event, payload)
            if self.state != PLAYING:
                return

        if self.food is None:
            self._game_over(BOARD_FULL)
            return

        self.events.emit(FOOD_SPAWNED, {"food": self.food})

    def _spawn_food(self) -> Food:
        free = self.grid.free_cells(self.snake.positions)
        return Food.spawn(free, self.config.bonus_food_chance, self.rng)

    def _game_over(self, reason: str) -> None:
        self._cancel_ticks()
        self._freeze_elapsed()
        self.state = GAME_OVER
        self.death_reason = reason

        self.score_tracker.tick(self._elapsed_before)
        self.score_tracker.set_length(len(self.snake))
        self.score_tracker.commit_best_score()

        summary = self.score_tracker.summary()
        logger.info(
            f"Game Over ({reason}) after {self.tick_number} ticks. "
            f"Score: {summary.current_score}, best: {summary.best_score}"
        )
        self.events.emit(GAME_OVER_EVENT, {"score": summary, "reason": reason})
        if self.state == GAME_OVER:
            self._publish_snapshot()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_score(self) -> ScoreSummary:
        return self.score_tracker.summary()

    def get_snapshot(self) -> GameSnapshot:
        """
        Return a read-only view of the current board for rendering.
        """
        return GameSnapshot(
            segments=self.snake.segments(),
            food=self.food,
            score=self.score_tracker.summary(),
            state=self.state,
            grid_size=self.grid.size,
            tick_number=self.tick_number,
        )

    def on(self, event: str, callback: Callable[[Any], None]) -> None:
        self.events.on(event, callback)

    def off(self, event: str, callback: Callable[[Any], None]) -> None:
        self.events.off(event, callback)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _reinitialize(self) -> None:
        self._cancel_ticks()
        self.snake.reset()
        self.score_tracker.reset()
        self.score_tracker.set_length(len(self.snake))
        self.food = self._spawn_food()
        self.tick_number = 0
        self.death_reason = None
        self._elapsed_before = 0.0
        self._playing_since = None

    def _publish_snapshot(self) -> None:
        self.events.emit(SNAPSHOT, self.get_snapshot())

    def _schedule_ticks(self) -> None:
        self._cancel_ticks()
        self._tick_handle = self.ticker.schedule(self.config.game_speed_ms, self.tick)

    def _cancel_ticks(self) -> None:
        if self._tick_handle is not None:
            self.ticker.cancel(self._tick_handle)
            self._tick_handle = None

    def _elapsed_seconds(self) -> float:
        if self._playing_since is None:
            return self._elapsed_before
        return self._elapsed_before + (self.clock() - self._playing_since)

    def _freeze_elapsed(self) -> None:
        self._elapsed_before = self._elapsed_seconds()
        self._playing_since = None

    def __repr__(self):
        return (
            f"<SnakeGame state={self.state}, tick={self.tick_number}, "
            f"length={len(self.snake)}, score={self.score_tracker.current_score}>"
        )
