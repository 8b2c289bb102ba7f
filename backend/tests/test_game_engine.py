"""
Tests for SnakeGame - the engine state machine and tick loop.

Ticks are driven by hand through the manual_ticker fixture and time through
fake_clock, so every test is deterministic.
"""

import random
import sys
import os
from unittest.mock import MagicMock

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import GameConfig
from domain.constants import (
    UP, DOWN, LEFT, RIGHT,
    MENU, PLAYING, PAUSED, GAME_OVER,
    BONUS, BOARD_FULL, DEATH_SELF, DEATH_WALL,
    GAME_STARTED, GAME_PAUSED, GAME_RESUMED, GAME_OVER_EVENT, GAME_RESET,
    SNAKE_MOVED, SNAKE_GREW, DIRECTION_CHANGED,
    FOOD_EATEN, FOOD_SPAWNED, SCORE_UPDATED, SNAPSHOT,
)
from domain.food import Food
from domain.position import Position
from game_engine import SnakeGame
from services.diagnostics import CollectingDiagnosticSink
from services.score_tracker import ScoreTracker
from services.storage import MemoryStorage


OUT_OF_THE_WAY = Position(0, 0)


def make_game(manual_ticker, fake_clock, storage=None, sink=None, **config_overrides):
    settings = {
        "grid_size": 10,
        "game_speed_ms": 100,
        "initial_snake_length": 3,
        "bonus_food_chance": 0.0,
    }
    settings.update(config_overrides)
    config = GameConfig(**settings)
    sink = sink or CollectingDiagnosticSink()
    tracker = ScoreTracker(
        storage=storage if storage is not None else MemoryStorage(),
        diagnostics=sink,
        initial_length=config.initial_snake_length,
    )
    return SnakeGame(
        config=config,
        score_tracker=tracker,
        ticker=manual_ticker,
        clock=fake_clock,
        rng=random.Random(42),
        diagnostics=sink,
    )


@pytest.fixture
def game(manual_ticker, fake_clock):
    return make_game(manual_ticker, fake_clock)


def record(game, event):
    received = []
    game.on(event, received.append)
    return received


class TestLifecycle:
    """State transitions and their guards."""

    def test_starts_in_menu_with_food_off_the_snake(self, game, manual_ticker):
        """A new engine waits in MENU with food placed off the snake."""
        assert game.state == MENU
        assert game.food is not None
        assert not game.snake.occupies(game.food.position)
        assert manual_ticker.jobs == {}

    def test_start_begins_ticking(self, game, manual_ticker):
        """start() enters PLAYING and schedules the tick at the configured speed."""
        started = record(game, GAME_STARTED)
        game.start()

        assert game.state == PLAYING
        assert len(manual_ticker.jobs) == 1
        assert manual_ticker.intervals == [100]
        assert started == [{"config": game.config}]

    def test_start_is_ignored_while_playing(self, game, manual_ticker):
        """A second start() during play changes nothing."""
        started = record(game, GAME_STARTED)
        game.start()
        game.tick()
        game.start()

        assert game.tick_number == 1
        assert len(started) == 1
        assert len(manual_ticker.jobs) == 1

    def test_pause_and_resume(self, game, manual_ticker):
        """Pausing cancels the tick and resuming schedules it again."""
        game.start()
        game.pause()
        assert game.state == PAUSED
        assert manual_ticker.jobs == {}

        game.resume()
        assert game.state == PLAYING
        assert len(manual_ticker.jobs) == 1

    def test_pause_twice_is_idempotent(self, game):
        """Pausing an already paused game emits no second event."""
        paused = record(game, GAME_PAUSED)
        game.start()
        game.pause()
        game.pause()
        assert game.state == PAUSED
        assert len(paused) == 1

    def test_toggle_pause(self, game):
        """toggle_pause() flips between PLAYING and PAUSED."""
        resumed = record(game, GAME_RESUMED)
        game.start()
        game.toggle_pause()
        assert game.state == PAUSED
        game.toggle_pause()
        assert game.state == PLAYING
        assert len(resumed) == 1

    @pytest.mark.parametrize("command", ["pause", "resume", "toggle_pause"])
    def test_commands_in_menu_are_ignored(self, game, command):
        """Pause-related commands do nothing from MENU."""
        paused = record(game, GAME_PAUSED)
        resumed = record(game, GAME_RESUMED)
        getattr(game, command)()
        assert game.state == MENU
        assert paused == [] and resumed == []

    def test_stop_returns_to_menu(self, game, manual_ticker):
        """stop() cancels the tick and returns to MENU."""
        game.start()
        game.stop()
        assert game.state == MENU
        assert manual_ticker.jobs == {}

    def test_stop_from_paused(self, game, manual_ticker):
        """stop() also works from PAUSED."""
        game.start()
        game.pause()
        game.stop()
        assert game.state == MENU
        assert manual_ticker.jobs == {}

    def test_reset_reinitializes_but_keeps_best(self, game, manual_ticker):
        """reset() clears the round but keeps the best score."""
        resets = record(game, GAME_RESET)
        game.start()
        game.food = Food(Position(6, 5))
        manual_ticker.fire()
        assert game.get_score().current_score == 10

        game.reset()

        score = game.get_score()
        assert game.state == MENU
        assert score.current_score == 0
        assert score.best_score == 10
        assert score.length == 3
        assert list(game.snake.positions) == [(5, 5), (4, 5), (3, 5)]
        assert game.tick_number == 0
        assert manual_ticker.jobs == {}
        assert len(resets) == 1

    def test_start_after_game_over_is_a_fresh_game(self, game, manual_ticker):
        """Starting after a game over begins from a clean board."""
        game.start()
        game.food = Food(OUT_OF_THE_WAY)
        manual_ticker.fire(5)
        assert game.state == GAME_OVER

        game.start()
        assert game.state == PLAYING
        assert game.tick_number == 0
        assert game.death_reason is None
        assert game.snake.head == (5, 5)
        assert len(manual_ticker.jobs) == 1


class TestDirection:
    """change_direction() forwarding."""

    def test_ignored_outside_playing(self, game):
        """Direction requests are dropped while in MENU."""
        game.change_direction(UP)
        assert game.snake.pending_direction == RIGHT

    def test_forwarded_while_playing(self, game):
        """Only accepted direction requests emit a change event."""
        changes = record(game, DIRECTION_CHANGED)
        game.start()
        game.change_direction(UP)
        game.change_direction(LEFT)
        assert game.snake.pending_direction == UP
        assert changes == [{"direction": UP}]

    def test_ignored_while_paused(self, game):
        """Direction requests are dropped while paused."""
        game.start()
        game.pause()
        game.change_direction(DOWN)
        assert game.snake.pending_direction == RIGHT


class TestTick:
    """One simulation step."""

    def test_tick_outside_playing_does_nothing(self, game):
        """A tick in MENU leaves the snake where it is."""
        game.tick()
        assert game.snake.head == (5, 5)
        assert game.tick_number == 0

    def test_stale_scheduled_tick_after_pause_is_noop(self, game, manual_ticker):
        """A tick callback that fires after pause() does nothing."""
        game.start()
        scheduled = list(manual_ticker.jobs.values())[0]
        game.pause()

        scheduled()

        assert game.snake.head == (5, 5)
        assert game.tick_number == 0

    def test_scenario_turn_up(self, game, manual_ticker):
        """Turning UP moves the head one row toward the top."""
        game.start()
        game.food = Food(OUT_OF_THE_WAY)
        game.change_direction(UP)

        manual_ticker.fire()

        assert game.snake.head == (5, 4)
        assert len(game.snake) == 3
        assert game.state == PLAYING

    def test_scenario_eat_food(self, game, manual_ticker):
        """Eating ordinary food scores 10, grows the snake and respawns food."""
        eaten = record(game, FOOD_EATEN)
        grew = record(game, SNAKE_GREW)
        spawned = record(game, FOOD_SPAWNED)
        game.start()
        game.food = Food(Position(6, 5))

        manual_ticker.fire()

        score = game.get_score()
        assert score.current_score == 10
        assert score.food_eaten == 1
        assert len(eaten) == 1 and eaten[0]["score"] == 10
        assert grew == [{"length": 4}]
        assert len(spawned) == 1
        assert game.food.position != (6, 5)
        assert not game.snake.occupies(game.food.position)

        game.food = Food(OUT_OF_THE_WAY)
        manual_ticker.fire()

        assert len(game.snake) == 4
        assert list(game.snake.positions) == [(7, 5), (6, 5), (5, 5), (4, 5)]
        assert game.get_score().length == 4

    def test_bonus_food_scores_more(self, game, manual_ticker):
        """Bonus food is worth 25 points."""
        game.start()
        game.food = Food(Position(6, 5), BONUS)
        manual_ticker.fire()
        assert game.get_score().current_score == 25

    def test_scenario_wall_collision(self, game, manual_ticker):
        """Leaving the board ends the game and commits the best score once."""
        over = record(game, GAME_OVER_EVENT)
        game.start()
        game.food = Food(OUT_OF_THE_WAY)
        game.score_tracker.commit_best_score = MagicMock(
            wraps=game.score_tracker.commit_best_score
        )

        manual_ticker.fire(4)
        assert game.state == PLAYING
        assert game.snake.head == (9, 5)

        manual_ticker.fire()
        assert game.state == GAME_OVER
        assert game.death_reason == DEATH_WALL
        assert manual_ticker.jobs == {}

        game.tick()
        game.tick()
        game.score_tracker.commit_best_score.assert_called_once()
        assert len(over) == 1
        assert over[0]["reason"] == DEATH_WALL
        assert over[0]["score"] == game.get_score()

    def test_self_collision(self, manual_ticker, fake_clock):
        """Turning back into the body ends the game."""
        game = make_game(manual_ticker, fake_clock, initial_snake_length=5)
        game.start()
        game.food = Food(OUT_OF_THE_WAY)

        for move in [UP, LEFT, DOWN]:
            game.change_direction(move)
            manual_ticker.fire()

        assert game.state == GAME_OVER
        assert game.death_reason == DEATH_SELF

    def test_board_full_ends_the_game(self, manual_ticker, fake_clock):
        """Filling every cell ends the game with no food left."""
        game = make_game(manual_ticker, fake_clock, grid_size=2, initial_snake_length=2)
        over = record(game, GAME_OVER_EVENT)
        game.start()
        assert list(game.snake.positions) == [(1, 1), (0, 1)]
        game.food = Food(Position(1, 0))

        game.change_direction(UP)
        manual_ticker.fire()
        assert game.state == PLAYING
        assert list(game.snake.positions) == [(1, 0), (1, 1), (1, 1)]
        game.food = Food(Position(0, 0))

        game.change_direction(LEFT)
        manual_ticker.fire()
        assert game.state == PLAYING
        assert game.food.position == (0, 1)

        game.change_direction(DOWN)
        manual_ticker.fire()

        assert game.state == GAME_OVER
        assert game.death_reason == BOARD_FULL
        assert game.food is None
        assert over[0]["reason"] == BOARD_FULL
        assert over[0]["score"].current_score == 30
        assert over[0]["score"].length == 5

    def test_events_published_per_tick(self, game, manual_ticker):
        """Each advance emits a move and a score update."""
        moved = record(game, SNAKE_MOVED)
        scores = record(game, SCORE_UPDATED)
        game.start()
        game.food = Food(OUT_OF_THE_WAY)

        manual_ticker.fire(2)

        assert moved == [{"position": (6, 5)}, {"position": (7, 5)}]
        assert len(scores) == 2


class TestSnapshots:
    """Render-ready snapshots."""

    def test_one_snapshot_per_successful_advance(self, game, manual_ticker):
        """Each successful advance publishes exactly one snapshot."""
        snapshots = record(game, SNAPSHOT)
        game.start()
        game.food = Food(OUT_OF_THE_WAY)

        manual_ticker.fire(3)

        assert [s.tick_number for s in snapshots] == [1, 2, 3]
        assert snapshots[-1].segments[0].position == (8, 5)
        assert snapshots[-1].segments[0].is_head is True
        assert snapshots[-1].state == PLAYING

    def test_one_snapshot_on_game_over(self, game, manual_ticker):
        """The ending tick publishes one GAME_OVER snapshot and later ticks none."""
        snapshots = record(game, SNAPSHOT)
        game.start()
        game.food = Food(OUT_OF_THE_WAY)

        manual_ticker.fire(5)
        manual_ticker.fire(3)

        assert len(snapshots) == 5
        assert snapshots[-1].state == GAME_OVER

    def test_get_snapshot_reflects_state(self, game):
        """get_snapshot() mirrors the current board and score."""
        snapshot = game.get_snapshot()
        assert snapshot.state == MENU
        assert snapshot.grid_size == 10
        assert [s.position for s in snapshot.segments] == [(5, 5), (4, 5), (3, 5)]
        assert snapshot.food == game.food
        assert snapshot.score.current_score == 0


class TestCommandsFromListeners:
    """Commands issued by listeners in the middle of a tick."""

    def test_stop_during_move_skips_the_rest_of_the_tick(self, game, manual_ticker):
        """Stopping from a move listener keeps the food uneaten and publishes nothing."""
        snapshots = record(game, SNAPSHOT)
        scores = record(game, SCORE_UPDATED)
        game.on(SNAKE_MOVED, lambda _payload: game.stop())
        game.start()
        game.food = Food(Position(6, 5))

        manual_ticker.fire()

        assert game.state == MENU
        assert game.get_score().current_score == 0
        assert game.get_score().food_eaten == 0
        assert game.food == Food(Position(6, 5))
        assert snapshots == []
        assert scores == []

    def test_pause_while_eating_keeps_the_meal(self, game, manual_ticker):
        """Pausing from a food listener keeps the points and a fresh food, then play resumes."""
        snapshots = record(game, SNAPSHOT)
        spawned = record(game, FOOD_SPAWNED)
        game.on(FOOD_EATEN, lambda _payload: game.pause())
        game.start()
        game.food = Food(Position(6, 5))

        manual_ticker.fire()

        assert game.state == PAUSED
        assert game.get_score().current_score == 10
        assert len(game.snake) == 4
        assert game.food.position != (6, 5)
        assert not game.snake.occupies(game.food.position)
        assert spawned == []
        assert snapshots == []

        game.resume()
        game.food = Food(OUT_OF_THE_WAY)
        manual_ticker.fire()

        assert game.snake.head == (7, 5)
        assert [s.state for s in snapshots] == [PLAYING]

    def test_restart_from_game_over_listener(self, game, manual_ticker):
        """Restarting inside the game-over event suppresses the stale GAME_OVER snapshot."""
        snapshots = record(game, SNAPSHOT)
        game.on(GAME_OVER_EVENT, lambda _payload: game.start())
        game.start()
        game.food = Food(OUT_OF_THE_WAY)

        manual_ticker.fire(5)

        assert game.state == PLAYING
        assert game.tick_number == 0
        assert len(snapshots) == 4
        assert all(s.state == PLAYING for s in snapshots)
        assert len(manual_ticker.jobs) == 1


class TestElapsedTime:
    """Elapsed play time excludes pauses."""

    def test_elapsed_excludes_paused_time(self, game, manual_ticker, fake_clock):
        """Time spent paused is not counted as play time."""
        game.start()
        game.food = Food(OUT_OF_THE_WAY)

        fake_clock.advance(2.5)
        manual_ticker.fire()
        assert game.get_score().elapsed_seconds == 2

        game.pause()
        fake_clock.advance(100)
        game.resume()
        fake_clock.advance(1)
        manual_ticker.fire()

        assert game.get_score().elapsed_seconds == 3


class TestRobustness:
    """Failures outside the rules never break the game."""

    def test_throwing_listener_does_not_stop_tick(self, manual_ticker, fake_clock):
        """A failing listener is reported and the others still run."""
        sink = CollectingDiagnosticSink()
        game = make_game(manual_ticker, fake_clock, sink=sink)
        later = []

        def broken(_payload):
            raise RuntimeError("renderer crashed")

        game.on(SNAKE_MOVED, broken)
        game.on(SNAKE_MOVED, later.append)
        game.start()
        game.food = Food(OUT_OF_THE_WAY)
        manual_ticker.fire()

        assert game.snake.head == (6, 5)
        assert later == [{"position": (6, 5)}]
        assert len(sink.reports) == 1

    def test_storage_failure_on_game_over(self, manual_ticker, fake_clock):
        """A storage failure is reported and the in-memory best score survives."""
        storage = MagicMock()
        storage.get.return_value = None
        storage.set.side_effect = OSError("storage unavailable")
        sink = CollectingDiagnosticSink()
        game = make_game(manual_ticker, fake_clock, storage=storage, sink=sink)

        game.start()
        game.food = Food(Position(6, 5))
        manual_ticker.fire()
        game.food = Food(OUT_OF_THE_WAY)
        manual_ticker.fire(4)

        assert game.state == GAME_OVER
        assert game.get_score().best_score == 10
        assert len(sink.reports) == 1

    def test_best_score_persists_across_engines(self, manual_ticker, fake_clock):
        """A later engine on the same storage sees the earlier best score."""
        storage = MemoryStorage()
        first = make_game(manual_ticker, fake_clock, storage=storage)
        first.start()
        first.food = Food(Position(6, 5))
        manual_ticker.fire()
        first.food = Food(OUT_OF_THE_WAY)
        manual_ticker.fire(4)
        assert first.state == GAME_OVER

        second = make_game(manual_ticker, fake_clock, storage=storage)
        assert second.get_score().best_score == 10
        assert second.get_score().current_score == 0

    def test_invalid_config_is_rejected(self, manual_ticker, fake_clock):
        """An impossible configuration fails at construction."""
        with pytest.raises(ValueError):
            make_game(manual_ticker, fake_clock, grid_size=4, initial_snake_length=4)

    def test_unknown_direction_while_playing_raises(self, game):
        """An unknown direction is a programming error while playing."""
        game.start()
        with pytest.raises(ValueError):
            game.change_direction("DIAGONAL")
