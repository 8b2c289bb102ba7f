"""
Score tracking for a single player.

Keeps the current score and per-game counters in memory and persists the
best score through a KeyValueStorage. Storage failures never reach the
game: they are reported to the diagnostic sink and the in-memory best score
carries on for the session.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from domain.game_state import ScoreSummary
from services.diagnostics import DiagnosticSink, LoggingDiagnosticSink
from services.storage import KeyValueStorage, MemoryStorage


logger = logging.getLogger(__name__)

HIGH_SCORE_KEY = 'high-score'
STATS_KEY = 'game-stats'


class ScoreTracker:
    """
    Attributes:
        current_score: points earned this game
        best_score: highest score seen, loaded from storage at construction
        length: last reported snake length
        food_eaten: items consumed this game
        elapsed_seconds: time played this game, in seconds
    """

    def __init__(
        self,
        storage: Optional[KeyValueStorage] = None,
        diagnostics: Optional[DiagnosticSink] = None,
        initial_length: int = 3,
    ):
        self.storage = storage if storage is not None else MemoryStorage()
        self.diagnostics = diagnostics or LoggingDiagnosticSink()
        self.initial_length = initial_length

        self.current_score = 0
        self.best_score = 0
        self.length = initial_length
        self.food_eaten = 0
        self.elapsed_seconds = 0.0

        self._load_best_score()

    def _load_best_score(self) -> None:
        try:
            saved = self.storage.get(HIGH_SCORE_KEY)
        except Exception as e:
            self.diagnostics.report("Could not load best score", e)
            return

        if saved is None:
            return
        try:
            saved = int(saved)
        except (TypeError, ValueError) as e:
            self.diagnostics.report(f"Ignoring malformed best score {saved!r}", e)
            return
        if saved > self.best_score:
            self.best_score = saved

    def award(self, points: int) -> None:
        """Add *points* and raise the in-memory best score if it was beaten."""
        self.current_score += points
        if self.current_score > self.best_score:
            self.best_score = self.current_score

    def record_consumption(self) -> None:
        self.food_eaten += 1

    def set_length(self, length: int) -> None:
        self.length = length

    def tick(self, elapsed_seconds: float) -> None:
        self.elapsed_seconds = elapsed_seconds

    def commit_best_score(self) -> bool:
        """
        Persist the best score and bump the game statistics.

        Called once per finished game rather than on every award.

        Returns:
            True if storage accepted the write, False otherwise.
        """
        try:
            self.storage.set(HIGH_SCORE_KEY, self.best_score)
            stats = {
                "high_score": self.best_score,
                "last_played": datetime.now(timezone.utc).isoformat(),
                "total_games": self._total_games() + 1,
            }
            self.storage.set(STATS_KEY, stats)
        except Exception as e:
            self.diagnostics.report("Could not persist best score", e)
            return False

        logger.debug(f"Persisted best score {self.best_score}")
        return True

    def _total_games(self) -> int:
        stats = self.storage.get(STATS_KEY) or {}
        return int(stats.get("total_games", 0))

    def get_game_stats(self) -> Dict[str, Any]:
        try:
            stats = self.storage.get(STATS_KEY)
        except Exception as e:
            self.diagnostics.report("Could not load game stats", e)
            stats = None
        return stats or {"total_games": 0, "last_played": ""}

    def reset(self) -> None:
        """Clear this game's counters; the best score is kept."""
        self.current_score = 0
        self.length = self.initial_length
        self.food_eaten = 0
        self.elapsed_seconds = 0.0

    def summary(self) -> ScoreSummary:
        return ScoreSummary(
            current_score=self.current_score,
            best_score=self.best_score,
            length=self.length,
            food_eaten=self.food_eaten,
            elapsed_seconds=int(self.elapsed_seconds),
        )
