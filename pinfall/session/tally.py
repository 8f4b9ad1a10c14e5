"""
Session Tally - Running total of finished games.

The tally lives as long as its owner (a SessionManager, a CLI run).
It is never implicitly persisted and only cleared by reset().
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

logger = logging.getLogger(__name__)


@dataclass
class SessionTally:
    """Accumulates final scores across games."""
    game_scores: list[int] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(self.game_scores)

    @property
    def games_played(self) -> int:
        return len(self.game_scores)

    @property
    def average(self) -> float:
        if not self.game_scores:
            return 0.0
        return self.total / self.games_played

    @property
    def best(self) -> int | None:
        return max(self.game_scores) if self.game_scores else None

    def add_game(self, final_score: int) -> None:
        if final_score < 0:
            raise ValueError(f"Final score cannot be negative: {final_score}")
        self.game_scores.append(final_score)
        logger.info("Tallied game %d: %d (total %d)", self.games_played, final_score, self.total)

    def reset(self) -> None:
        self.game_scores.clear()
        logger.info("Session tally reset")
