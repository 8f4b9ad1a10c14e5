"""
Session Manager - Creates and manages bowling games.

LIFECYCLE:
1. Caller creates a game → ephemeral Game (in-memory only)
2. During the game:
   - Pin-fall collaborator reports a count per delivery
   - Engine records it and decides the next pin action
   - Presentation reads the scoreboard
3. Game over → final score is added to the session tally once
4. Caller can:
   - Reset the game (new game in the same slot)
   - End the game (removed from memory)

PERSISTENCE RULES:
- No database; games live only as long as the manager
- The tally is owned by the manager and only cleared explicitly
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging
import time
import uuid

from ..engine_core import ScoreEngine, ScoreUpdate
from .director import CountingRack, DeliveryResult, LaneDirector
from .tally import SessionTally

logger = logging.getLogger(__name__)


class GameState(Enum):
    """State of a managed game."""
    ACTIVE = "active"  # Throws are being recorded
    GAME_OVER = "game_over"  # Tenth frame closed
    ENDED = "ended"  # Removed by the caller


@dataclass
class Game:
    """
    An ephemeral bowling game.

    Contains:
    - The score engine (single source of truth for throws)
    - The lane director and its rack
    - Game metadata
    """
    game_id: str
    player_name: str
    created_at: float
    engine: ScoreEngine
    director: LaneDirector

    state: GameState = GameState.ACTIVE
    tallied: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    def is_active(self) -> bool:
        return self.state == GameState.ACTIVE


class SessionManager:
    """
    Manages bowling games.

    Responsibilities:
    - Create games with their engine and lane director
    - Feed finished games into the session tally
    - Clean up finished games

    No persistence - games are in-memory only.
    """

    def __init__(self, tally: SessionTally | None = None, strict_pin_count: bool = False):
        self.tally = tally if tally is not None else SessionTally()
        self.strict_pin_count = strict_pin_count
        self._games: dict[str, Game] = {}

    def create_game(self, player_name: str = "Player") -> Game:
        """Create a new game with a fresh engine and rack."""
        game_id = str(uuid.uuid4())
        engine = ScoreEngine(strict_pin_count=self.strict_pin_count)
        game = Game(
            game_id=game_id,
            player_name=player_name,
            created_at=time.time(),
            engine=engine,
            director=LaneDirector(engine, CountingRack()),
        )
        engine.subscribe(lambda update: self._on_score_update(game, update))

        self._games[game_id] = game
        logger.info("Created game %s for %s", game_id, player_name)
        return game

    def get_game(self, game_id: str) -> Game | None:
        return self._games.get(game_id)

    def record_throw(self, game_id: str, pins_down: int) -> DeliveryResult:
        """
        Deliver one throw to a game.

        Raises KeyError for an unknown game; engine errors propagate.
        """
        game = self._require(game_id)
        return game.director.deliver(pins_down)

    def reset_game(self, game_id: str) -> Game:
        """Start over in the same game slot. A finished game stays tallied."""
        game = self._require(game_id)
        game.director.new_game()
        game.state = GameState.ACTIVE
        game.tallied = False
        logger.info("Reset game %s", game_id)
        return game

    def end_game(self, game_id: str) -> bool:
        """
        Remove a game from memory.

        Returns False if the game does not exist.
        """
        game = self._games.pop(game_id, None)
        if game is None:
            return False
        game.state = GameState.ENDED
        logger.info("Ended game %s", game_id)
        return True

    def list_active_games(self) -> list[str]:
        return [gid for gid, game in self._games.items() if game.is_active()]

    def list_games(self) -> list[str]:
        return list(self._games)

    def cleanup_stale_games(self, max_age_seconds: int = 3600) -> list[str]:
        """
        Remove finished games older than max_age.

        Returns the removed game IDs.
        """
        current_time = time.time()
        to_remove = [
            gid for gid, game in self._games.items()
            if current_time - game.created_at > max_age_seconds and not game.is_active()
        ]
        for game_id in to_remove:
            self.end_game(game_id)
        return to_remove

    def _require(self, game_id: str) -> Game:
        game = self._games.get(game_id)
        if game is None:
            raise KeyError(game_id)
        return game

    def _on_score_update(self, game: Game, update: ScoreUpdate) -> None:
        if not update.status.is_game_over:
            return
        game.state = GameState.GAME_OVER
        if not game.tallied:
            final_score = update.cumulative_scores[-1]
            self.tally.add_game(final_score or 0)
            game.tallied = True
