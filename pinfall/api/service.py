"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Manages games through the session manager
3. Formats scoreboards for clients

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
Engine errors (OutOfRangeThrow, InvalidState) propagate to the caller.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    CreateGameRequest,
    ThrowRequest,
    ErrorResponse,
    ScoreboardResponse,
    TallyResponse,
    FrameInfo,
    PositionInfo,
    ErrorCode,
    GameStatusValue,
    PinActionValue,
)
from ..engine_core import split_frames
from ..session import SessionManager, Game, DeliveryResult

logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service for scoreboard clients.

    Usage:
        service = APIService()

        game = service.create_game(CreateGameRequest(player_name="Ann"))
        board = service.record_throw(game.game_id, ThrowRequest(pins_down=7))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    def create_game(self, request: CreateGameRequest) -> ScoreboardResponse:
        game = self.session_manager.create_game(player_name=request.player_name)
        return self._scoreboard(game)

    def get_scoreboard(self, game_id: str) -> ScoreboardResponse | ErrorResponse:
        game = self.session_manager.get_game(game_id)
        if game is None:
            return self._not_found(game_id)
        return self._scoreboard(game)

    def record_throw(self, game_id: str, request: ThrowRequest) -> ScoreboardResponse | ErrorResponse:
        """
        Record one delivery.

        Raises OutOfRangeThrow / InvalidState from the engine.
        """
        game = self.session_manager.get_game(game_id)
        if game is None:
            return self._not_found(game_id)

        result = self.session_manager.record_throw(game_id, request.pins_down)
        return self._scoreboard(game, result)

    def reset_game(self, game_id: str) -> ScoreboardResponse | ErrorResponse:
        if self.session_manager.get_game(game_id) is None:
            return self._not_found(game_id)
        game = self.session_manager.reset_game(game_id)
        return self._scoreboard(game)

    def end_game(self, game_id: str) -> bool:
        return self.session_manager.end_game(game_id)

    def list_games(self) -> list[str]:
        return self.session_manager.list_games()

    def cleanup(self, max_age_seconds: int) -> list[str]:
        return self.session_manager.cleanup_stale_games(max_age_seconds)

    def get_tally(self) -> TallyResponse:
        tally = self.session_manager.tally
        return TallyResponse(
            total=tally.total,
            games_played=tally.games_played,
            average=tally.average,
            best=tally.best,
            game_scores=list(tally.game_scores),
        )

    def reset_tally(self) -> TallyResponse:
        self.session_manager.tally.reset()
        return self.get_tally()

    # =========================================================================
    # Formatting
    # =========================================================================

    def _scoreboard(self, game: Game, result: DeliveryResult | None = None) -> ScoreboardResponse:
        engine = game.engine
        status = engine.check_status()
        position = engine.locate()
        scores = engine.cumulative_scores()
        marks = engine.frame_marks()

        frames = [
            FrameInfo(
                frame_number=index + 1,
                throws=list(throws),
                marks=marks[index],
                cumulative_score=scores[index],
            )
            for index, throws in enumerate(split_frames(engine.history))
        ]

        if result is not None:
            instruction = result.instruction
        elif status.is_game_over:
            instruction = "Game over"
        else:
            instruction = "Ready"

        return ScoreboardResponse(
            game_id=game.game_id,
            player_name=game.player_name,
            status=GameStatusValue.GAME_OVER if status.is_game_over else GameStatusValue.ACTIVE,
            is_game_over=status.is_game_over,
            next_pin_action=PinActionValue(status.next_pin_action.value),
            instruction=instruction,
            position=PositionInfo(
                frame_index=position.frame_index,
                throws_in_current_frame=position.throws_in_current_frame,
                all_throws_accounted_for=position.all_throws_accounted_for,
            ),
            throws=list(engine.history),
            frames=frames,
            cumulative_scores=list(scores),
            total_score=engine.total_score(),
        )

    def _not_found(self, game_id: str) -> ErrorResponse:
        logger.debug("Game %s not found", game_id)
        return ErrorResponse(
            error=f"Game {game_id} not found",
            error_code=ErrorCode.GAME_NOT_FOUND,
        )
