"""
API Module - Scoreboard and lane-controller interface.

Exposes the engine via REST API. A client:
1. Starts a game
2. Posts the pin count of every settled delivery
3. Applies the returned pin action to the rack
4. Renders the scoreboard (per-throw marks + cumulative scores)

All state is in-memory and game-scoped.
"""

from .schemas import (
    # Requests
    CreateGameRequest,
    ThrowRequest,
    # Responses
    ScoreboardResponse,
    GameListResponse,
    EndGameResponse,
    TallyResponse,
    HealthResponse,
    ErrorResponse,
    # Shared
    FrameInfo,
    PositionInfo,
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateGameRequest",
    "ThrowRequest",
    # Responses
    "ScoreboardResponse",
    "GameListResponse",
    "EndGameResponse",
    "TallyResponse",
    "HealthResponse",
    "ErrorResponse",
    # Shared
    "FrameInfo",
    "PositionInfo",
    "ErrorCode",
    # Service
    "APIService",
    "create_app",
]
