"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between scoreboard clients and
the engine.

Error Codes:
- GAME_NOT_FOUND: Game does not exist or has been ended
- OUT_OF_RANGE_THROW: Pin count outside 0-10 (or above standing pins in strict mode)
- INVALID_STATE: Throw submitted after the game is over
- VALIDATION_ERROR: Malformed request
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class GameStatusValue(str, Enum):
    """Game status values."""
    ACTIVE = "active"
    GAME_OVER = "game_over"


class PinActionValue(str, Enum):
    """Pin rack instruction for the next delivery."""
    NONE = "none"
    RESET_ALL = "reset_all"
    REMOVE_FALLEN = "remove_fallen"


class ErrorCode(str, Enum):
    """Structured error codes."""
    GAME_NOT_FOUND = "GAME_NOT_FOUND"
    OUT_OF_RANGE_THROW = "OUT_OF_RANGE_THROW"
    INVALID_STATE = "INVALID_STATE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class FrameInfo(BaseModel):
    """One scoreboard frame."""
    frame_number: int = Field(ge=1, le=10)
    throws: list[int] = Field(default_factory=list)
    marks: list[str] = Field(default_factory=list, description="X strike, / spare, - gutter")
    cumulative_score: Optional[int] = Field(None, description="None until determinable")


class PositionInfo(BaseModel):
    """Current frame and throw."""
    frame_index: int = Field(ge=1, le=10)
    throws_in_current_frame: int = 0
    all_throws_accounted_for: bool = False


# =============================================================================
# Request Models
# =============================================================================

class CreateGameRequest(BaseModel):
    """Request to start a new game."""
    player_name: str = Field("Player", description="Display name for the bowler")


class ThrowRequest(BaseModel):
    """A settled delivery reported by the pin-fall collaborator."""
    pins_down: int = Field(..., strict=True, description="Pins knocked down by this delivery (0-10)")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class ScoreboardResponse(BaseModel):
    """Full scoreboard for a game."""
    game_id: str
    player_name: str
    status: GameStatusValue
    is_game_over: bool
    next_pin_action: PinActionValue
    instruction: str = Field(description="Pin instruction for the lane operator")
    position: PositionInfo
    throws: list[int] = Field(default_factory=list)
    frames: list[FrameInfo] = Field(default_factory=list)
    cumulative_scores: list[Optional[int]] = Field(
        default_factory=list, description="Ten entries, None while undetermined"
    )
    total_score: int = 0
    api_version: str = "v1"


class GameListResponse(BaseModel):
    """List of game IDs."""
    games: list[str]
    count: int


class EndGameResponse(BaseModel):
    """Response from ending a game."""
    success: bool
    game_id: str


class TallyResponse(BaseModel):
    """Running total of finished games in this server session."""
    total: int = 0
    games_played: int = 0
    average: float = 0.0
    best: Optional[int] = None
    game_scores: list[int] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
