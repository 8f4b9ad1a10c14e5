"""
Engine Core - Deterministic bowling score engine.

The engine is the runtime that:
1. Records throws into an append-only history
2. Locates the current frame and throw
3. Decides game over and the next pin action
4. Computes cumulative frame scores with strike/spare lookahead
"""

from .state import (
    CumulativeScores,
    FramePosition,
    GameStatus,
    PinAction,
    ThrowHistory,
    FRAMES_PER_GAME,
    PINS_PER_RACK,
)
from .errors import EngineError, InvalidState, OutOfRangeThrow
from .frame_walker import locate, split_frames, standing_pins
from .scoring import cumulative_scores, frame_marks, total_score
from .engine import ScoreEngine, ScoreUpdate, check_status

__all__ = [
    "CumulativeScores",
    "FramePosition",
    "GameStatus",
    "PinAction",
    "ThrowHistory",
    "FRAMES_PER_GAME",
    "PINS_PER_RACK",
    "EngineError",
    "InvalidState",
    "OutOfRangeThrow",
    "locate",
    "split_frames",
    "standing_pins",
    "cumulative_scores",
    "frame_marks",
    "total_score",
    "ScoreEngine",
    "ScoreUpdate",
    "check_status",
]
