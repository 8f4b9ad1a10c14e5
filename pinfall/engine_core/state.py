"""
Game State - Throw history and the values derived from it.

Design principles:
- Single source of truth: the throw history
- Append-only: throws are never reordered or edited
- Derived values (position, status, scores) are recomputed, never stored
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional


PINS_PER_RACK = 10
FRAMES_PER_GAME = 10

# Cumulative score per frame, None while the frame is still undetermined
CumulativeScores = tuple[Optional[int], ...]


class PinAction(Enum):
    """What the pin rack has to do before the next delivery."""
    NONE = "none"  # Game over
    RESET_ALL = "reset_all"  # Full rack (new frame, or bonus ball after strike/spare)
    REMOVE_FALLEN = "remove_fallen"  # Clear fallen pins, keep standing ones


@dataclass(frozen=True)
class GameStatus:
    """Game-over flag plus the pin action for the next delivery."""
    is_game_over: bool
    next_pin_action: PinAction

    @classmethod
    def game_over(cls) -> GameStatus:
        return cls(is_game_over=True, next_pin_action=PinAction.NONE)

    @classmethod
    def continues(cls, action: PinAction) -> GameStatus:
        return cls(is_game_over=False, next_pin_action=action)


@dataclass(frozen=True)
class FramePosition:
    """
    Where the game stands in its frame structure.

    frame_index is 1-based. throws_in_current_frame counts the throws
    already recorded in that frame. all_throws_accounted_for is True
    once the tenth frame (and the game) is complete.
    """
    frame_index: int
    throws_in_current_frame: int
    all_throws_accounted_for: bool = False

    @property
    def is_final_frame(self) -> bool:
        return self.frame_index == FRAMES_PER_GAME


class ThrowHistory:
    """
    Ordered, append-only sequence of pinfall counts.

    Range checks live in the engine; the history only stores what
    the engine accepted.
    """

    def __init__(self, throws: list[int] | None = None):
        self._throws: list[int] = list(throws or [])

    def append(self, pins_down: int) -> None:
        self._throws.append(pins_down)

    def clear(self) -> None:
        """Empty the history. Only used when a new game starts."""
        self._throws.clear()

    def snapshot(self) -> tuple[int, ...]:
        return tuple(self._throws)

    def __len__(self) -> int:
        return len(self._throws)

    def __getitem__(self, index: int) -> int:
        return self._throws[index]

    def __iter__(self) -> Iterator[int]:
        return iter(self._throws)

    def __eq__(self, other) -> bool:
        if isinstance(other, ThrowHistory):
            return self._throws == other._throws
        return NotImplemented

    def __repr__(self) -> str:
        return f"ThrowHistory({self._throws!r})"
