"""
Lane Director - Drives the pin rack from the score engine.

The loop:
1. Ball is launched (only while the game is not over)
2. Pins settle; the pin-fall collaborator reports a count
3. Engine records the throw
4. Director asks the engine what the rack must do
5. Rack is reset or cleared of fallen pins
6. Repeat until game over
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Protocol
import logging

from ..engine_core import GameStatus, PinAction, ScoreEngine, PINS_PER_RACK

logger = logging.getLogger(__name__)


class PinRack(Protocol):
    """Physical (or simulated) pin deck."""

    def reset_all(self) -> None:
        """Restore every pin to its upright starting spot."""

    def remove_fallen(self, pins_down: int) -> None:
        """Clear the pins knocked down by the last delivery, leaving the rest."""


class CountingRack:
    """In-memory rack that only tracks how many pins are standing."""

    def __init__(self):
        self.standing = PINS_PER_RACK
        self.resets = 0

    def reset_all(self) -> None:
        self.standing = PINS_PER_RACK
        self.resets += 1

    def remove_fallen(self, pins_down: int) -> None:
        self.standing = max(0, self.standing - pins_down)


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of one delivery as seen by the lane."""
    pins_down: int
    status: GameStatus
    frame_index: int
    cumulative_scores: tuple[int | None, ...]

    @property
    def instruction(self) -> str:
        """Human-readable pin instruction for the lane operator."""
        if self.status.is_game_over:
            return "Game over"
        if self.status.next_pin_action == PinAction.RESET_ALL:
            return "Reset all pins"
        return "Remove fallen pins"


class LaneDirector:
    """
    Applies engine decisions to a pin rack.

    Usage:
        director = LaneDirector(ScoreEngine(), CountingRack())

        while director.ready_for_launch:
            result = director.deliver(count_fallen_pins())
            print(result.instruction)
    """

    def __init__(self, engine: ScoreEngine, rack: PinRack):
        self.engine = engine
        self.rack = rack

    @property
    def ready_for_launch(self) -> bool:
        return not self.engine.is_game_over

    def deliver(self, pins_down: int) -> DeliveryResult:
        """
        Record a settled delivery and set up the rack for the next one.

        Engine errors propagate; the rack is left untouched on rejection.
        """
        status = self.engine.record_throw(pins_down)

        if status.next_pin_action == PinAction.RESET_ALL:
            self.rack.reset_all()
        elif status.next_pin_action == PinAction.REMOVE_FALLEN:
            self.rack.remove_fallen(pins_down)
        else:
            logger.info("Game over with %d", self.engine.total_score())

        return DeliveryResult(
            pins_down=pins_down,
            status=status,
            frame_index=self.engine.locate().frame_index,
            cumulative_scores=self.engine.cumulative_scores(),
        )

    def new_game(self) -> None:
        """Clear the history and re-rack for a fresh game."""
        self.engine.reset()
        self.rack.reset_all()
