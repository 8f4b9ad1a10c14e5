"""
Score Engine - The facade external collaborators talk to.

The engine is the single point of history mutation.
All throws must go through record_throw().

Design principles:
- Validates before applying; a rejected throw leaves history untouched
- Position, status and scores are recomputed from the history
- Derived values are memoized per history and dropped on every append
- Observers are notified after each accepted throw and on reset
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Sequence
import logging

from .errors import InvalidState, OutOfRangeThrow
from .frame_walker import locate, standing_pins
from .scoring import cumulative_scores, frame_marks, total_score
from .state import (
    CumulativeScores,
    FramePosition,
    GameStatus,
    PinAction,
    ThrowHistory,
    PINS_PER_RACK,
)

logger = logging.getLogger(__name__)


def check_status(history: Sequence[int]) -> GameStatus:
    """
    Game-over flag and next pin action for a throw history.

    Pure function: the same history always yields the same status.
    """
    position = locate(history)
    recorded = position.throws_in_current_frame

    if position.all_throws_accounted_for:
        return GameStatus.game_over()

    if recorded == 0:
        return GameStatus.continues(PinAction.RESET_ALL)

    frame = history[len(history) - recorded:]

    if not position.is_final_frame:
        # A strike closes frames 1-9 at once, so one recorded throw is never a strike here
        return GameStatus.continues(PinAction.REMOVE_FALLEN)

    if recorded == 1:
        if frame[0] == PINS_PER_RACK:
            return GameStatus.continues(PinAction.RESET_ALL)
        return GameStatus.continues(PinAction.REMOVE_FALLEN)

    if recorded == 2:
        first, second = frame[0], frame[1]
        if first + second == PINS_PER_RACK:
            return GameStatus.continues(PinAction.RESET_ALL)
        if first == PINS_PER_RACK and second == PINS_PER_RACK:
            return GameStatus.continues(PinAction.RESET_ALL)
        return GameStatus.continues(PinAction.REMOVE_FALLEN)

    return GameStatus.game_over()


@dataclass(frozen=True)
class ScoreUpdate:
    """What observers receive after every accepted throw or reset."""
    throws: tuple[int, ...]
    cumulative_scores: CumulativeScores
    status: GameStatus


ScoreObserver = Callable[[ScoreUpdate], None]


class ScoreEngine:
    """
    Bowling score engine for one game.

    Usage:
        engine = ScoreEngine()
        engine.subscribe(scoreboard.render)

        status = engine.record_throw(7)
        if status.next_pin_action == PinAction.REMOVE_FALLEN:
            rack.remove_fallen()

        engine.cumulative_scores()  # (None, None, ...) until frame 1 closes
    """

    def __init__(self, strict_pin_count: bool = False):
        self.strict_pin_count = strict_pin_count
        self._history = ThrowHistory()
        self._observers: list[ScoreObserver] = []
        self._cache: dict[str, Any] = {}

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def history(self) -> tuple[int, ...]:
        """Recorded throws, oldest first."""
        return self._memo("history", self._history.snapshot)

    def locate(self) -> FramePosition:
        return self._memo("position", lambda: locate(self.history))

    def check_status(self) -> GameStatus:
        return self._memo("status", lambda: check_status(self.history))

    def cumulative_scores(self) -> CumulativeScores:
        return self._memo("scores", lambda: cumulative_scores(self.history))

    def frame_marks(self) -> list[list[str]]:
        return [list(marks) for marks in self._memo("marks", lambda: frame_marks(self.history))]

    def total_score(self) -> int:
        return total_score(self.history)

    def standing_pins(self) -> int:
        return standing_pins(self.history)

    @property
    def is_game_over(self) -> bool:
        return self.check_status().is_game_over

    # =========================================================================
    # Commands
    # =========================================================================

    def record_throw(self, pins_down: int) -> GameStatus:
        """
        Append one delivery to the history.

        Raises:
            OutOfRangeThrow: pins_down is not an int in [0, 10], or in
                strict mode exceeds the pins left standing
            InvalidState: the game is already over

        Returns the status for the next delivery.
        """
        if isinstance(pins_down, bool) or not isinstance(pins_down, int):
            raise OutOfRangeThrow(
                f"Pin count must be an integer, got {pins_down!r}",
                pins_down=pins_down,
            )
        if not 0 <= pins_down <= PINS_PER_RACK:
            logger.debug("Rejected out-of-range throw %r", pins_down)
            raise OutOfRangeThrow(
                f"Pin count {pins_down} is outside 0-{PINS_PER_RACK}",
                pins_down=pins_down,
            )
        if self.is_game_over:
            logger.debug("Rejected throw %d after game over", pins_down)
            raise InvalidState(
                "Game is over - no more throws allowed",
                throws_recorded=len(self._history),
            )
        if self.strict_pin_count:
            standing = self.standing_pins()
            if pins_down > standing:
                raise OutOfRangeThrow(
                    f"Pin count {pins_down} exceeds the {standing} pins standing",
                    pins_down=pins_down,
                    standing=standing,
                )

        self._history.append(pins_down)
        self._cache.clear()

        status = self.check_status()
        position = self.locate()
        logger.debug(
            "Recorded throw %d (frame %d, throw %d, action %s)",
            pins_down,
            position.frame_index,
            position.throws_in_current_frame,
            status.next_pin_action.value,
        )
        self._publish()
        return status

    def reset(self) -> None:
        """Start a new game: clear the history and notify observers."""
        self._history.clear()
        self._cache.clear()
        logger.debug("Score engine reset")
        self._publish()

    def replay(self, throws: Sequence[int]) -> GameStatus:
        """Record a sequence of throws in order; stops at the first rejected throw."""
        status = self.check_status()
        for pins_down in throws:
            status = self.record_throw(pins_down)
        return status

    # =========================================================================
    # Observers
    # =========================================================================

    def subscribe(self, observer: ScoreObserver) -> Callable[[], None]:
        """Register an observer. Returns a callable that unsubscribes it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def snapshot(self) -> ScoreUpdate:
        return ScoreUpdate(
            throws=self.history,
            cumulative_scores=self.cumulative_scores(),
            status=self.check_status(),
        )

    def _publish(self) -> None:
        if not self._observers:
            return
        update = self.snapshot()
        for observer in list(self._observers):
            observer(update)

    def _memo(self, key: str, compute: Callable[[], Any]) -> Any:
        if key not in self._cache:
            self._cache[key] = compute()
        return self._cache[key]
