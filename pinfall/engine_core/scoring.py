"""
Score Calculator - Cumulative frame scores and scoreboard marks.

Scores need lookahead: a strike in frames 1-9 is worth 10 plus the
next two throws, a spare 10 plus the next one. A frame whose bonus
throws have not been recorded is undetermined (None), and so is
every frame after it.
"""

from __future__ import annotations
from typing import Sequence

from .frame_walker import split_frames
from .state import CumulativeScores, FRAMES_PER_GAME, PINS_PER_RACK

STRIKE_MARK = "X"
SPARE_MARK = "/"
GUTTER_MARK = "-"


def _frame_score(history: Sequence[int], cursor: int) -> tuple[int | None, int]:
    """Score one of frames 1-9 starting at cursor. Returns (score or None, throws consumed)."""
    count = len(history)
    first = history[cursor]

    if first == PINS_PER_RACK:
        if cursor + 2 < count:
            return PINS_PER_RACK + history[cursor + 1] + history[cursor + 2], 1
        return None, 1

    if cursor + 1 >= count:
        return None, 1

    pair = first + history[cursor + 1]
    if pair == PINS_PER_RACK:
        if cursor + 2 < count:
            return PINS_PER_RACK + history[cursor + 2], 2
        return None, 2

    return pair, 2


def _final_frame_score(history: Sequence[int], cursor: int) -> int | None:
    """Score the tenth frame once it is closed."""
    throws = list(history[cursor:cursor + 3])
    if len(throws) == 3:
        return sum(throws)
    if len(throws) == 2 and throws[0] != PINS_PER_RACK and sum(throws) < PINS_PER_RACK:
        return sum(throws)
    return None


def cumulative_scores(history: Sequence[int]) -> CumulativeScores:
    """
    Running total through each of the ten frames.

    Determined entries are non-decreasing; once an entry is None every
    later entry is None too.
    """
    scores: list[int | None] = [None] * FRAMES_PER_GAME
    running_total = 0
    cursor = 0

    for frame in range(FRAMES_PER_GAME):
        if cursor >= len(history):
            break

        if frame == FRAMES_PER_GAME - 1:
            score = _final_frame_score(history, cursor)
        else:
            score, consumed = _frame_score(history, cursor)
            cursor += consumed

        if score is None:
            break

        running_total += score
        scores[frame] = running_total

    return tuple(scores)


def total_score(history: Sequence[int]) -> int:
    """Highest determined cumulative score (0 before any frame is determined)."""
    determined = [s for s in cumulative_scores(history) if s is not None]
    return determined[-1] if determined else 0


def _mark(pins: int, standing: int, fresh_rack: bool) -> str:
    if pins == standing:
        return STRIKE_MARK if fresh_rack else SPARE_MARK
    if pins == 0:
        return GUTTER_MARK
    return str(pins)


def frame_marks(history: Sequence[int]) -> list[list[str]]:
    """
    Scoreboard symbols for every frame with at least one throw.

    "X" strike, "/" spare, "-" gutter, digits otherwise. In the tenth
    frame each ball is marked against the rack it faced, so a strike
    on a fresh rack after a strike or spare is "X" again.
    """
    marks: list[list[str]] = []

    for index, frame in enumerate(split_frames(history)):
        frame_symbols = []
        standing = PINS_PER_RACK
        fresh_rack = True
        for pins in frame:
            frame_symbols.append(_mark(pins, standing, fresh_rack))
            standing -= pins
            fresh_rack = False
            if standing <= 0 and index == FRAMES_PER_GAME - 1:
                standing = PINS_PER_RACK
                fresh_rack = True
        marks.append(frame_symbols)

    return marks
