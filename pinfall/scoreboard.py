"""
Text scoreboard.

Two rows, one cell per frame:

     1   |  2   |  3   | ...
    X    | 9 /  | 7 2  |
    29   | 46   | 55   |
"""

from __future__ import annotations
from typing import Sequence

from .engine_core import FRAMES_PER_GAME, cumulative_scores, frame_marks

CELL_WIDTH = 5


def _cell(text: str) -> str:
    return f"{text:<{CELL_WIDTH}}| "


def render_rows(history: Sequence[int]) -> tuple[str, str, str]:
    """Header, marks and cumulative-score rows for a throw history."""
    marks = frame_marks(history)
    scores = cumulative_scores(history)

    header = "".join(_cell(f" {frame}") for frame in range(1, FRAMES_PER_GAME + 1))
    mark_row = ""
    score_row = ""
    for frame in range(FRAMES_PER_GAME):
        symbols = marks[frame] if frame < len(marks) else []
        mark_row += _cell(" ".join(symbols))
        score = scores[frame]
        score_row += _cell("" if score is None else str(score))

    return header.rstrip(), mark_row.rstrip(), score_row.rstrip()


def render(history: Sequence[int]) -> str:
    return "\n".join(render_rows(history))
