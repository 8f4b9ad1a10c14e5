"""
Frame Walker - Locates the current frame and throw from the history.

Frames 1-9 consume one throw for a strike and two otherwise. The
tenth frame holds two throws, or three when its first two throws
produce a strike or a spare.
"""

from __future__ import annotations
from typing import Sequence

from .state import FramePosition, FRAMES_PER_GAME, PINS_PER_RACK


def locate(history: Sequence[int]) -> FramePosition:
    """
    Walk the history frame by frame and report where the game stands.

    A frame that has not started reports zero throws. Once the tenth
    frame is closed, all_throws_accounted_for is True.
    """
    cursor = 0
    count = len(history)

    for frame in range(1, FRAMES_PER_GAME):
        if cursor >= count:
            return FramePosition(frame_index=frame, throws_in_current_frame=0)

        if history[cursor] == PINS_PER_RACK:
            cursor += 1
            continue

        if cursor + 1 >= count:
            return FramePosition(frame_index=frame, throws_in_current_frame=1)

        cursor += 2

    recorded = count - cursor
    if recorded < 2:
        return FramePosition(frame_index=FRAMES_PER_GAME, throws_in_current_frame=recorded)

    if recorded == 2:
        # Open tenth frame ends the game; strike or spare earns a third ball
        first, second = history[cursor], history[cursor + 1]
        return FramePosition(
            frame_index=FRAMES_PER_GAME,
            throws_in_current_frame=2,
            all_throws_accounted_for=first + second < PINS_PER_RACK,
        )

    return FramePosition(
        frame_index=FRAMES_PER_GAME,
        throws_in_current_frame=recorded,
        all_throws_accounted_for=True,
    )


def split_frames(history: Sequence[int]) -> list[tuple[int, ...]]:
    """
    Group the history into per-frame tuples.

    Only frames with at least one recorded throw are returned, so the
    last entry may be a frame in progress.
    """
    frames: list[tuple[int, ...]] = []
    cursor = 0
    count = len(history)

    while cursor < count and len(frames) < FRAMES_PER_GAME - 1:
        if history[cursor] == PINS_PER_RACK:
            frames.append((history[cursor],))
            cursor += 1
        else:
            frames.append(tuple(history[cursor:cursor + 2]))
            cursor += 2

    if cursor < count:
        frames.append(tuple(history[cursor:cursor + 3]))

    return frames


def standing_pins(history: Sequence[int]) -> int:
    """Pins standing on the deck for the next delivery (0 once the game is over)."""
    position = locate(history)
    if position.all_throws_accounted_for:
        return 0

    recorded = position.throws_in_current_frame
    if recorded == 0:
        return PINS_PER_RACK

    frame = history[len(history) - recorded:]
    if not position.is_final_frame:
        return PINS_PER_RACK - frame[0]

    if recorded == 1:
        return PINS_PER_RACK if frame[0] == PINS_PER_RACK else PINS_PER_RACK - frame[0]

    first, second = frame[0], frame[1]
    if first == PINS_PER_RACK and second < PINS_PER_RACK:
        return PINS_PER_RACK - second
    return PINS_PER_RACK
