"""
Session Module - Manages ephemeral bowling games.

A game represents one 10-frame play-through:
- Created when a bowler starts
- Holds the score engine and the lane director
- Feeds its final score into the session tally
- Destroyed when ended

Games are EPHEMERAL: no persistence to disk or database.
"""

from .manager import SessionManager, Game, GameState
from .director import LaneDirector, PinRack, CountingRack, DeliveryResult
from .tally import SessionTally

__all__ = [
    "SessionManager",
    "Game",
    "GameState",
    "LaneDirector",
    "PinRack",
    "CountingRack",
    "DeliveryResult",
    "SessionTally",
]
