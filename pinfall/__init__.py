"""
Pinfall - Ten-Pin Bowling Score Engine

A deterministic engine that turns a sequence of pinfall counts into:
- The current frame and throw
- Game-over detection and the next pin-rack action
- Cumulative frame scores (strikes, spares, tenth-frame bonus balls)
- An HTTP API and CLI around ephemeral game sessions
"""

__version__ = "0.1.0"
