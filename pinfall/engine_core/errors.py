"""
Engine errors.

All errors are local and recoverable: a rejected call leaves the
throw history untouched.
"""


class EngineError(Exception):
    """Base class for score engine errors."""
    error_code = "ENGINE_ERROR"

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details


class OutOfRangeThrow(EngineError, ValueError):
    """Pin count outside [0, 10], or more pins than are standing in strict mode."""
    error_code = "OUT_OF_RANGE_THROW"


class InvalidState(EngineError):
    """Throw recorded after the game is over."""
    error_code = "INVALID_STATE"
