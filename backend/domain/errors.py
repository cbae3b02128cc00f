"""
Exception taxonomy for the snake core.

Ordinary control flow (pausing, rejected turns, debounced input) never
raises; those outcomes are expressed as an unchanged state.
"""


class SnakeGameError(Exception):
    """Base class for all errors raised by the game core."""


class InvalidTransitionError(SnakeGameError):
    """Raised when a session is advanced or restarted in a state that forbids it."""


class StorageFailure(SnakeGameError):
    """Raised when the score ledger cannot complete an insert or query."""
