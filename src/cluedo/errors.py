"""
Errors raised by the Cluedo board engine.

ConfigurationError aborts game creation. IllegalActionError rejects a single
action and leaves the game untouched, so the caller can simply ask again.
InvariantViolation means the engine was used against its contract.
"""


class GameError(Exception):
    """Base class for every error raised by the engine."""


class ConfigurationError(GameError):
    """The board or the game setup is unusable (bad map, unknown room letter, ...)."""


class IllegalActionError(GameError, ValueError):
    """A move, exit, suggestion or accusation was attempted when the rules forbid it."""


class InvariantViolation(GameError):
    """A token was treated as being inside a room when it is not."""
