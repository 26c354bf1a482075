"""Error taxonomy for random streams."""

from __future__ import annotations


class RngError(Exception):
    """Base class for rngfork errors."""


class InvalidSeedError(RngError, ValueError):
    """Raised when a seed is zero or not finite."""


class InvalidRangeError(RngError, ValueError):
    """Raised when a lower bound exceeds its upper bound."""


class EmptyInputError(RngError, IndexError):
    """Raised when selecting from an empty sequence."""


class DriftWarning(RuntimeWarning):
    """Ambient random source used while deterministic mode is active.

    Only ever logged and recorded, never raised.
    """

    def __init__(self, function: str, stack: tuple[str, ...] = ()) -> None:
        self.function = function
        self.stack = stack
        super().__init__(f"{function}() invoked after deterministic bootstrap")
