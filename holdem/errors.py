"""Exception types raised by the engine.

Illegal actions are recoverable (the seat is asked again), insufficient chips
are recovered by folding the seat, everything else is an engine fault.
"""


class HoldemError(Exception):
    """Base class for engine errors."""


class IllegalAction(HoldemError, ValueError):
    """Proposed action is not on the seat's legal menu."""


class InsufficientChips(HoldemError, ValueError):
    def __init__(self, seat: int, needed: int, stack: int) -> None:
        super().__init__(f"Seat {seat} needs {needed} chips but has {stack}")
        self.seat = seat
        self.needed = needed
        self.stack = stack


class DeckExhausted(HoldemError, RuntimeError):
    """A card was requested from an empty deck."""


class EngineError(HoldemError, RuntimeError):
    """Engine used outside of a valid state."""
