from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .cards import Card
from .errors import InsufficientChips

MIN_SEATS = 2
# Two hole cards per seat, three burns and five board cards must fit in one deck.
MAX_SEATS = 22


class Phase(str, Enum):
    PRE_FLOP = "PRE_FLOP"
    FLOP = "FLOP"
    TURN = "TURN"
    RIVER = "RIVER"
    SHOWDOWN = "SHOWDOWN"


class ActionType(str, Enum):
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    RAISE = "RAISE"


@dataclass
class TableConfig:
    seats: int = 6
    starting_stack: int = 20_000
    sb: int = 50
    bb: int = 100

    def __post_init__(self) -> None:
        if not MIN_SEATS <= self.seats <= MAX_SEATS:
            raise ValueError(f"Seat count must be between {MIN_SEATS} and {MAX_SEATS}")
        if self.starting_stack <= 0:
            raise ValueError("Starting stack must be positive")
        if self.sb <= 0 or self.bb <= 0:
            raise ValueError("Blinds must be positive")
        if self.sb > self.bb:
            raise ValueError("Small blind cannot exceed big blind")


@dataclass
class PlayerSeat:
    seat: int
    name: str
    stack: int
    committed: int = 0
    total_in_pot: int = 0
    in_hand: bool = False
    has_folded: bool = False
    hole_cards: List[Card] = field(default_factory=list)
    is_small_blind: bool = False
    is_big_blind: bool = False

    @property
    def is_active(self) -> bool:
        return self.in_hand and not self.has_folded

    def reset_for_hand(self) -> None:
        self.committed = 0
        self.total_in_pot = 0
        self.in_hand = self.stack > 0
        self.has_folded = False
        self.hole_cards.clear()
        self.is_small_blind = False
        self.is_big_blind = False

    def reset_for_round(self) -> None:
        self.committed = 0

    def commit(self, amount: int) -> int:
        """Move chips from the stack into the current street bet."""
        if amount < 0:
            raise ValueError("Cannot commit a negative amount")
        if amount > self.stack:
            raise InsufficientChips(self.seat, amount, self.stack)
        self.stack -= amount
        self.committed += amount
        self.total_in_pot += amount
        return amount

    def win(self, amount: int) -> None:
        self.stack += amount


@dataclass
class ActionMenu:
    legal: List[ActionType]
    to_call: int
    min_raise: int
    max_raise: int
    stack: int = 0

    @property
    def can_call(self) -> bool:
        return ActionType.CALL in self.legal and self.stack >= self.to_call

    @property
    def can_raise(self) -> bool:
        return self.max_raise >= self.min_raise


@dataclass
class Action:
    action: ActionType
    amount: Optional[int] = None
