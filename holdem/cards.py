from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .errors import DeckExhausted

RANKS = "AKQJT98765432"
SUITS = "hdcs"

RANK_VALUE = {rank: value for value, rank in enumerate(reversed(RANKS), start=2)}
VALUE_RANK = {value: rank for rank, value in RANK_VALUE.items()}
SUIT_SYMBOLS = {"h": "♥", "d": "♦", "c": "♣", "s": "♠"}


@dataclass(frozen=True)
class Card:
    rank: int
    suit: str

    def __post_init__(self) -> None:
        if self.rank not in VALUE_RANK:
            raise ValueError(f"Invalid rank: {self.rank}")
        if self.suit not in SUITS:
            raise ValueError(f"Invalid suit: {self.suit}")

    @property
    def value(self) -> int:
        return self.rank

    @property
    def label(self) -> str:
        return f"{VALUE_RANK[self.rank]}{self.suit}"

    @property
    def symbol(self) -> str:
        rank = "10" if self.rank == 10 else VALUE_RANK[self.rank]
        return f"{rank}{SUIT_SYMBOLS[self.suit]}"

    def __str__(self) -> str:
        return self.label


class Deck:
    """Draw stack of 52 distinct cards. The top of the deck is index 0."""

    def __init__(self, cards: Optional[Iterable[Card]] = None) -> None:
        if cards is None:
            cards = (Card(RANK_VALUE[rank], suit) for rank in RANKS[::-1] for suit in SUITS)
        self._cards: List[Card] = list(cards)
        if len(set(self._cards)) != len(self._cards):
            raise ValueError("Deck contains duplicate cards")

    def __len__(self) -> int:
        return len(self._cards)

    @property
    def cards(self) -> List[Card]:
        return list(self._cards)

    def shuffle(self, rng: Optional[random.Random] = None) -> None:
        (rng or random.Random()).shuffle(self._cards)

    def draw(self) -> Card:
        if not self._cards:
            raise DeckExhausted("No more cards in the deck")
        return self._cards.pop(0)

    def deal(self, count: int) -> List[Card]:
        if len(self._cards) < count:
            raise DeckExhausted(f"Cannot deal {count} cards, {len(self._cards)} left in deck")
        return [self.draw() for _ in range(count)]

    def burn(self) -> Card:
        return self.draw()


def build_deck(seed: Optional[int] = None) -> Deck:
    deck = Deck()
    deck.shuffle(random.Random(seed))
    return deck


def cards_to_labels(cards: Iterable[Card]) -> List[str]:
    return [card.label for card in cards]


def cards_to_symbols(cards: Iterable[Card]) -> str:
    return " ".join(card.symbol for card in cards)


def parse_label(label: str) -> Card:
    text = label.strip()
    if len(text) == 3 and text.startswith("10"):
        text = "T" + text[2]
    if len(text) != 2:
        raise ValueError(f"Invalid card label: {label}")
    rank = text[0].upper()
    if rank not in RANK_VALUE:
        raise ValueError(f"Invalid rank: {text[0]}")
    return Card(RANK_VALUE[rank], text[1].lower())


def parse_cards(labels: Iterable[str]) -> List[Card]:
    return [parse_label(label) for label in labels]
