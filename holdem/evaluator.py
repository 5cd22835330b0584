from __future__ import annotations

from collections import Counter
from enum import IntEnum
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from .cards import Card


class HandRank(IntEnum):
    HIGH_CARD = 0
    ONE_PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8

    @property
    def label(self) -> str:
        if self is HandRank.ONE_PAIR:
            return "pair"
        return self.name.lower()


class HandValue(NamedTuple):
    """Comparable result of evaluating a hand: category first, then the five ranks that play."""

    category: HandRank
    key: Tuple[int, ...]


def evaluate_hand(cards: Sequence[Card]) -> HandValue:
    """Classify five or more distinct cards (Texas Hold'em). Higher is better."""
    cards = list(cards)
    if len(cards) < 5:
        raise ValueError("At least five cards are required to evaluate a hand")
    if len(set(cards)) != len(cards):
        raise ValueError("Duplicate cards in hand")

    counts = Counter(card.rank for card in cards)
    suited: Dict[str, List[int]] = {}
    for card in cards:
        suited.setdefault(card.suit, []).append(card.rank)
    flush_suits = [sorted(ranks, reverse=True) for ranks in suited.values() if len(ranks) >= 5]

    # Strongest category first; several can hold at once on seven cards.
    straight_flush_highs = [high for high in map(_straight_high, flush_suits) if high is not None]
    if straight_flush_highs:
        return HandValue(HandRank.STRAIGHT_FLUSH, _straight_key(max(straight_flush_highs)))

    quads = _ranks_with_at_least(counts, 4)
    if quads:
        return HandValue(HandRank.FOUR_OF_A_KIND, (quads[0],) * 4 + _kickers(counts, quads[:1], 1))

    trips = _ranks_with_at_least(counts, 3)
    if trips:
        pairs = [rank for rank in _ranks_with_at_least(counts, 2) if rank != trips[0]]
        if pairs:
            return HandValue(HandRank.FULL_HOUSE, (trips[0],) * 3 + (pairs[0],) * 2)

    if flush_suits:
        return HandValue(HandRank.FLUSH, max(tuple(ranks[:5]) for ranks in flush_suits))

    straight_high = _straight_high(counts)
    if straight_high is not None:
        return HandValue(HandRank.STRAIGHT, _straight_key(straight_high))

    if trips:
        return HandValue(HandRank.THREE_OF_A_KIND, (trips[0],) * 3 + _kickers(counts, trips[:1], 2))

    pairs = _ranks_with_at_least(counts, 2)
    if len(pairs) >= 2:
        high, low = pairs[:2]
        return HandValue(HandRank.TWO_PAIR, (high, high, low, low) + _kickers(counts, [high, low], 1))
    if pairs:
        return HandValue(HandRank.ONE_PAIR, (pairs[0],) * 2 + _kickers(counts, pairs[:1], 3))

    return HandValue(HandRank.HIGH_CARD, _kickers(counts, [], 5))


def compare_hands(first: HandValue, second: HandValue) -> int:
    if first > second:
        return 1
    if first < second:
        return -1
    return 0


def describe_rank(value: HandValue) -> str:
    return value.category.label


def _ranks_with_at_least(counts: Counter, size: int) -> List[int]:
    return sorted((rank for rank, count in counts.items() if count >= size), reverse=True)


def _kickers(counts: Counter, used: Sequence[int], size: int) -> Tuple[int, ...]:
    return tuple(sorted((rank for rank in counts if rank not in used), reverse=True)[:size])


def _straight_high(ranks: Iterable[int]) -> Optional[int]:
    values = set(ranks)
    if 14 in values:  # Ace low
        values.add(1)
    ordered = sorted(values)
    best = None
    for idx in range(len(ordered) - 4):
        window = ordered[idx : idx + 5]
        if window[-1] - window[0] == 4:
            best = window[-1]
    return best


def _straight_key(high: int) -> Tuple[int, ...]:
    return tuple(range(high, high - 5, -1))
