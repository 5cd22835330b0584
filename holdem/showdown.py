from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from .cards import Card, cards_to_labels
from .evaluator import HandValue, describe_rank, evaluate_hand
from .models import PlayerSeat


@dataclass
class ShowdownResult:
    scores: Dict[int, HandValue] = field(default_factory=dict)
    winners: List[int] = field(default_factory=list)
    payouts: List[Tuple[int, int]] = field(default_factory=list)
    events: List[Dict[str, object]] = field(default_factory=list)


def split_pot(pot: int, winners: Sequence[int]) -> List[Tuple[int, int]]:
    """Equal shares; the odd chips all go to the first winner."""
    if not winners:
        raise ValueError("Cannot split a pot without winners")
    share, remainder = divmod(pot, len(winners))
    return [(seat_idx, share + (remainder if idx == 0 else 0)) for idx, seat_idx in enumerate(winners)]


def find_winners(scores: Dict[int, HandValue]) -> List[int]:
    if not scores:
        return []
    best = max(scores.values())
    return [seat_idx for seat_idx, score in scores.items() if score == best]


def settle_showdown(
    contenders: Sequence[PlayerSeat],
    community: Sequence[Card],
    pot: int,
) -> ShowdownResult:
    """Award the pot among the seats still in the hand.

    A lone contender takes the pot without showing. Otherwise every hand is
    evaluated in the order given and all seats tied for the best hand split it.
    """
    result = ShowdownResult()
    if not contenders:
        raise ValueError("No contenders left for the pot")

    if len(contenders) == 1:
        result.winners = [contenders[0].seat]
    else:
        board = list(community)
        for seat in contenders:
            score = evaluate_hand(list(seat.hole_cards) + board)
            result.scores[seat.seat] = score
            result.events.append(
                {
                    "ev": "SHOWDOWN",
                    "seat": seat.seat,
                    "hand": cards_to_labels(seat.hole_cards),
                    "board": cards_to_labels(board),
                    "rank": describe_rank(score),
                }
            )
        result.winners = find_winners(result.scores)

    result.payouts = split_pot(pot, result.winners)
    by_seat = {seat.seat: seat for seat in contenders}
    for seat_idx, amount in result.payouts:
        by_seat[seat_idx].win(amount)
        result.events.append({"ev": "POT_AWARD", "seat": seat_idx, "amount": amount})
    return result
