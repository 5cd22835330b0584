from __future__ import annotations

import random
from typing import List, Optional

from holdem.cards import Card
from holdem.models import Action, ActionMenu, ActionType, Phase


_RNG = random.Random()


def _rough_hand_strength(hole: List[Card]) -> int:
    """Very rough proxy for hand quality used to drive aggression choices."""
    if len(hole) < 2:
        return 0

    values = [card.rank for card in hole]
    score = sum(values)
    if values[0] == values[1]:
        score += 14  # pairs are quite strong pre-flop
    else:
        gap = abs(values[0] - values[1])
        if gap == 1:
            score += 4
        elif gap == 2:
            score += 2
    if hole[0].suit == hole[1].suit:
        score += 3
    if min(values) >= 11:
        score += 2

    return score


def _should_raise(strength: int, phase: Phase, facing_bet: bool, rng: random.Random) -> bool:
    base = 0.1 if facing_bet else 0.2
    phase_bonus = {
        Phase.PRE_FLOP: 0.0,
        Phase.FLOP: 0.05,
        Phase.TURN: 0.08,
        Phase.RIVER: 0.1,
    }.get(phase, 0.0)
    probability = min(0.75, base + phase_bonus + min(strength / 60.0, 0.35))

    # Always attack with premium holdings.
    if strength >= 36:
        return True
    return rng.random() < probability


def _choose_raise_amount(menu: ActionMenu, rng: random.Random) -> int:
    if menu.max_raise <= menu.min_raise:
        return menu.min_raise
    # Mostly minimum raises, with the occasional larger one capped at a quarter of the range.
    span = (menu.max_raise - menu.min_raise) // 4
    if rng.random() < 0.6 or span <= 0:
        return menu.min_raise
    return menu.min_raise + rng.randint(0, span)


def baseline_strategy(
    hole: List[Card],
    menu: ActionMenu,
    phase: Phase = Phase.PRE_FLOP,
    rng: Optional[random.Random] = None,
) -> Action:
    """House bot: raises some of the time, never calls what it cannot afford."""
    rng = rng or _RNG
    strength = _rough_hand_strength(hole)
    facing_bet = menu.to_call > 0

    if menu.can_raise and hole and _should_raise(strength, phase, facing_bet, rng):
        return Action(ActionType.RAISE, _choose_raise_amount(menu, rng))

    if ActionType.CHECK in menu.legal:
        return Action(ActionType.CHECK)

    # Calling more than the whole stack would be a forced fold anyway.
    if menu.can_call and (strength >= 18 or menu.to_call <= menu.stack // 10):
        return Action(ActionType.CALL)

    return Action(ActionType.FOLD)
