from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from holdem.cards import Deck, parse_cards
from holdem.collaborator import Collaborator
from holdem.game import GameEngine, HandContext
from holdem.models import Action, ActionMenu, ActionType, PlayerSeat, TableConfig


def create_engine(
    *,
    seats: int = 4,
    starting_stack: int = 1_000,
    sb: int = 10,
    bb: int = 20,
) -> GameEngine:
    """Instantiate a game engine with a populated table."""
    engine = GameEngine(TableConfig(seats=seats, starting_stack=starting_stack, sb=sb, bb=bb))
    for idx in range(seats):
        engine.assign_seat(f"Player{idx}")
    return engine


def start_hand(engine: GameEngine, seed: int = 42) -> HandContext:
    ctx = engine.start_hand(seed=seed)
    assert ctx is not None
    return ctx


def rigged_deck(labels: Sequence[str]) -> Deck:
    """Deck whose top cards are ``labels`` in order, followed by the rest of the pack."""
    top = parse_cards(labels)
    rest = [card for card in Deck().cards if card not in top]
    return Deck(top + rest)


def rig_deck(monkeypatch, labels: Sequence[str]) -> None:
    monkeypatch.setattr("holdem.game.build_deck", lambda seed=None: rigged_deck(labels))


def perform_actions(engine: GameEngine, actions: Iterable[Tuple[int, ActionType, Optional[int]]]) -> List[Dict[str, object]]:
    """Apply a scripted sequence of actions (seat, action, amount)."""
    events: List[Dict[str, object]] = []
    for seat_idx, action, amount in actions:
        events.extend(engine.apply_action(seat_idx, action, amount))
    return events


def passive_action(engine: GameEngine, seat_idx: int) -> Tuple[ActionType, Optional[int]]:
    menu = engine.legal_actions(seat_idx)
    if ActionType.CHECK in menu.legal:
        return ActionType.CHECK, None
    if menu.can_call:
        return ActionType.CALL, None
    return ActionType.FOLD, None


def auto_complete_hand(engine: GameEngine) -> List[Dict[str, object]]:
    """Advance the current hand with check/call/fold until completion."""
    events: List[Dict[str, object]] = []
    while not engine.is_hand_complete():
        actor = engine.next_actor()
        if actor is None:
            break
        action, amount = passive_action(engine, actor)
        events.extend(engine.apply_action(actor, action, amount))
    return events


class ScriptedCollaborator(Collaborator):
    """Replays queued decisions per seat, checking or calling once a seat's script runs out."""

    def __init__(self, script: Optional[Dict[int, List[Action]]] = None) -> None:
        self.script = {seat: list(actions) for seat, actions in (script or {}).items()}
        self.events: List[Dict[str, object]] = []
        self.prompts: List[Tuple[int, ActionMenu]] = []

    def request_action(self, seat: PlayerSeat, menu: ActionMenu) -> Action:
        self.prompts.append((seat.seat, menu))
        queued = self.script.get(seat.seat)
        if queued:
            return queued.pop(0)
        if ActionType.CHECK in menu.legal:
            return Action(ActionType.CHECK)
        return Action(ActionType.CALL)

    def notify(self, event: Dict[str, object]) -> None:
        self.events.append(event)

    def of_type(self, ev: str) -> List[Dict[str, object]]:
        return [event for event in self.events if event["ev"] == ev]
