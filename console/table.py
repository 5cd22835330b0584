from __future__ import annotations

import logging
import random
from typing import Callable, Dict, Iterable, List, Optional

from holdem.cards import cards_to_symbols, parse_cards
from holdem.collaborator import Collaborator
from holdem.game import GameEngine
from holdem.models import Action, ActionMenu, ActionType, Phase, PlayerSeat

from .bots import baseline_strategy

LOGGER = logging.getLogger("console")

HELP_TEXT = "f = fold, k = check, c = call, r <amount> = raise by <amount>, h = help"

# ConsoleCollaborator mirrors what a bot does but with terminal prompts for
# human seats. Everything else at the table is played by the house bot.


def parse_action(raw: str, menu: ActionMenu) -> Action:
    """Turn a typed command into an action; ValueError carries the re-prompt text."""
    parts = raw.strip().lower().split()
    if not parts:
        raise ValueError("Enter an action (h for help)")

    verb = parts[0]
    if verb in ("h", "help", "?"):
        raise ValueError(HELP_TEXT)
    if verb in ("f", "fold"):
        return Action(ActionType.FOLD)
    if verb in ("k", "check"):
        if ActionType.CHECK not in menu.legal:
            raise ValueError(f"Cannot check, {menu.to_call} to call")
        return Action(ActionType.CHECK)
    if verb in ("c", "call"):
        if ActionType.CALL not in menu.legal:
            raise ValueError("Nothing to call")
        return Action(ActionType.CALL)
    if verb in ("r", "raise"):
        if len(parts) != 2:
            raise ValueError("Raise needs an amount, e.g. 'r 200'")
        try:
            amount = int(parts[1])
        except ValueError:
            raise ValueError(f"Invalid raise amount: {parts[1]}") from None
        if not menu.can_raise:
            raise ValueError("Not enough chips to raise")
        if not menu.min_raise <= amount <= menu.max_raise:
            raise ValueError(f"Raise must be between {menu.min_raise} and {menu.max_raise}")
        return Action(ActionType.RAISE, amount)
    raise ValueError(f"Unknown action '{parts[0]}' ({HELP_TEXT})")


def format_cards(labels: Iterable[str]) -> str:
    return cards_to_symbols(parse_cards(labels))


class ConsoleCollaborator(Collaborator):
    def __init__(
        self,
        engine: GameEngine,
        human_seats: Iterable[int] = (),
        input_fn: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.engine = engine
        self.human_seats = set(human_seats)
        self.input_fn = input_fn
        self.output = output
        self.rng = rng or random.Random()

    def request_action(self, seat: PlayerSeat, menu: ActionMenu) -> Action:
        if seat.seat not in self.human_seats:
            phase = self.engine.hand.phase if self.engine.hand else Phase.PRE_FLOP
            return baseline_strategy(seat.hole_cards, menu, phase, self.rng)

        self.output(self._status_line(seat, menu))
        while True:
            raw = self.input_fn(self._prompt(menu))
            try:
                return parse_action(raw, menu)
            except ValueError as exc:
                self.output(f"  {exc}")

    def notify(self, event: Dict[str, object]) -> None:
        line = self.render_event(event)
        if line:
            self.output(line)

    # Rendering -------------------------------------------------------
    def seat_label(self, seat_idx: object) -> str:
        seat = self.engine.seats[seat_idx] if isinstance(seat_idx, int) else None
        return seat.name if seat else f"Seat {seat_idx}"

    def render_event(self, event: Dict[str, object]) -> Optional[str]:
        ev = event.get("ev")
        seat = event.get("seat")
        if ev == "START_HAND":
            return f"\n=== Hand {event['hand_id']} (button: {self.seat_label(event['button'])}) ==="
        if ev == "POST_BLINDS":
            return (
                f"{self.seat_label(event['sb_seat'])} posts small blind {event['sb']}, "
                f"{self.seat_label(event['bb_seat'])} posts big blind {event['bb']}"
            )
        if ev == "HOLE_CARDS":
            if seat in self.human_seats:
                return f"{self.seat_label(seat)}'s hand: {format_cards(event['cards'])}"
            return None
        if ev == "FOLD":
            return f"{self.seat_label(seat)} folds"
        if ev == "FORCED_FOLD":
            return f"{self.seat_label(seat)} cannot cover {event['needed']} and folds"
        if ev == "CHECK":
            return f"{self.seat_label(seat)} checks"
        if ev == "CALL":
            return f"{self.seat_label(seat)} calls {event['amount']}"
        if ev == "RAISE":
            return f"{self.seat_label(seat)} raises by {event['raise_by']} to {event['to']}"
        if ev == "ILLEGAL_ACTION":
            return f"  {event['msg']}"
        if ev in ("FLOP", "TURN", "RIVER"):
            return f"{ev.capitalize()}: {self._board_text()}"
        if ev == "SHOWDOWN":
            rank = str(event["rank"]).replace("_", " ")
            return f"{self.seat_label(seat)} shows {format_cards(event['hand'])} ({rank})"
        if ev == "POT_AWARD":
            return f"{self.seat_label(seat)} wins {event['amount']}"
        if ev == "ELIMINATED":
            return f"{self.seat_label(seat)} is out of chips"
        if ev == "END_HAND":
            stacks = ", ".join(
                f"{self.seat_label(entry['seat'])}: {entry['stack']}" for entry in event["stacks"]
            )
            return f"Stacks: {stacks}"
        LOGGER.debug("Unhandled event %s", event)
        return None

    def _board_text(self) -> str:
        if not self.engine.hand:
            return ""
        return cards_to_symbols(self.engine.hand.community)

    def _status_line(self, seat: PlayerSeat, menu: ActionMenu) -> str:
        ctx = self.engine.hand
        board = cards_to_symbols(ctx.community) if ctx and ctx.community else "-"
        pot = ctx.pot if ctx else 0
        return (
            f"{seat.name} [{cards_to_symbols(seat.hole_cards)}] board: {board} | "
            f"pot {pot} | stack {seat.stack} | to call {menu.to_call}"
        )

    def _prompt(self, menu: ActionMenu) -> str:
        options: List[str] = []
        for action in menu.legal:
            if action == ActionType.RAISE:
                if menu.can_raise:
                    options.append(f"RAISE {menu.min_raise}-{menu.max_raise}")
            else:
                options.append(action.value)
        return "Action [" + "/".join(options) + "] (h=help): "
