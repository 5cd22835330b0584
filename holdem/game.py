from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .betting import BettingRound
from .cards import Card, Deck, build_deck, cards_to_labels
from .collaborator import Collaborator
from .errors import EngineError, IllegalAction
from .models import ActionMenu, ActionType, Phase, PlayerSeat, TableConfig
from .showdown import settle_showdown

LOGGER = logging.getLogger("holdem.engine")

# GameEngine keeps all table state in memory. No console I/O lives here, only
# poker rules, chip accounting and betting order.


@dataclass
class HandContext:
    # All mutable info about the current hand (deck, pot, betting round, etc.).
    hand_id: str
    seed: int
    button: int
    deck: Deck
    community: List[Card] = field(default_factory=list)
    phase: Phase = Phase.PRE_FLOP
    pot: int = 0
    betting: Optional[BettingRound] = None
    sb_seat: Optional[int] = None
    bb_seat: Optional[int] = None
    heads_up: bool = False
    winners: List[int] = field(default_factory=list)
    complete: bool = False
    pre_events: List[Dict[str, object]] = field(default_factory=list)


class GameEngine:
    """Texas Hold'em engine for a single table."""

    def __init__(self, config: TableConfig) -> None:
        self.config = config
        self.seats: List[Optional[PlayerSeat]] = [None] * config.seats
        self.button: Optional[int] = None
        self.hand_counter = 0
        self.hand: Optional[HandContext] = None

    # Seat management -------------------------------------------------

    def assign_seat(self, name: str) -> PlayerSeat:
        display = name.strip()
        if not display:
            raise ValueError("NAME_REQUIRED")

        existing = self._find_seat_by_name(display)
        if existing:
            return existing

        for idx in range(self.config.seats):
            if self.seats[idx] is None:
                seat = PlayerSeat(seat=idx, name=display, stack=self.config.starting_stack)
                self.seats[idx] = seat
                return seat

        raise RuntimeError("Table is full")

    def _find_seat_by_name(self, name: str) -> Optional[PlayerSeat]:
        key = name.casefold()
        for seat in self.seats:
            if seat and seat.name.casefold() == key:
                return seat
        return None

    def seating_order(self) -> List[int]:
        return [seat.seat for seat in self.seats if seat and seat.stack > 0]

    # Hand lifecycle --------------------------------------------------
    def can_start_hand(self) -> bool:
        return len(self.seating_order()) >= 2

    def start_hand(self, seed: Optional[int] = None) -> HandContext:
        if self.hand and not self.hand.complete:
            raise EngineError("Hand already in progress")
        if not self.can_start_hand():
            raise EngineError("Not enough active players to start a hand")

        for seat in self.seats:
            if seat:
                seat.reset_for_hand()

        if seed is None:
            seed = int(time.time() * 1000) & 0xFFFFFFFF
        deck = build_deck(seed)

        if self.button is None or not self._has_chips(self.button):
            self.button = self._next_with_chips(-1 if self.button is None else self.button)

        hand_id = f"H-{time.strftime('%Y%m%d')}-{self.hand_counter:05d}"
        self.hand_counter += 1

        ctx = HandContext(
            hand_id=hand_id,
            seed=seed,
            button=self.button,
            deck=deck,
            heads_up=len(self.seating_order()) == 2,
        )
        self.hand = ctx

        self._deal_hole_cards(ctx)
        self._post_blinds(ctx)
        self._start_betting_round(ctx, Phase.PRE_FLOP)
        LOGGER.info("Hand %s started, button seat %s, %s players", hand_id, ctx.button, len(self._in_hand()))
        return ctx

    def _deal_hole_cards(self, ctx: HandContext) -> None:
        ordered = self._in_hand_from(ctx.button + 1)
        for _ in range(2):
            for seat_idx in ordered:
                self.seats[seat_idx].hole_cards.append(ctx.deck.draw())
        for seat_idx in ordered:
            ctx.pre_events.append(
                {"ev": "HOLE_CARDS", "seat": seat_idx, "cards": cards_to_labels(self.seats[seat_idx].hole_cards)}
            )

    def _post_blinds(self, ctx: HandContext) -> None:
        if ctx.heads_up:
            sb_seat = ctx.button
            bb_seat = self._in_hand_from(ctx.button + 1)[0]
        else:
            sb_seat = self._in_hand_from(ctx.button + 1)[0]
            bb_seat = self._in_hand_from(sb_seat + 1)[0]
        sb_player = self.seats[sb_seat]
        bb_player = self.seats[bb_seat]
        assert sb_player and bb_player

        sb_posted = self._post(ctx, sb_player, self.config.sb)
        bb_posted = self._post(ctx, bb_player, self.config.bb)
        sb_player.is_small_blind = True
        bb_player.is_big_blind = True
        ctx.sb_seat = sb_seat
        ctx.bb_seat = bb_seat
        ctx.pre_events.append(
            {
                "ev": "POST_BLINDS",
                "sb_seat": sb_seat,
                "bb_seat": bb_seat,
                "sb": sb_posted,
                "bb": bb_posted,
            }
        )

    def _post(self, ctx: HandContext, seat: PlayerSeat, blind: int) -> int:
        # A short stack posts what it has.
        posted = seat.commit(min(seat.stack, blind))
        ctx.pot += posted
        return posted

    def _start_betting_round(self, ctx: HandContext, street: Phase) -> None:
        ctx.phase = street
        if street == Phase.PRE_FLOP:
            assert ctx.bb_seat is not None
            first = ctx.button if ctx.heads_up else ctx.bb_seat + 1
            current_bet = max(seat.committed for seat in self.seats if seat)
            ctx.betting = BettingRound(
                ctx,
                self.seats,
                street,
                first_to_act=first % self.config.seats,
                big_blind=self.config.bb,
                current_bet=current_bet,
                last_aggressor=ctx.bb_seat,
            )
            return

        for seat in self.seats:
            if seat:
                seat.reset_for_round()
        ctx.betting = BettingRound(
            ctx,
            self.seats,
            street,
            first_to_act=(ctx.button + 1) % self.config.seats,
            big_blind=self.config.bb,
        )

    # Action handling -------------------------------------------------
    def next_actor(self) -> Optional[int]:
        if not self.hand or self.hand.complete or self.hand.betting is None:
            return None
        return self.hand.betting.next_actor()

    def legal_actions(self, seat_idx: int) -> ActionMenu:
        ctx = self._require_hand()
        assert ctx.betting is not None
        return ctx.betting.legal_menu(seat_idx)

    def apply_action(self, seat_idx: int, action: ActionType, amount: Optional[int] = None) -> List[Dict[str, object]]:
        ctx = self._require_hand()
        assert ctx.betting is not None
        events = ctx.betting.apply_action(seat_idx, action, amount)
        events.extend(self._advance_after_action(ctx))
        return events

    def _advance_after_action(self, ctx: HandContext) -> List[Dict[str, object]]:
        betting = ctx.betting
        assert betting is not None
        if not betting.is_closed:
            return []
        if betting.hand_over:
            # Everyone else folded: no more cards, no evaluation.
            return self._settle(ctx)
        return self._advance_phase(ctx)

    def _advance_phase(self, ctx: HandContext) -> List[Dict[str, object]]:
        events: List[Dict[str, object]] = []
        if ctx.phase == Phase.PRE_FLOP:
            cards = self._reveal(ctx, 3)
            events.append({"ev": "FLOP", "cards": cards_to_labels(cards)})
            self._start_betting_round(ctx, Phase.FLOP)
        elif ctx.phase == Phase.FLOP:
            cards = self._reveal(ctx, 1)
            events.append({"ev": "TURN", "card": cards[0].label})
            self._start_betting_round(ctx, Phase.TURN)
        elif ctx.phase == Phase.TURN:
            cards = self._reveal(ctx, 1)
            events.append({"ev": "RIVER", "card": cards[0].label})
            self._start_betting_round(ctx, Phase.RIVER)
        else:
            events.extend(self._settle(ctx))
        return events

    def _reveal(self, ctx: HandContext, count: int) -> List[Card]:
        ctx.deck.burn()
        cards = ctx.deck.deal(count)
        ctx.community.extend(cards)
        return cards

    def _settle(self, ctx: HandContext) -> List[Dict[str, object]]:
        contenders = [self.seats[idx] for idx in self._active_seats()]
        result = settle_showdown(contenders, ctx.community, ctx.pot)
        ctx.pot = 0
        ctx.winners = list(result.winners)
        ctx.phase = Phase.SHOWDOWN
        ctx.complete = True
        events = list(result.events)

        for seat in self.seats:
            if seat is None:
                continue
            seat.committed = 0
            seat.total_in_pot = 0
            if seat.in_hand and seat.stack == 0:
                events.append({"ev": "ELIMINATED", "seat": seat.seat})

        self.button = self._next_with_chips(ctx.button)
        events.append({"ev": "END_HAND", **self.end_hand_payload()})
        LOGGER.info("Hand %s complete, winners %s", ctx.hand_id, ctx.winners)
        return events

    # Synchronous driver ----------------------------------------------
    def play_hand(self, collaborator: Collaborator, seed: Optional[int] = None) -> HandContext:
        """Run one full hand, blocking on the collaborator for every decision."""
        ctx = self.start_hand(seed)
        collaborator.notify({"ev": "START_HAND", **self.start_hand_payload(ctx)})
        for event in self.consume_pre_events():
            collaborator.notify(event)

        while not self.is_hand_complete():
            seat_idx = self.next_actor()
            if seat_idx is None:
                raise EngineError("Hand stalled without an actor")
            seat = self.seats[seat_idx]
            assert seat is not None
            decision = collaborator.request_action(seat, self.legal_actions(seat_idx))
            try:
                events = self.apply_action(seat_idx, decision.action, decision.amount)
            except IllegalAction as exc:
                LOGGER.warning("Rejected action from seat %s: %s", seat_idx, exc)
                collaborator.notify({"ev": "ILLEGAL_ACTION", "seat": seat_idx, "msg": str(exc)})
                continue
            for event in events:
                collaborator.notify(event)
        return ctx

    # Public/Snapshot helpers -----------------------------------------
    def start_hand_payload(self, ctx: HandContext) -> Dict[str, object]:
        return {
            "hand_id": ctx.hand_id,
            "seed": ctx.seed,
            "button": ctx.button,
            "stacks": [
                {"seat": seat_idx, "name": seat.name, "stack": seat.stack + seat.total_in_pot}
                for seat_idx, seat in enumerate(self.seats)
                if seat is not None
            ],
        }

    def consume_pre_events(self) -> List[Dict[str, object]]:
        if not self.hand:
            return []
        events = list(self.hand.pre_events)
        self.hand.pre_events.clear()
        return events

    def end_hand_payload(self) -> Dict[str, object]:
        ctx = self._require_hand()
        return {
            "hand_id": ctx.hand_id,
            "winners": list(ctx.winners),
            "stacks": [
                {"seat": idx, "stack": seat.stack}
                for idx, seat in enumerate(self.seats)
                if seat is not None
            ],
        }

    def is_hand_complete(self) -> bool:
        return bool(self.hand and self.hand.complete)

    def is_match_over(self) -> bool:
        return len(self.seating_order()) <= 1

    def match_result_payload(self) -> Dict[str, object]:
        active = [seat for seat in self.seats if seat and seat.stack > 0]
        winner = active[0] if len(active) == 1 else None
        return {
            "winner": {"seat": winner.seat, "name": winner.name} if winner else None,
            "final_stacks": [
                {"seat": seat.seat, "name": seat.name, "stack": seat.stack}
                for seat in self.seats
                if seat is not None
            ],
        }

    def total_chips(self) -> int:
        """Chips on the table, counting the pot of a hand in progress."""
        stacks = sum(seat.stack for seat in self.seats if seat)
        if self.hand and not self.hand.complete:
            stacks += self.hand.pot
        return stacks

    # Seat lookups ----------------------------------------------------
    def _require_hand(self) -> HandContext:
        if not self.hand:
            raise EngineError("Hand not in progress")
        return self.hand

    def _has_chips(self, seat_idx: int) -> bool:
        seat = self.seats[seat_idx]
        return bool(seat and seat.stack > 0)

    def _next_with_chips(self, start: int) -> int:
        for step in range(1, self.config.seats + 1):
            idx = (start + step) % self.config.seats
            if self._has_chips(idx):
                return idx
        raise EngineError("No seat with chips left")

    def _in_hand(self) -> List[int]:
        return [seat.seat for seat in self.seats if seat and seat.in_hand]

    def _in_hand_from(self, start: int) -> List[int]:
        ordered = []
        for step in range(self.config.seats):
            idx = (start + step) % self.config.seats
            seat = self.seats[idx]
            if seat and seat.is_active:
                ordered.append(idx)
        return ordered

    def _active_seats(self) -> List[int]:
        return [seat.seat for seat in self.seats if seat and seat.is_active]
