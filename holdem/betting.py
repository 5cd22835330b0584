from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Set

from .errors import EngineError, IllegalAction, InsufficientChips
from .models import ActionMenu, ActionType, Phase, PlayerSeat

if TYPE_CHECKING:
    from .game import HandContext

LOGGER = logging.getLogger("holdem.betting")

# One BettingRound drives a single street. Seats are addressed by index into
# the table's seat list; the round never holds on to players beyond that list.


@dataclass
class RoundState:
    street: Phase
    current_bet: int = 0
    last_aggressor: Optional[int] = None
    first_to_act: Optional[int] = None


class BettingRound:
    """Turn order, legal menus and chip movement for one street."""

    def __init__(
        self,
        ctx: "HandContext",
        seats: List[Optional[PlayerSeat]],
        street: Phase,
        first_to_act: int,
        big_blind: int,
        current_bet: int = 0,
        last_aggressor: Optional[int] = None,
    ) -> None:
        self.ctx = ctx
        self.seats = seats
        self.big_blind = big_blind
        self.state = RoundState(
            street=street,
            current_bet=current_bet,
            last_aggressor=last_aggressor,
            first_to_act=first_to_act,
        )
        # Seats that still owe a response to the current bet level.
        self.pending: Set[int] = set(self.active_seats())
        self.cursor: Optional[int] = None
        if not self.is_closed:
            self.cursor = self._seek(first_to_act, include_start=True)
            self.state.first_to_act = self.cursor

    # State -----------------------------------------------------------
    def active_seats(self) -> List[int]:
        return [seat.seat for seat in self.seats if seat and seat.is_active]

    @property
    def hand_over(self) -> bool:
        return len(self.active_seats()) <= 1

    @property
    def is_closed(self) -> bool:
        if self.hand_over:
            return True
        return not self.pending and self._bets_settled()

    def _bets_settled(self) -> bool:
        return all(self.seats[idx].committed == self.state.current_bet for idx in self.active_seats())

    def next_actor(self) -> Optional[int]:
        return None if self.is_closed else self.cursor

    # Actions ---------------------------------------------------------
    def legal_menu(self, seat_idx: int) -> ActionMenu:
        seat = self._require_active(seat_idx)
        to_call = max(self.state.current_bet - seat.committed, 0)
        legal = [ActionType.FOLD, ActionType.CHECK if to_call == 0 else ActionType.CALL, ActionType.RAISE]
        return ActionMenu(
            legal=legal,
            to_call=to_call,
            min_raise=max(to_call, self.big_blind),
            max_raise=max(seat.stack - to_call, 0),
            stack=seat.stack,
        )

    def apply_action(self, seat_idx: int, action: ActionType, amount: Optional[int] = None) -> List[Dict[str, object]]:
        if self.is_closed:
            raise EngineError("Betting round is closed")
        seat = self._require_active(seat_idx)
        if seat_idx != self.cursor:
            raise IllegalAction(f"Seat {seat_idx} acted out of turn; waiting on seat {self.cursor}")

        to_call = max(self.state.current_bet - seat.committed, 0)
        events: List[Dict[str, object]] = []

        if action == ActionType.FOLD:
            self._fold(seat)
            events.append({"ev": "FOLD", "seat": seat_idx})
        elif action == ActionType.CHECK:
            if to_call > 0:
                raise IllegalAction("Cannot check when facing a bet")
            events.append({"ev": "CHECK", "seat": seat_idx})
        elif action == ActionType.CALL:
            if to_call <= 0:
                raise IllegalAction("Nothing to call")
            try:
                self._commit(seat, to_call)
            except InsufficientChips as exc:
                events.append(self._force_fold(seat, exc))
            else:
                events.append({"ev": "CALL", "seat": seat_idx, "amount": to_call})
        elif action == ActionType.RAISE:
            if amount is None:
                raise IllegalAction("Raise requires amount")
            min_raise = max(to_call, self.big_blind)
            if amount < min_raise:
                raise IllegalAction(f"Raise below minimum of {min_raise}")
            try:
                self._commit(seat, to_call + amount)
            except InsufficientChips as exc:
                events.append(self._force_fold(seat, exc))
            else:
                self.state.current_bet = seat.committed
                self.state.last_aggressor = seat_idx
                # A raise re-opens action for everyone else still in the hand.
                self.pending = {idx for idx in self.active_seats() if idx != seat_idx}
                events.append(
                    {
                        "ev": "RAISE",
                        "seat": seat_idx,
                        "amount": to_call + amount,
                        "raise_by": amount,
                        "to": seat.committed,
                    }
                )
        else:
            raise IllegalAction(f"Unsupported action {action}")

        LOGGER.debug("%s seat %s %s %s", self.state.street.value, seat_idx, action, amount)
        self.pending.discard(seat_idx)
        self._advance()
        return events

    def _commit(self, seat: PlayerSeat, amount: int) -> None:
        seat.commit(amount)
        self.ctx.pot += amount

    def _fold(self, seat: PlayerSeat) -> None:
        seat.has_folded = True
        self.pending.discard(seat.seat)

    def _force_fold(self, seat: PlayerSeat, exc: InsufficientChips) -> Dict[str, object]:
        LOGGER.warning("Forcing fold for seat %s: %s", seat.seat, exc)
        self._fold(seat)
        return {
            "ev": "FORCED_FOLD",
            "seat": seat.seat,
            "reason": "INSUFFICIENT_CHIPS",
            "needed": exc.needed,
            "stack": exc.stack,
        }

    # Turn order ------------------------------------------------------
    def _advance(self) -> None:
        if self.is_closed:
            self.cursor = None
            return
        assert self.cursor is not None
        self.cursor = self._seek(self.cursor, include_start=False)

    def _seek(self, start: int, include_start: bool) -> int:
        count = len(self.seats)
        offset = 0 if include_start else 1
        for step in range(count):
            idx = (start + offset + step) % count
            seat = self.seats[idx]
            if seat and seat.is_active and idx in self.pending:
                return idx
        raise EngineError("No eligible seat left to act")

    def _require_active(self, seat_idx: int) -> PlayerSeat:
        if not 0 <= seat_idx < len(self.seats):
            raise EngineError(f"Seat {seat_idx} does not exist")
        seat = self.seats[seat_idx]
        if seat is None or not seat.is_active:
            raise EngineError("Seat not active")
        return seat
