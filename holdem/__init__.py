"""Single-table Texas Hold'em engine: cards, hand evaluation, betting and settlement."""

from .betting import BettingRound, RoundState
from .cards import Card, Deck, RANKS, SUITS, build_deck, parse_cards, parse_label
from .collaborator import Collaborator
from .errors import DeckExhausted, EngineError, HoldemError, IllegalAction, InsufficientChips
from .evaluator import HandRank, HandValue, compare_hands, evaluate_hand
from .game import GameEngine, HandContext
from .models import Action, ActionMenu, ActionType, Phase, PlayerSeat, TableConfig
from .showdown import ShowdownResult, settle_showdown, split_pot

__all__ = [
    "BettingRound",
    "RoundState",
    "Card",
    "Deck",
    "RANKS",
    "SUITS",
    "build_deck",
    "parse_cards",
    "parse_label",
    "Collaborator",
    "DeckExhausted",
    "EngineError",
    "HoldemError",
    "IllegalAction",
    "InsufficientChips",
    "HandRank",
    "HandValue",
    "compare_hands",
    "evaluate_hand",
    "GameEngine",
    "HandContext",
    "Action",
    "ActionMenu",
    "ActionType",
    "Phase",
    "PlayerSeat",
    "TableConfig",
    "ShowdownResult",
    "settle_showdown",
    "split_pot",
]
