"""
Game engine package.
"""
from .cards import Card, build_deck, shuffle
from .player import Player, PropertySet
from .ledger import LedgerError, add_to_set, remove_top_of
from .settlement import Settlement, settle_debt
from .state import GameState
from .rules import ActionResult, ValidationResult, validate_move
from .game import (
    ACTION_EFFECTS, check_win, end_turn, execute_move, new_game, start_turn
)

__all__ = [
    "Card",
    "build_deck",
    "shuffle",
    "Player",
    "PropertySet",
    "LedgerError",
    "add_to_set",
    "remove_top_of",
    "Settlement",
    "settle_debt",
    "GameState",
    "ActionResult",
    "ValidationResult",
    "validate_move",
    "ACTION_EFFECTS",
    "check_win",
    "end_turn",
    "execute_move",
    "new_game",
    "start_turn",
]
