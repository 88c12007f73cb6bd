"""
Rule enforcement and move validation.
"""
from dataclasses import dataclass
from enum import Enum, auto

from shared.enums import GamePhase, MoveKind

from .state import GameState


class ActionResult(Enum):
    """Result of attempting an action."""
    SUCCESS = auto()
    WRONG_PHASE = auto()
    NO_ACTIONS_LEFT = auto()
    GAME_ALREADY_WON = auto()
    CARD_NOT_IN_HAND = auto()
    WRONG_CARD_TYPE = auto()
    UNKNOWN_MOVE = auto()


@dataclass
class ValidationResult:
    """Result of validating an action."""
    valid: bool
    result: ActionResult
    message: str = ""

    @classmethod
    def success(cls, message: str = "") -> "ValidationResult":
        return cls(valid=True, result=ActionResult.SUCCESS, message=message)

    @classmethod
    def failure(cls, result: ActionResult, message: str = "") -> "ValidationResult":
        return cls(valid=False, result=result, message=message)


def validate_start_turn(state: GameState) -> ValidationResult:
    """Validate if the active player can draw for a new turn."""
    if state.phase != GamePhase.START_TURN:
        return ValidationResult.failure(
            ActionResult.WRONG_PHASE,
            f"Cannot start a turn during {state.phase.value}"
        )
    return ValidationResult.success()


def validate_end_turn(state: GameState) -> ValidationResult:
    """Validate if the active player can end their turn."""
    if state.phase != GamePhase.PLAY_PHASE:
        return ValidationResult.failure(
            ActionResult.WRONG_PHASE,
            f"Cannot end a turn during {state.phase.value}"
        )
    return ValidationResult.success()


def validate_move(state: GameState, kind: MoveKind | str, card_id: str) -> ValidationResult:
    """
    Validate a card move for the active player.

    Checks run in the same order as the turn rules read: phase, action
    budget, winner, card ownership, then card type for the chosen move.
    """
    if state.phase != GamePhase.PLAY_PHASE:
        return ValidationResult.failure(
            ActionResult.WRONG_PHASE,
            f"Moves are only allowed during {GamePhase.PLAY_PHASE.value}"
        )

    if state.actions_remaining <= 0:
        return ValidationResult.failure(
            ActionResult.NO_ACTIONS_LEFT,
            "No actions remaining this turn"
        )

    if state.winner:
        return ValidationResult.failure(
            ActionResult.GAME_ALREADY_WON,
            f"{state.winner} has already won"
        )

    try:
        kind = MoveKind(kind)
    except ValueError:
        return ValidationResult.failure(ActionResult.UNKNOWN_MOVE, f"Unknown move {kind!r}")

    card = state.active_player.find_in_hand(card_id)
    if card is None:
        return ValidationResult.failure(
            ActionResult.CARD_NOT_IN_HAND,
            f"Card {card_id} is not in {state.active_player.name}'s hand"
        )

    if kind == MoveKind.PROPERTY and not card.is_placeable:
        return ValidationResult.failure(
            ActionResult.WRONG_CARD_TYPE,
            f"{card.name} is not a property"
        )

    if kind == MoveKind.ACTION_PLAY and not card.is_playable_action:
        return ValidationResult.failure(
            ActionResult.WRONG_CARD_TYPE,
            f"{card.name} is not an action card"
        )

    return ValidationResult.success()
