"""
Move-suggestion services for the AI-controlled player.

A suggester looks at a state snapshot and proposes an ordered list of
moves. Nothing it returns is trusted: the turn runner re-checks every move
and the engine validates it again.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from engine import Card, GameState
from shared.enums import ActionKind, CardType, MoveKind


logger = logging.getLogger(__name__)

END_TURN = "END_TURN"


class SuggestionError(Exception):
    """The suggestion service could not produce a move list."""


@dataclass(frozen=True)
class Move:
    """One proposed move: a card move, or END_TURN (no card)."""
    action: str
    card_id: Optional[str] = None

    @property
    def is_end_turn(self) -> bool:
        return self.action == END_TURN

    @property
    def kind(self) -> Optional[MoveKind]:
        try:
            return MoveKind(self.action)
        except ValueError:
            return None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"action": self.action}
        if self.card_id:
            data["card_id"] = self.card_id
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Move":
        """Build a move from an untrusted dict; accepts cardId as an alias."""
        action = str(data.get("action", "")).upper()
        card_id = data.get("card_id") or data.get("cardId")
        return cls(action=action, card_id=str(card_id) if card_id else None)


def parse_moves(raw: Iterable[Any]) -> List[Move]:
    """
    Turn untrusted suggestion output into Moves.

    Entries that are not dicts, name an unknown action, or lack a card id
    for a card move are dropped.
    """
    moves: List[Move] = []
    for entry in raw:
        if not isinstance(entry, dict):
            logger.debug(f"Dropping non-dict suggestion: {entry!r}")
            continue
        move = Move.from_dict(entry)
        if move.is_end_turn or (move.kind is not None and move.card_id):
            moves.append(move)
        else:
            logger.debug(f"Dropping malformed suggestion: {entry!r}")
    return moves


class MoveSuggester(ABC):
    """
    Abstract base class for move-suggestion services.

    Implementations receive a read-only snapshot and return moves for the
    active player, in the order they should be tried.
    """

    @abstractmethod
    async def suggest(self, state: GameState) -> List[Move]:
        """
        Propose moves for the active player.

        Raises:
            SuggestionError: If no suggestion could be produced
        """


class HeuristicSuggester(MoveSuggester):
    """
    Scripted opponent.

    Priority order:
    1. Lay down properties and wildcards
    2. Play Pass Go, then the action cards that take something from the opponent
    3. Bank the most valuable remaining cards
    4. End turn
    """

    ACTION_PRIORITY = {
        ActionKind.PASS_GO: 0,
        ActionKind.SLY_DEAL: 1,
        ActionKind.DEBT_COLLECTOR: 2,
        ActionKind.ITS_MY_BIRTHDAY: 3,
    }

    async def suggest(self, state: GameState) -> List[Move]:
        player = state.active_player
        budget = state.actions_remaining
        moves: List[Move] = []

        properties = [c for c in player.hand if c.is_placeable]
        actions = sorted(
            (c for c in player.hand if c.action in self.ACTION_PRIORITY),
            key=lambda c: self.ACTION_PRIORITY[c.action],
        )
        if any(c.action == ActionKind.SLY_DEAL for c in actions) and not self._can_steal(state):
            actions = [c for c in actions if c.action != ActionKind.SLY_DEAL]

        used = set()
        for card in properties:
            moves.append(Move(MoveKind.PROPERTY.value, card.id))
            used.add(card.id)
        for card in actions:
            moves.append(Move(MoveKind.ACTION_PLAY.value, card.id))
            used.add(card.id)

        bankable = sorted(
            (c for c in player.hand if c.id not in used and self._worth_banking(c)),
            key=lambda c: c.value,
            reverse=True,
        )
        for card in bankable:
            moves.append(Move(MoveKind.BANK.value, card.id))

        moves = moves[:budget]
        moves.append(Move(END_TURN))
        return moves

    @staticmethod
    def _can_steal(state: GameState) -> bool:
        return any(
            not prop_set.is_complete and prop_set.cards
            for prop_set in state.opponent.properties
        )

    @staticmethod
    def _worth_banking(card: Card) -> bool:
        return card.card_type in (CardType.MONEY, CardType.ACTION, CardType.RENT)
