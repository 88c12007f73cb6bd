"""
Game state - the immutable aggregate handed between engine calls.
"""
import json
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from shared.enums import GamePhase, MultiplayerRole

from .cards import Card
from .player import Player


@dataclass(frozen=True)
class GameState:
    """
    Complete state of one game.

    A new GameState is produced for every accepted move; callers holding an
    older value keep seeing exactly what they had.
    """

    players: Tuple[Player, Player]
    active_player_index: int = 0
    deck: Tuple[Card, ...] = ()
    discard_pile: Tuple[Card, ...] = ()
    phase: GamePhase = GamePhase.START_TURN
    actions_remaining: int = 3
    logs: Tuple[str, ...] = ()  # Newest first
    winner: Optional[str] = None
    multiplayer_role: Optional[MultiplayerRole] = None

    @property
    def active_player(self) -> Player:
        return self.players[self.active_player_index]

    @property
    def opponent_index(self) -> int:
        return 1 - self.active_player_index

    @property
    def opponent(self) -> Player:
        return self.players[self.opponent_index]

    @property
    def is_game_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    def with_players(self, active: Player, opponent: Player) -> "GameState":
        """Return a copy with both players replaced, keeping seat order."""
        players = [None, None]
        players[self.active_player_index] = active
        players[self.opponent_index] = opponent
        return replace(self, players=tuple(players))

    def with_log(self, *lines: str) -> "GameState":
        """Return a copy with lines prepended, the last argument ending up newest."""
        logs = self.logs
        for line in lines:
            logs = (line,) + logs
        return replace(self, logs=logs)

    # =========== Serialization ===========

    def to_dict(self) -> dict:
        """Convert game state to dictionary for transmission."""
        return {
            "players": [player.to_dict() for player in self.players],
            "active_player_index": self.active_player_index,
            "deck": [card.to_dict() for card in self.deck],
            "discard_pile": [card.to_dict() for card in self.discard_pile],
            "phase": self.phase.value,
            "actions_remaining": self.actions_remaining,
            "logs": list(self.logs),
            "winner": self.winner,
            "multiplayer_role": self.multiplayer_role.value if self.multiplayer_role else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GameState":
        """Create game state from dictionary."""
        players = tuple(Player.from_dict(p) for p in data["players"])
        if len(players) != 2:
            raise ValueError(f"Expected 2 players, got {len(players)}")

        role = data.get("multiplayer_role")
        return cls(
            players=players,
            active_player_index=data["active_player_index"],
            deck=tuple(Card.from_dict(c) for c in data["deck"]),
            discard_pile=tuple(Card.from_dict(c) for c in data.get("discard_pile", [])),
            phase=GamePhase(data["phase"]),
            actions_remaining=data["actions_remaining"],
            logs=tuple(data.get("logs", [])),
            winner=data.get("winner"),
            multiplayer_role=MultiplayerRole(role) if role else None,
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> "GameState":
        return cls.from_dict(json.loads(json_str))
