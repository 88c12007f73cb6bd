"""
Player state and property sets.
"""
from dataclasses import dataclass, field
from typing import Tuple

from shared.constants import SET_LIMITS
from shared.enums import PropertyColor

from .cards import Card


@dataclass(frozen=True)
class PropertySet:
    """A player's cards of one color, oldest first."""

    color: PropertyColor
    cards: Tuple[Card, ...] = ()

    @property
    def required_size(self) -> int:
        """Number of cards needed to complete this color."""
        return SET_LIMITS[self.color.value]

    @property
    def is_complete(self) -> bool:
        """Check if the set has reached its color's threshold."""
        return len(self.cards) >= self.required_size

    @property
    def is_empty(self) -> bool:
        return not self.cards

    def to_dict(self) -> dict:
        return {
            "color": self.color.value,
            "cards": [card.to_dict() for card in self.cards],
            "is_complete": self.is_complete,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PropertySet":
        # is_complete is derived, so the transmitted value is ignored
        return cls(
            color=PropertyColor(data["color"]),
            cards=tuple(Card.from_dict(c) for c in data["cards"]),
        )


@dataclass(frozen=True)
class Player:
    """Represents a player in the game."""

    id: str
    name: str
    is_ai: bool = False
    hand: Tuple[Card, ...] = ()
    bank: Tuple[Card, ...] = ()
    properties: Tuple[PropertySet, ...] = field(default_factory=tuple)

    def has_card(self, card_id: str) -> bool:
        """Check if a card is in the player's hand."""
        return any(card.id == card_id for card in self.hand)

    def find_in_hand(self, card_id: str) -> Card | None:
        for card in self.hand:
            if card.id == card_id:
                return card
        return None

    @property
    def bank_total(self) -> int:
        """Face value of everything in the bank."""
        return sum(card.value for card in self.bank)

    @property
    def property_count(self) -> int:
        return sum(len(prop_set.cards) for prop_set in self.properties)

    @property
    def complete_sets(self) -> int:
        return sum(1 for prop_set in self.properties if prop_set.is_complete)

    def to_dict(self) -> dict:
        """Convert player to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "is_ai": self.is_ai,
            "hand": [card.to_dict() for card in self.hand],
            "bank": [card.to_dict() for card in self.bank],
            "properties": [prop_set.to_dict() for prop_set in self.properties],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Player":
        """Create player from dictionary."""
        return cls(
            id=data["id"],
            name=data["name"],
            is_ai=data.get("is_ai", False),
            hand=tuple(Card.from_dict(c) for c in data["hand"]),
            bank=tuple(Card.from_dict(c) for c in data["bank"]),
            properties=tuple(PropertySet.from_dict(p) for p in data["properties"]),
        )
