"""
Card catalog and deck construction.
"""
import random
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, TypeVar

from shared.constants import ACTION_CARDS, MONEY_CARDS, PROPERTY_CARDS, WILD_CARDS
from shared.enums import ActionKind, CardType, PropertyColor

T = TypeVar("T")


@dataclass(frozen=True)
class Card:
    """A single card. Cards move between containers but never change."""

    id: str
    name: str
    card_type: CardType
    value: int
    color: Optional[PropertyColor] = None
    secondary_color: Optional[PropertyColor] = None  # For multi-color wildcards
    description: Optional[str] = None
    action: Optional[ActionKind] = None

    @property
    def is_placeable(self) -> bool:
        """Whether the card can be laid down as a property."""
        return self.card_type in (CardType.PROPERTY, CardType.WILD)

    @property
    def is_playable_action(self) -> bool:
        """Whether the card can be played for its effect."""
        return self.card_type in (CardType.ACTION, CardType.RENT)

    def to_dict(self) -> dict:
        """Convert card to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "card_type": self.card_type.value,
            "value": self.value,
            "color": self.color.value if self.color else None,
            "secondary_color": self.secondary_color.value if self.secondary_color else None,
            "description": self.description,
            "action": self.action.value if self.action else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Card":
        """Create card from dictionary."""
        return cls(
            id=data["id"],
            name=data["name"],
            card_type=CardType(data["card_type"]),
            value=data["value"],
            color=PropertyColor(data["color"]) if data.get("color") else None,
            secondary_color=(
                PropertyColor(data["secondary_color"])
                if data.get("secondary_color") else None
            ),
            description=data.get("description"),
            action=ActionKind(data["action"]) if data.get("action") else None,
        )


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


class _IdFactory:
    """Hands out unique `<slug>-<hex>` ids drawn from one random source."""

    def __init__(self, rng: random.Random):
        self._rng = rng
        self._seen: set[str] = set()

    def make(self, name: str) -> str:
        while True:
            card_id = f"{_slug(name)}-{self._rng.getrandbits(36):09x}"
            if card_id not in self._seen:
                self._seen.add(card_id)
                return card_id


def build_deck(rng: Optional[random.Random] = None) -> List[Card]:
    """
    Build the full, unshuffled multiset of cards for one game.

    Args:
        rng: Random source used for card ids (seed it for reproducible ids)

    Returns:
        Fresh list of cards in catalog order
    """
    ids = _IdFactory(rng or random.Random())
    deck: List[Card] = []

    for value, count in MONEY_CARDS:
        name = f"{value}M"
        deck.extend(
            Card(ids.make(name), name, CardType.MONEY, value)
            for _ in range(count)
        )

    for kind, name, value, count, description in ACTION_CARDS:
        deck.extend(
            Card(
                ids.make(name), name, CardType.ACTION, value,
                description=description,
                action=ActionKind(kind),
            )
            for _ in range(count)
        )

    for name, color, value, count in PROPERTY_CARDS:
        deck.extend(
            Card(ids.make(name), name, CardType.PROPERTY, value, color=PropertyColor(color))
            for _ in range(count)
        )

    for name, primary, secondary, value in WILD_CARDS:
        deck.append(Card(
            ids.make(name), name, CardType.WILD, value,
            color=PropertyColor(primary),
            secondary_color=PropertyColor(secondary),
        ))

    return deck


def shuffle(cards: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """
    Fisher-Yates shuffle.

    Walks from the last index down to 1, swapping each element with a
    uniformly chosen element at or below it. The input is left untouched.
    """
    rng = rng or random.Random()
    result = list(cards)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result
