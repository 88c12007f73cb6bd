"""
Property ledger - operations on a player's color-grouped holdings.

Every function returns a new Player; the one passed in is never touched.
"""
from dataclasses import replace
from typing import Tuple

from shared.enums import PropertyColor

from .cards import Card
from .player import Player, PropertySet


class LedgerError(LookupError):
    """Raised when a property set index does not name a non-empty set."""


def set_color_for(card: Card) -> PropertyColor:
    """Color of the set a card is filed under."""
    return card.color or PropertyColor.ANY


def find_set_index(player: Player, color: PropertyColor) -> int:
    """Index of the player's set for a color, or -1."""
    for index, prop_set in enumerate(player.properties):
        if prop_set.color == color:
            return index
    return -1


def add_to_set(player: Player, card: Card) -> Player:
    """
    File a card under its color, creating the set if needed.

    Args:
        player: Owner of the property sets
        card: Card to append (placed last, so it is the next one removed)

    Returns:
        Updated player
    """
    color = set_color_for(card)
    properties = list(player.properties)
    index = find_set_index(player, color)

    if index == -1:
        properties.append(PropertySet(color=color, cards=(card,)))
    else:
        existing = properties[index]
        properties[index] = replace(existing, cards=existing.cards + (card,))

    return replace(player, properties=tuple(properties))


def remove_top_of(player: Player, set_index: int) -> Tuple[Player, Card]:
    """
    Pop the most recently added card of a set.

    An emptied set is removed from the player's properties.

    Returns:
        Tuple of (updated player, removed card)

    Raises:
        LedgerError: If the index is out of range or the set is empty
    """
    if not 0 <= set_index < len(player.properties):
        raise LedgerError(f"No property set at index {set_index}")

    prop_set = player.properties[set_index]
    if prop_set.is_empty:
        raise LedgerError(f"Property set {prop_set.color.value} is empty")

    card = prop_set.cards[-1]
    properties = list(player.properties)
    remaining = prop_set.cards[:-1]

    if remaining:
        properties[set_index] = replace(prop_set, cards=remaining)
    else:
        del properties[set_index]

    return replace(player, properties=tuple(properties)), card


def first_non_empty_set(player: Player) -> int:
    """Index of the first set holding cards, or -1."""
    for index, prop_set in enumerate(player.properties):
        if not prop_set.is_empty:
            return index
    return -1


def first_incomplete_set(player: Player) -> int:
    """Index of the first set that can still be stolen from, or -1."""
    for index, prop_set in enumerate(player.properties):
        if not prop_set.is_complete and not prop_set.is_empty:
            return index
    return -1


def move_top_card(
    source: Player,
    target: Player,
    set_index: int
) -> Tuple[Player, Player, Card]:
    """
    Move the top card of one of source's sets into target's matching set.

    Returns:
        Tuple of (updated source, updated target, moved card)
    """
    source, card = remove_top_of(source, set_index)
    target = add_to_set(target, card)
    return source, target, card


def complete_set_count(player: Player) -> int:
    """Number of complete sets the player holds."""
    return player.complete_sets
