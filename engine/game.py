"""
Turn and action state machine - ties all components together.

Every entry point takes a GameState and returns a GameState. An illegal
call returns the very object it was given.
"""
import logging
import random
from dataclasses import replace
from typing import Callable, Dict, Optional, Sequence

from shared.constants import (
    ACTIONS_PER_TURN, BIRTHDAY_AMOUNT, DEBT_COLLECTOR_AMOUNT,
    EMPTY_HAND_DRAW, PASS_GO_DRAW, SETS_TO_WIN, STARTING_HAND_SIZE, TURN_DRAW
)
from shared.enums import ActionKind, GamePhase, MoveKind, MultiplayerRole

from .cards import Card, build_deck, shuffle
from .ledger import add_to_set, first_incomplete_set, move_top_card
from .player import Player
from .rules import validate_end_turn, validate_move, validate_start_turn
from .settlement import settle_debt
from .state import GameState


logger = logging.getLogger(__name__)

GAME_STARTED_LOG = "Game started! Master the market."

# Resolves an action card that has already left the active player's hand
ActionEffect = Callable[[GameState, Card], GameState]


# =========== Setup ===========

def new_game(
    player_names: Sequence[str],
    ai_seats: Sequence[bool] = (False, False),
    multiplayer_role: Optional[MultiplayerRole] = None,
    rng: Optional[random.Random] = None
) -> GameState:
    """
    Create a game: shuffle a fresh deck and deal a starting hand to both players.

    Args:
        player_names: Display names for seats 0 and 1
        ai_seats: Which seats are controlled by the AI
        multiplayer_role: Tag for networked games
        rng: Random source for card ids and the shuffle
    """
    if len(player_names) != 2:
        raise ValueError("Monopoly Deal is played by exactly two players")

    rng = rng or random.Random()
    deck = shuffle(build_deck(rng), rng)

    players = []
    for seat, name in enumerate(player_names):
        hand = tuple(deck[:STARTING_HAND_SIZE])
        del deck[:STARTING_HAND_SIZE]
        players.append(Player(
            id=f"p{seat + 1}",
            name=name,
            is_ai=bool(ai_seats[seat]),
            hand=hand,
        ))

    logger.info(f"New game: {player_names[0]} vs {player_names[1]} ({len(deck)} cards in deck)")

    return GameState(
        players=tuple(players),
        active_player_index=0,
        deck=tuple(deck),
        phase=GamePhase.START_TURN,
        actions_remaining=ACTIONS_PER_TURN,
        logs=(GAME_STARTED_LOG,),
        multiplayer_role=multiplayer_role,
    )


def _draw(state: GameState, count: int) -> GameState:
    """Move up to `count` cards from the deck into the active hand."""
    drawn = state.deck[:count]
    player = state.active_player
    player = replace(player, hand=player.hand + drawn)
    return replace(state, deck=state.deck[count:]).with_players(player, state.opponent)


# =========== Turn Management ===========

def start_turn(state: GameState) -> GameState:
    """Draw for the active player and open the play phase."""
    validation = validate_start_turn(state)
    if not validation.valid:
        logger.debug(f"start_turn ignored: {validation.message}")
        return state

    player = state.active_player
    draw_count = EMPTY_HAND_DRAW if not player.hand else TURN_DRAW

    new_state = _draw(state, draw_count)
    new_state = replace(
        new_state,
        actions_remaining=ACTIONS_PER_TURN,
        phase=GamePhase.PLAY_PHASE,
    )
    return new_state.with_log(f"{player.name} draws {draw_count} cards.")


def end_turn(state: GameState) -> GameState:
    """Pass play to the other player."""
    validation = validate_end_turn(state)
    if not validation.valid:
        logger.debug(f"end_turn ignored: {validation.message}")
        return state

    next_index = state.opponent_index
    new_state = replace(
        state,
        active_player_index=next_index,
        actions_remaining=ACTIONS_PER_TURN,
        phase=GamePhase.START_TURN,
    )
    return new_state.with_log(f"Turn change: {state.players[next_index].name}'s turn.")


def check_win(state: GameState) -> GameState:
    """Declare the active player the winner if they hold enough complete sets."""
    player = state.active_player
    if player.complete_sets >= SETS_TO_WIN:
        logger.info(f"{player.name} wins with {player.complete_sets} complete sets")
        return replace(state, winner=player.name, phase=GamePhase.GAME_OVER)
    return state


# =========== Action Effects ===========

def _pass_go(state: GameState, card: Card) -> GameState:
    before = len(state.active_player.hand)
    new_state = _draw(state, PASS_GO_DRAW)
    drawn = len(new_state.active_player.hand) - before
    return new_state.with_log(f"{state.active_player.name} played {card.name}: +{drawn} cards.")


def _collect(amount: int) -> ActionEffect:
    """Effect that makes the opponent pay the active player."""

    def effect(state: GameState, card: Card) -> GameState:
        collector = state.active_player
        debtor = state.opponent
        state = state.with_log(f"{collector.name} played {card.name}: {debtor.name} owes {amount}M.")
        settlement = settle_debt(debtor, collector, amount, state.logs)
        return replace(state, logs=settlement.logs).with_players(
            settlement.payee, settlement.payer
        )

    return effect


def _sly_deal(state: GameState, card: Card) -> GameState:
    thief = state.active_player
    victim = state.opponent
    set_index = first_incomplete_set(victim)

    if set_index == -1:
        return state.with_log(f"{thief.name} played {card.name}, but there was nothing to steal.")

    victim, thief, stolen = move_top_card(victim, thief, set_index)
    return state.with_players(thief, victim).with_log(
        f"{thief.name} stole {stolen.name} with {card.name}."
    )


def _no_effect(state: GameState, card: Card) -> GameState:
    return state.with_log(f"{state.active_player.name} played {card.name}.")


ACTION_EFFECTS: Dict[ActionKind, ActionEffect] = {
    ActionKind.PASS_GO: _pass_go,
    ActionKind.DEBT_COLLECTOR: _collect(DEBT_COLLECTOR_AMOUNT),
    ActionKind.ITS_MY_BIRTHDAY: _collect(BIRTHDAY_AMOUNT),
    ActionKind.SLY_DEAL: _sly_deal,
    ActionKind.DEAL_BREAKER: _no_effect,
    ActionKind.FORCE_DEAL: _no_effect,
    ActionKind.JUST_SAY_NO: _no_effect,
    ActionKind.HOUSE: _no_effect,
    ActionKind.HOTEL: _no_effect,
    ActionKind.DOUBLE_THE_RENT: _no_effect,
}


# =========== Moves ===========

def _remove_from_hand(state: GameState, card: Card) -> GameState:
    player = state.active_player
    hand = tuple(c for c in player.hand if c.id != card.id)
    return state.with_players(replace(player, hand=hand), state.opponent)


def _bank(state: GameState, card: Card) -> GameState:
    state = _remove_from_hand(state, card)
    player = state.active_player
    player = replace(player, bank=player.bank + (card,))
    return state.with_players(player, state.opponent).with_log(
        f"{player.name} banked {card.name} ({card.value}M)."
    )


def _place_property(state: GameState, card: Card) -> GameState:
    state = _remove_from_hand(state, card)
    player = add_to_set(state.active_player, card)
    return state.with_players(player, state.opponent).with_log(
        f"{player.name} deployed {card.name}."
    )


def _play_action(state: GameState, card: Card) -> GameState:
    state = _remove_from_hand(state, card)
    effect = ACTION_EFFECTS[card.action] if card.action else _no_effect
    state = effect(state, card)
    return replace(state, discard_pile=state.discard_pile + (card,))


MOVE_HANDLERS: Dict[MoveKind, ActionEffect] = {
    MoveKind.BANK: _bank,
    MoveKind.PROPERTY: _place_property,
    MoveKind.ACTION_PLAY: _play_action,
}


def execute_move(state: GameState, kind: MoveKind | str, card_id: str) -> GameState:
    """
    Play a card from the active player's hand.

    Args:
        state: Current state
        kind: BANK, PROPERTY or ACTION_PLAY
        card_id: Id of a card in the active player's hand

    Returns:
        The new state, or `state` itself if the move is not legal
    """
    validation = validate_move(state, kind, card_id)
    if not validation.valid:
        logger.debug(f"Move {kind} {card_id} ignored: {validation.message}")
        return state

    card = state.active_player.find_in_hand(card_id)
    new_state = MOVE_HANDLERS[MoveKind(kind)](state, card)
    new_state = replace(new_state, actions_remaining=state.actions_remaining - 1)
    return check_win(new_state)
