"""
Enumerations used throughout the game.
"""
from enum import Enum


class CardType(str, Enum):
    """Kinds of cards in the deck."""
    MONEY = "MONEY"
    PROPERTY = "PROPERTY"
    ACTION = "ACTION"
    RENT = "RENT"
    WILD = "WILD"


class PropertyColor(str, Enum):
    """Property color groups."""
    BROWN = "BROWN"
    LIGHT_BLUE = "LIGHT_BLUE"
    PINK = "PINK"
    ORANGE = "ORANGE"
    RED = "RED"
    YELLOW = "YELLOW"
    GREEN = "GREEN"
    DARK_BLUE = "DARK_BLUE"
    RAILROAD = "RAILROAD"
    UTILITY = "UTILITY"
    ANY = "ANY"  # Colorless wildcards played generically


class ActionKind(str, Enum):
    """Every action card identity in the deck."""
    DEAL_BREAKER = "DEAL_BREAKER"
    SLY_DEAL = "SLY_DEAL"
    FORCE_DEAL = "FORCE_DEAL"
    JUST_SAY_NO = "JUST_SAY_NO"
    DEBT_COLLECTOR = "DEBT_COLLECTOR"
    ITS_MY_BIRTHDAY = "ITS_MY_BIRTHDAY"
    PASS_GO = "PASS_GO"
    HOUSE = "HOUSE"
    HOTEL = "HOTEL"
    DOUBLE_THE_RENT = "DOUBLE_THE_RENT"


class GamePhase(str, Enum):
    """Current phase of the turn."""
    START_TURN = "START_TURN"
    PLAY_PHASE = "PLAY_PHASE"
    GAME_OVER = "GAME_OVER"


class MoveKind(str, Enum):
    """Moves a player may make with a card in hand."""
    BANK = "BANK"
    PROPERTY = "PROPERTY"
    ACTION_PLAY = "ACTION_PLAY"


class MultiplayerRole(str, Enum):
    """Which side of a networked game holds this copy of the state."""
    HOST = "HOST"
    JOINER = "JOINER"


class GameMode(str, Enum):
    """How the two seats are controlled."""
    VS_AI = "VS_AI"
    LOCAL = "LOCAL"
    HOST = "HOST"
    JOIN = "JOIN"


class MessageType(str, Enum):
    """Types of messages exchanged between the two peers."""
    # Connection
    CONNECT = "CONNECT"
    DISCONNECT = "DISCONNECT"

    # Replication
    STATE_UPDATE = "STATE_UPDATE"

    # Errors
    ERROR = "ERROR"
