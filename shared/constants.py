"""
Game constants for Monopoly Deal.
All monetary values are in millions (M).
"""

# Turn structure
STARTING_HAND_SIZE = 5
EMPTY_HAND_DRAW = 5
TURN_DRAW = 2
ACTIONS_PER_TURN = 3
SETS_TO_WIN = 3

# Action card amounts
DEBT_COLLECTOR_AMOUNT = 5
BIRTHDAY_AMOUNT = 2
PASS_GO_DRAW = 2

# Cards needed to complete a set of each color
SET_LIMITS = {
    "BROWN": 2,
    "LIGHT_BLUE": 3,
    "PINK": 3,
    "ORANGE": 3,
    "RED": 3,
    "YELLOW": 3,
    "GREEN": 3,
    "DARK_BLUE": 2,
    "RAILROAD": 4,
    "UTILITY": 2,
    "ANY": 999,
}

# Money cards
# Format: (value, count)
MONEY_CARDS = [
    (10, 1),
    (5, 2),
    (4, 3),
    (3, 3),
    (2, 5),
    (1, 6),
]

# Action cards
# Format: (action kind, name, value, count, description)
ACTION_CARDS = [
    ("DEAL_BREAKER", "Deal Breaker", 7, 2, "Steal a complete set from any player."),
    ("SLY_DEAL", "Sly Deal", 3, 3, "Steal a single property from any player."),
    ("FORCE_DEAL", "Force Deal", 3, 3, "Swap a property with another player."),
    ("JUST_SAY_NO", "Just Say No", 4, 3, "Counter any action card."),
    ("DEBT_COLLECTOR", "Debt Collector", 3, 3, "Collect 5M from one player."),
    ("ITS_MY_BIRTHDAY", "It's My Birthday", 2, 3, "Collect 2M from all players."),
    ("PASS_GO", "Pass Go", 1, 10, "Draw 2 extra cards."),
    ("HOUSE", "House", 3, 3, "Add onto any full set you own."),
    ("HOTEL", "Hotel", 4, 2, "Add onto any full set with a house."),
    ("DOUBLE_THE_RENT", "Double The Rent", 1, 2, "Play with a rent card to double it."),
]

# Property cards
# Format: (name, color, value, count)
PROPERTY_CARDS = [
    ("Old Kent Road", "BROWN", 1, 2),
    ("The Angel Islington", "LIGHT_BLUE", 1, 3),
    ("Whitehall", "PINK", 2, 3),
    ("Bow Street", "ORANGE", 2, 3),
    ("Fleet Street", "RED", 3, 3),
    ("Leicester Square", "YELLOW", 3, 3),
    ("Bond Street", "GREEN", 4, 3),
    ("Park Lane", "DARK_BLUE", 4, 2),
    ("King's Cross Station", "RAILROAD", 2, 4),
    ("Water Works", "UTILITY", 2, 2),
]

# Two-color wildcards
# Format: (name, primary color, secondary color, value)
WILD_CARDS = [
    ("Dark Blue/Green Wild", "DARK_BLUE", "GREEN", 4),
    ("Light Blue/Brown Wild", "LIGHT_BLUE", "BROWN", 1),
]

# Room codes for hosted games
ROOM_CODE_LENGTH = 5
ROOM_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"

# Display names
HOST_NAME = "Host"
GUEST_NAME = "Guest"
AI_NAME = "AI Opponent"
LOCAL_NAMES = ("Player 1", "Player 2")
