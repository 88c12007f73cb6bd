"""
GUI widgets for Monopoly Deal.
"""

from .player_panel import PlayerPanel
from .action_panel import ActionPanel
from .event_log import EventLog

__all__ = [
    "PlayerPanel",
    "ActionPanel",
    "EventLog",
]
