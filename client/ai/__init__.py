"""
AI opponent: move-suggestion services and the turn runner.
"""

from client.config import settings

from .suggester import (
    END_TURN, HeuristicSuggester, Move, MoveSuggester, SuggestionError, parse_moves
)
from .llm import LLMSuggester
from .runner import AITurnRunner


def default_suggester() -> MoveSuggester:
    """LLM suggester when an endpoint is configured, scripted play otherwise."""
    if settings.use_llm:
        return LLMSuggester()
    return HeuristicSuggester()


__all__ = [
    "END_TURN",
    "HeuristicSuggester",
    "LLMSuggester",
    "Move",
    "MoveSuggester",
    "SuggestionError",
    "parse_moves",
    "AITurnRunner",
    "default_suggester",
]
