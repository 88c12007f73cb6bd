"""
LLM-backed move suggester using an OpenAI-compatible API (Ollama, vLLM, ...).
"""

import json
import logging
from typing import Any, Dict, List, Optional

import httpx

from client.config import settings
from engine import GameState

from .suggester import Move, MoveSuggester, SuggestionError, parse_moves


logger = logging.getLogger(__name__)

MAX_TOKENS = 512

SYSTEM_PROMPT = """You are playing Monopoly Deal, a two-player card game.
Win by owning 3 complete property sets. Each turn you may make up to the
number of moves in "actions_remaining". A move is one of:
  BANK        - put any card from your hand in your bank as money
  PROPERTY    - lay a PROPERTY or WILD card into its color set
  ACTION_PLAY - play an ACTION card for its effect
Pass Go draws 2 cards. Debt Collector takes 5M from the opponent,
It's My Birthday takes 2M. Sly Deal steals a card from the opponent's
first incomplete set.

Reply with JSON only: a list of moves such as
[{"action": "PROPERTY", "card_id": "..."}, {"action": "END_TURN"}]"""


class LLMSuggester(MoveSuggester):
    """
    Asks a language model for the AI player's moves.

    The agent:
    1. Serializes the AI player's view of the state into compact JSON
    2. Queries the model through /chat/completions
    3. Extracts the JSON list from the reply and parses it into moves

    Configuration comes from DEAL_LLM_* settings (see client/config.py).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        model_name: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url or settings.llm_base_url
        self.model_name = model_name or settings.llm_model
        self.api_key = api_key if api_key is not None else settings.llm_api_key
        self.timeout = timeout or settings.llm_timeout
        # Allow injected client; fallback to one client per request
        self._client = client

    async def suggest(self, state: GameState) -> List[Move]:
        prompt = json.dumps(self._serialize_state(state))
        try:
            content = await self._query_llm(prompt)
        except httpx.HTTPError as e:
            raise SuggestionError(f"LLM request failed: {e}") from e

        moves = self._parse_response(content)
        logger.info(f"LLM suggested {len(moves)} moves")
        return moves

    def _serialize_state(self, state: GameState) -> Dict[str, Any]:
        """Compact view of the game for the active (AI) player."""
        me = state.active_player
        opponent = state.opponent
        return {
            "actions_remaining": state.actions_remaining,
            "deck_size": len(state.deck),
            "hand": [
                {
                    "card_id": c.id,
                    "name": c.name,
                    "type": c.card_type.value,
                    "value": c.value,
                    "color": c.color.value if c.color else None,
                }
                for c in me.hand
            ],
            "my_bank": me.bank_total,
            "my_sets": self._summarize_sets(me.properties),
            "opponent_bank": opponent.bank_total,
            "opponent_sets": self._summarize_sets(opponent.properties),
        }

    @staticmethod
    def _summarize_sets(properties) -> List[Dict[str, Any]]:
        return [
            {
                "color": s.color.value,
                "cards": len(s.cards),
                "needed": s.required_size,
                "complete": s.is_complete,
            }
            for s in properties
        ]

    async def _query_llm(self, prompt: str) -> str:
        """Query the LLM using OpenAI-compatible chat completions API."""
        url = f"{self.base_url.rstrip('/')}/chat/completions"

        payload = {
            "model": self.model_name,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": MAX_TOKENS,
            "temperature": 0.3,
        }

        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        if self._client is not None:
            response = await self._client.post(
                url, json=payload, headers=headers or None, timeout=self.timeout
            )
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=payload, headers=headers or None)
        response.raise_for_status()

        result = response.json()

        # OpenAI-compatible API returns choices[0].message.content
        choices = result.get("choices") or []
        if choices:
            content = (choices[0].get("message") or {}).get("content", "").strip()
            if content:
                return content
            raise SuggestionError("LLM returned empty response")

        raise SuggestionError("Invalid LLM response format")

    def _parse_response(self, raw_response: str) -> List[Move]:
        """Extract the JSON move list from the model's reply."""
        text = raw_response.strip()

        json_start = text.find("[")
        json_end = text.rfind("]") + 1

        if json_start == -1 or json_end == 0:
            raise SuggestionError(f"No JSON list found in response: {text[:100]}")

        try:
            data = json.loads(text[json_start:json_end])
        except json.JSONDecodeError as e:
            raise SuggestionError(f"JSON parse error: {e}") from e

        return parse_moves(data)
