"""
AI turn runner.

Plays one AI turn against a live session: asks the suggester once, then
feeds the proposed moves through the engine one at a time.
"""

import asyncio
import logging
from typing import List, Optional

from client.config import settings

from .suggester import HeuristicSuggester, Move, MoveSuggester


logger = logging.getLogger(__name__)


class AITurnRunner:
    """
    Applies a batch of suggested moves for the AI player.

    The session passed to `play_turn` must expose:
    - `state`: the live GameState (None once the game is abandoned)
    - `execute_move(kind, card_id)`
    - `end_turn()`

    The batch can only be abandoned between moves (task cancellation lands
    on the pacing sleep); a single move is never half-applied.
    """

    def __init__(
        self,
        suggester: Optional[MoveSuggester] = None,
        move_delay: Optional[float] = None
    ):
        self.suggester = suggester or HeuristicSuggester()
        self.move_delay = settings.ai_move_delay if move_delay is None else move_delay
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    async def play_turn(self, session) -> int:
        """
        Play the AI's turn and end it.

        Returns:
            Number of moves that were actually applied
        """
        if self._running:
            logger.debug("AI turn already in progress")
            return 0

        self._running = True
        applied = 0
        try:
            try:
                moves = await self.suggester.suggest(session.state)
                applied = await self._apply_moves(session, moves)
            except asyncio.CancelledError:
                logger.info("AI turn abandoned")
                raise
            except Exception as e:
                logger.exception(f"AI suggestion round failed: {e}")

            if session.state is not None:
                session.end_turn()
            return applied
        finally:
            self._running = False

    async def _apply_moves(self, session, moves: List[Move]) -> int:
        applied = 0
        for move in moves:
            # Re-read live state so earlier moves in the batch are visible
            current = session.state
            if current is None:
                break
            if current.actions_remaining <= 0 or current.winner:
                break
            if move.is_end_turn:
                break

            player = current.active_player
            if move.kind is None or not move.card_id or not player.has_card(move.card_id):
                logger.debug(f"Skipping stale or unknown AI move: {move}")
                continue

            session.execute_move(move.kind, move.card_id)
            if session.state is current:
                logger.debug(f"Engine rejected AI move: {move}")
                continue

            applied += 1
            await asyncio.sleep(self.move_delay)

        return applied
