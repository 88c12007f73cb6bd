"""
Replication adapter - keeps the other peer's copy of the game in step.

After every local mutation the full state is queued as a STATE_UPDATE
snapshot. Incoming snapshots replace the local state wholesale; there is no
merging, so the most recent snapshot always wins.
"""

import asyncio
import logging
from typing import Optional

from engine import GameState
from shared.enums import MessageType
from shared.protocol import StateUpdateMessage


logger = logging.getLogger(__name__)


def snapshot_message(state: GameState) -> StateUpdateMessage:
    """Wrap a state in the wire format."""
    return StateUpdateMessage.create(state.to_dict())


def state_from_message(data: dict) -> Optional[GameState]:
    """
    Extract the game state from a received message dict.

    Returns:
        The decoded state, or None if the message is not a usable snapshot
    """
    try:
        if MessageType(data["type"]) != MessageType.STATE_UPDATE:
            return None
        message = StateUpdateMessage.from_dict(data)
    except (KeyError, ValueError) as e:
        logger.error(f"Ignoring malformed message: {e}")
        return None

    state = message.state
    if not isinstance(state, dict):
        logger.error("STATE_UPDATE without a state payload")
        return None

    try:
        return GameState.from_dict(state)
    except (KeyError, ValueError, TypeError) as e:
        logger.error(f"Ignoring undecodable snapshot: {e}")
        return None


class ReplicationAdapter:
    """
    Sends snapshots over a PeerLink in the order they were published.

    Snapshots are queued synchronously (engine calls are synchronous) and a
    single sender task drains the queue, so the peer sees them in order.
    """

    def __init__(self, link):
        self._link = link
        self._queue: asyncio.Queue[StateUpdateMessage] = asyncio.Queue()
        self._sender: Optional[asyncio.Task] = None
        self.sent_count = 0

    @property
    def is_open(self) -> bool:
        return self._link.is_open

    def publish(self, state: GameState) -> bool:
        """
        Queue a snapshot of `state` for the peer.

        Returns:
            False if the channel is closed (nothing is queued)
        """
        if not self._link.is_open:
            return False

        self._queue.put_nowait(snapshot_message(state))
        if self._sender is None or self._sender.done():
            self._sender = asyncio.get_running_loop().create_task(self._drain())
        return True

    async def _drain(self) -> None:
        while not self._queue.empty():
            message = self._queue.get_nowait()
            if await self._link.send(message):
                self.sent_count += 1

    async def flush(self) -> None:
        """Wait until every queued snapshot has been handed to the link."""
        if self._sender is not None:
            await self._sender

    def receive(self, data: dict) -> Optional[GameState]:
        """Decode an incoming message; see `state_from_message`."""
        return state_from_message(data)

    def stop(self) -> None:
        if self._sender is not None and not self._sender.done():
            self._sender.cancel()
        self._sender = None
        while not self._queue.empty():
            self._queue.get_nowait()
