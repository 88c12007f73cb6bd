"""
WebSocket link between the two peers of a networked game.

One side hosts (runs a small websocket server and hands out a room code),
the other joins with that code. Once the handshake succeeds both sides hold
one connection and exchange JSON messages over it.
Uses Qt signals to communicate with the GUI thread.
"""

import asyncio
import json
import logging
import random
from enum import Enum, auto
from typing import Optional

from PyQt6.QtCore import QObject, pyqtSignal

import websockets

from client.config import settings
from shared.constants import ROOM_CODE_ALPHABET, ROOM_CODE_LENGTH
from shared.enums import MessageType
from shared.protocol import (
    ConnectRequest, ConnectResponse, DisconnectMessage, ErrorMessage, Message, parse_message
)


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection state."""
    DISCONNECTED = auto()
    WAITING = auto()  # Hosting, no guest yet
    CONNECTING = auto()
    CONNECTED = auto()
    FAILED = auto()


def generate_room_code(rng: Optional[random.Random] = None) -> str:
    """Short code the guest types in to find the host."""
    rng = rng or random.Random()
    return "".join(rng.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))


class PeerLink(QObject):
    """
    Point-to-point channel to the other player.

    Emits Qt signals for GUI updates:
    - connection_changed: Connection state changed
    - message_received: Peer message received (parsed dict)
    - error_occurred: Error happened
    """

    connection_changed = pyqtSignal(object)  # ConnectionState
    message_received = pyqtSignal(dict)
    error_occurred = pyqtSignal(str)

    def __init__(self, parent=None):
        super().__init__(parent)

        self._websocket = None
        self._server = None
        self._state = ConnectionState.DISCONNECTED
        self._room_code: Optional[str] = None
        self._peer_name: Optional[str] = None
        self._is_host = False
        self._receive_task: Optional[asyncio.Task] = None
        self._handshaking = False

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def room_code(self) -> Optional[str]:
        return self._room_code

    @property
    def peer_name(self) -> Optional[str]:
        return self._peer_name

    @property
    def is_host(self) -> bool:
        return self._is_host

    @property
    def is_open(self) -> bool:
        return self._state == ConnectionState.CONNECTED and self._websocket is not None

    def _set_state(self, state: ConnectionState) -> None:
        """Update connection state and emit signal."""
        if self._state != state:
            self._state = state
            self.connection_changed.emit(state)

    async def host(self, port: Optional[int] = None, room_code: Optional[str] = None) -> str:
        """
        Start listening for a guest.

        Returns:
            The room code the guest must present
        """
        await self.close()

        self._is_host = True
        self._room_code = (room_code or generate_room_code()).upper()

        try:
            self._server = await websockets.serve(
                self._handle_guest,
                settings.listen_host,
                port or settings.peer_port,
                ping_interval=30,
                ping_timeout=10,
            )
        except OSError as e:
            logger.exception(f"Could not start hosting: {e}")
            self.error_occurred.emit(f"Could not host: {e}")
            self._set_state(ConnectionState.FAILED)
            raise

        logger.info(f"Hosting room {self._room_code} on port {port or settings.peer_port}")
        self._set_state(ConnectionState.WAITING)
        return self._room_code

    async def _handle_guest(self, websocket) -> None:
        """
        Handle one incoming guest connection.

        The first message must be a CONNECT carrying the room code.
        Only one guest is accepted at a time.
        """
        if self._websocket is not None or self._handshaking:
            await websocket.send(ErrorMessage.create("Room is full", "ROOM_FULL").to_json())
            await websocket.close()
            return

        # Hold the slot across the handshake awaits
        self._handshaking = True
        try:
            try:
                raw = await asyncio.wait_for(websocket.recv(), timeout=settings.connect_timeout)
                request = Message.from_json(raw)
            except (asyncio.TimeoutError, ValueError, KeyError) as e:
                logger.warning(f"Rejected guest with bad handshake: {e}")
                await websocket.close()
                return

            room_code = str(request.data.get("room_code", "")).upper()
            if request.type != MessageType.CONNECT or room_code != self._room_code:
                await websocket.send(ConnectResponse.create(False, "Wrong room code").to_json())
                await websocket.close()
                return

            self._websocket = websocket
            try:
                await websocket.send(ConnectResponse.create(True).to_json())
            except websockets.ConnectionClosed:
                logger.info("Guest left during the handshake")
                self._websocket = None
                return
        finally:
            self._handshaking = False

        self._peer_name = request.data.get("player_name")
        logger.info(f"Guest {self._peer_name} joined room {self._room_code}")
        self._set_state(ConnectionState.CONNECTED)

        # The server keeps the connection open while this handler runs
        await self._receive_loop()

    async def join(self, room_code: str, player_name: str, url: Optional[str] = None) -> bool:
        """
        Connect to a hosting peer.

        Returns:
            True if the host accepted the room code
        """
        await self.close()

        self._is_host = False
        self._room_code = room_code.upper()
        self._set_state(ConnectionState.CONNECTING)

        try:
            self._websocket = await websockets.connect(
                url or settings.peer_url,
                ping_interval=30,
                ping_timeout=10,
            )
            await self._websocket.send(ConnectRequest.create(self._room_code, player_name).to_json())

            response = await asyncio.wait_for(
                self._websocket.recv(), timeout=settings.connect_timeout
            )
            reply = parse_message(response)

            if reply.type == MessageType.CONNECT and reply.data.get("success"):
                self._set_state(ConnectionState.CONNECTED)
                self._receive_task = asyncio.create_task(self._receive_loop())
                logger.info(f"Joined room {self._room_code}")
                return True

            self.error_occurred.emit(reply.data.get("message") or "Connection rejected")

        except asyncio.TimeoutError:
            self.error_occurred.emit("Connection timeout")
        except Exception as e:
            logger.exception(f"Connection failed: {e}")
            self.error_occurred.emit(f"Connection failed: {e}")

        await self._drop_socket()
        self._set_state(ConnectionState.FAILED)
        return False

    async def _receive_loop(self) -> None:
        """Receive messages from the peer."""
        websocket = self._websocket
        try:
            async for raw_message in websocket:
                try:
                    self.message_received.emit(json.loads(raw_message))
                except json.JSONDecodeError as e:
                    logger.error(f"Failed to parse message: {e}")
                except Exception as e:
                    logger.exception(f"Error handling message: {e}")

        except websockets.ConnectionClosed:
            logger.info("Connection closed by peer")
        finally:
            if self._websocket is websocket:
                self._websocket = None
                self._set_state(ConnectionState.DISCONNECTED)

    async def send(self, message: Message | dict) -> bool:
        """
        Send a message to the peer.

        Returns:
            True if the message was handed to the socket
        """
        if not self.is_open:
            logger.debug("Send skipped: channel not open")
            return False

        try:
            data = message.to_json() if isinstance(message, Message) else json.dumps(message)
            await self._websocket.send(data)
            return True
        except websockets.ConnectionClosed:
            logger.info("Send failed: connection closed")
            return False
        except Exception as e:
            logger.exception(f"Failed to send message: {e}")
            self.error_occurred.emit(f"Failed to send: {e}")
            return False

    async def _drop_socket(self) -> None:
        websocket, self._websocket = self._websocket, None
        if websocket is not None:
            await websocket.close()

    async def close(self) -> None:
        """Close the channel and stop hosting."""
        if self.is_open:
            await self.send(DisconnectMessage.create("Peer left the game"))

        if self._receive_task:
            self._receive_task.cancel()
            try:
                await self._receive_task
            except asyncio.CancelledError:
                pass
            self._receive_task = None

        await self._drop_socket()

        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()
            self._server = None

        self._peer_name = None
        self._set_state(ConnectionState.DISCONNECTED)
