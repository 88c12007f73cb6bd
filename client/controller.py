"""
Game session controller.

Owns the one GameState of the current session and is the only place that
replaces it. Works the same way for hot-seat, VS AI and networked games:
the engine computes the next state, the controller stores it, tells the UI,
and (when networked) replicates it to the other peer.
"""

import asyncio
import logging
import random
from dataclasses import replace
from typing import Optional

from PyQt6.QtCore import QObject, pyqtSignal

from client.ai import AITurnRunner, default_suggester
from client.config import settings
from client.network import ConnectionState, PeerLink, ReplicationAdapter
from client.tasks import BackgroundTasks
from engine import GameState, end_turn, execute_move, new_game, start_turn
from shared.constants import AI_NAME, GUEST_NAME, HOST_NAME, LOCAL_NAMES
from shared.enums import GameMode, GamePhase, MoveKind, MultiplayerRole


logger = logging.getLogger(__name__)


class GameController(QObject):
    """
    Controller for one game session.

    Signals:
        state_changed: Game state replaced (GameState, or None when back at the menu)
        status_changed: Lobby / connection status text
        error_occurred: An error happened (error_message)
    """

    state_changed = pyqtSignal(object)
    status_changed = pyqtSignal(str)
    error_occurred = pyqtSignal(str)

    def __init__(
        self,
        link: Optional[PeerLink] = None,
        runner: Optional[AITurnRunner] = None,
        auto_advance: bool = True,
        parent=None
    ):
        super().__init__(parent)

        self._state: Optional[GameState] = None
        self._mode: Optional[GameMode] = None
        self._local_seat: Optional[int] = None
        self._auto_advance = auto_advance
        self._rng: Optional[random.Random] = None

        self._link = link or PeerLink(self)
        self._replication = ReplicationAdapter(self._link)
        self._link.connection_changed.connect(self._on_connection_changed)
        self._link.message_received.connect(self._on_message_received)
        self._link.error_occurred.connect(self._on_link_error)

        self._runner = runner or AITurnRunner(default_suggester())
        self._tasks = BackgroundTasks("GameController")
        self._draw_task: Optional[asyncio.Task] = None
        self._ai_task: Optional[asyncio.Task] = None

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def state(self) -> Optional[GameState]:
        """The current game state."""
        return self._state

    @property
    def mode(self) -> Optional[GameMode]:
        return self._mode

    @property
    def link(self) -> PeerLink:
        return self._link

    @property
    def replication(self) -> ReplicationAdapter:
        return self._replication

    @property
    def is_networked(self) -> bool:
        return self._mode in (GameMode.HOST, GameMode.JOIN)

    @property
    def local_seat(self) -> Optional[int]:
        """Seat this device plays in a networked game."""
        return self._local_seat

    @property
    def view_seat(self) -> int:
        """Seat whose hand the UI shows."""
        if self.is_networked and self._local_seat is not None:
            return self._local_seat
        if self._mode == GameMode.LOCAL and self._state:
            return self._state.active_player_index
        return 0

    @property
    def is_my_turn(self) -> bool:
        """Whether UI intents from this device may act on the state."""
        if not self._state:
            return False
        if self.is_networked:
            return self._state.active_player_index == self._local_seat
        return not self._state.active_player.is_ai

    # =========================================================================
    # Game Setup
    # =========================================================================

    def start_local_game(self, vs_ai: bool = True, rng: Optional[random.Random] = None) -> GameState:
        """Start a hot-seat game, or a game against the AI."""
        self.return_to_menu()
        self._mode = GameMode.VS_AI if vs_ai else GameMode.LOCAL
        self._local_seat = None
        self._rng = rng

        names = (LOCAL_NAMES[0], AI_NAME) if vs_ai else LOCAL_NAMES
        self._commit(new_game(names, ai_seats=(False, vs_ai), rng=rng))
        return self._state

    async def host_game(self, port: Optional[int] = None, rng: Optional[random.Random] = None) -> str:
        """
        Open a room and wait for the guest.

        Returns:
            Room code to give to the other player
        """
        self._reset()
        self._mode = GameMode.HOST
        self._local_seat = 0
        self._rng = rng

        room_code = await self._link.host(port)
        self.status_changed.emit("Waiting for your opponent to join...")
        return room_code

    async def join_game(self, room_code: str, url: Optional[str] = None) -> bool:
        """Join a hosted room. The host deals and sends the first snapshot."""
        self._reset()
        self._mode = GameMode.JOIN
        self._local_seat = 1
        self.status_changed.emit("Connecting...")

        joined = await self._link.join(room_code, GUEST_NAME, url)
        if not joined:
            self._mode = None
            self._local_seat = None
        return joined

    def deal_hosted_game(self) -> Optional[GameState]:
        """Create the networked game on the host and push it to the guest."""
        if self._mode != GameMode.HOST or not self._link.is_open:
            return None

        state = new_game(
            (HOST_NAME, GUEST_NAME),
            multiplayer_role=MultiplayerRole.HOST,
            rng=self._rng,
        )
        self._commit(state)
        return self._state

    def return_to_menu(self) -> None:
        """Drop the current game and any connection."""
        had_link = self._link.state != ConnectionState.DISCONNECTED
        self._reset()
        if had_link:
            self._schedule(self._link.close())

    def _reset(self) -> None:
        self._cancel_tasks()
        self._replication.stop()
        self._mode = None
        self._local_seat = None
        if self._state is not None:
            self._state = None
            self.state_changed.emit(None)

    # =========================================================================
    # Engine entry points
    # =========================================================================

    def start_turn(self) -> bool:
        """Draw for the active player."""
        return self._apply(start_turn)

    def end_turn(self) -> bool:
        """End the active player's turn."""
        return self._apply(end_turn)

    def execute_move(self, kind: MoveKind | str, card_id: str) -> bool:
        """Play a card from the active player's hand."""
        return self._apply(execute_move, kind, card_id)

    def _apply(self, transition, *args) -> bool:
        if self._state is None:
            return False
        return self._commit(transition(self._state, *args))

    # =========================================================================
    # UI intents (gated on whose turn it is)
    # =========================================================================

    def request_move(self, kind: MoveKind | str, card_id: str) -> bool:
        if not self.is_my_turn:
            return False
        return self.execute_move(kind, card_id)

    def request_end_turn(self) -> bool:
        if not self.is_my_turn:
            return False
        return self.end_turn()

    def request_start_turn(self) -> bool:
        if not self.is_my_turn and not self._active_is_ai():
            return False
        return self.start_turn()

    # =========================================================================
    # State handling
    # =========================================================================

    def _commit(self, new_state: GameState) -> bool:
        """Store an engine result. Returns False if the engine rejected the call."""
        if new_state is self._state:
            return False

        self._state = new_state
        self.state_changed.emit(new_state)

        if self.is_networked:
            self._replication.publish(new_state)

        self._schedule_followups()
        return True

    def _on_message_received(self, data: dict) -> None:
        """Replace local state with a snapshot from the peer."""
        if not self.is_networked:
            return

        state = self._replication.receive(data)
        if state is None:
            return

        # Each copy carries the role of the device holding it
        role = MultiplayerRole.HOST if self._mode == GameMode.HOST else MultiplayerRole.JOINER
        state = replace(state, multiplayer_role=role)

        self._state = state
        self.state_changed.emit(state)
        self._schedule_followups()

    def _active_is_ai(self) -> bool:
        return bool(self._state and self._state.active_player.is_ai)

    def _schedule_followups(self) -> None:
        """Queue the automatic draw and the AI turn when they are due."""
        if not self._auto_advance or self._state is None:
            return

        state = self._state
        if state.phase == GamePhase.START_TURN and (self.is_my_turn or self._active_is_ai()):
            if self._draw_task is None or self._draw_task.done():
                self._draw_task = self._schedule(self._draw_after_delay())

        elif state.phase == GamePhase.PLAY_PHASE and self._active_is_ai() and not state.winner:
            if not self._runner.is_running and (self._ai_task is None or self._ai_task.done()):
                self._ai_task = self._schedule(self._runner.play_turn(self))

    async def _draw_after_delay(self) -> None:
        await asyncio.sleep(settings.draw_delay)
        self.start_turn()

    # =========================================================================
    # Connection handling
    # =========================================================================

    def _on_connection_changed(self, state: ConnectionState) -> None:
        if state == ConnectionState.CONNECTED:
            self.status_changed.emit("Connected! Starting game...")
            if self._mode == GameMode.HOST:
                self._schedule(self._deal_after_delay())

        elif state in (ConnectionState.DISCONNECTED, ConnectionState.FAILED):
            if self.is_networked and self._state is not None:
                logger.info("Peer connection lost; returning to menu")
                self.status_changed.emit("Connection lost.")
                self.return_to_menu()

    def _on_link_error(self, message: str) -> None:
        self.status_changed.emit(f"Error: {message}")
        self.error_occurred.emit(message)

    async def _deal_after_delay(self) -> None:
        await asyncio.sleep(settings.host_start_delay)
        self.deal_hosted_game()

    def _schedule(self, coro) -> Optional[asyncio.Task]:
        return self._tasks.spawn(coro)

    def _cancel_tasks(self) -> None:
        self._tasks.cancel_all()
        self._draw_task = None
        self._ai_task = None
