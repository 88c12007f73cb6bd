"""
Main application window.

Holds the menu and the game screen in a stack and turns their signals
into GameController calls.
"""

import logging
from typing import Optional

from PyQt6.QtWidgets import QMainWindow, QStackedWidget

from client.config import settings
from client.controller import GameController
from client.gui.lobby_screen import LobbyScreen
from client.gui.game_screen import GameScreen
from client.gui.styles import MAIN_STYLESHEET
from client.tasks import BackgroundTasks
from engine import GameState


logger = logging.getLogger(__name__)

MENU_PAGE = 0
GAME_PAGE = 1


class MainWindow(QMainWindow):

    def __init__(self, controller: Optional[GameController] = None):
        super().__init__()

        self.setWindowTitle("Monopoly Deal")
        self.setMinimumSize(settings.window_width, settings.window_height)
        self.setStyleSheet(MAIN_STYLESHEET)

        self._controller = controller or GameController(parent=self)
        self._tasks = BackgroundTasks("MainWindow")

        self._lobby = LobbyScreen()
        self._game = GameScreen()

        self._pages = QStackedWidget()
        self._pages.setObjectName("centralWidget")
        self._pages.insertWidget(MENU_PAGE, self._lobby)
        self._pages.insertWidget(GAME_PAGE, self._game)
        self.setCentralWidget(self._pages)

        self._wire()

    def _wire(self) -> None:
        controller = self._controller

        self._lobby.vs_ai_requested.connect(lambda: controller.start_local_game(vs_ai=True))
        self._lobby.local_requested.connect(lambda: controller.start_local_game(vs_ai=False))
        self._lobby.host_requested.connect(lambda: self._spawn(self._host()))
        self._lobby.join_requested.connect(lambda code: self._spawn(self._join(code)))

        self._game.move_requested.connect(controller.request_move)
        self._game.end_turn_requested.connect(controller.request_end_turn)
        self._game.leave_game_requested.connect(self._leave_game)

        controller.state_changed.connect(self._show_state)
        controller.status_changed.connect(self._show_status)
        controller.error_occurred.connect(self._show_error)

    @property
    def _in_game(self) -> bool:
        return self._pages.currentIndex() == GAME_PAGE

    def _show_state(self, state: Optional[GameState]) -> None:
        if state is None:
            self._game.clear()
            self._lobby.set_busy(False)
            self._pages.setCurrentIndex(MENU_PAGE)
            return

        self._pages.setCurrentIndex(GAME_PAGE)
        self._game.update_game_state(state, self._controller.view_seat, self._controller.is_my_turn)

    def _show_status(self, text: str) -> None:
        self._lobby.set_status(text)
        if self._in_game:
            self._game.add_system_message(text)

    def _show_error(self, message: str) -> None:
        logger.error(f"Error: {message}")
        if self._in_game:
            self._game.add_error_message(message)
        else:
            self._lobby.set_busy(False)

    async def _host(self) -> None:
        self._lobby.set_busy(True)
        try:
            room_code = await self._controller.host_game()
        except OSError:
            self._lobby.set_busy(False)
            return
        self._lobby.show_room_code(room_code)

    async def _join(self, room_code: str) -> None:
        self._lobby.set_busy(True)
        if await self._controller.join_game(room_code):
            self._lobby.set_status("Connected! Waiting for the host to deal...")
        else:
            self._lobby.set_busy(False)

    def _leave_game(self) -> None:
        self._controller.return_to_menu()
        self._lobby.set_status("Choose a game mode")

    def _spawn(self, coro) -> None:
        self._tasks.spawn(coro)

    def closeEvent(self, event) -> None:
        self._controller.return_to_menu()
        event.accept()
