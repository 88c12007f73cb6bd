"""
Game screen: both players' tables, the viewed hand and the game log.
"""

from typing import Optional

from PyQt6.QtWidgets import QGridLayout, QMessageBox, QPushButton, QWidget
from PyQt6.QtCore import pyqtSignal

from client.gui.widgets import ActionPanel, EventLog, PlayerPanel
from engine import GameState


class GameScreen(QWidget):
    """
    Signals:
        move_requested: A card move was requested (move_kind, card_id)
        end_turn_requested: The viewed player wants to end the turn
        leave_game_requested: Player confirmed going back to the menu
    """

    move_requested = pyqtSignal(str, str)
    end_turn_requested = pyqtSignal()
    leave_game_requested = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)

        self._announced_winner: Optional[str] = None

        self._players = PlayerPanel()
        self._hand = ActionPanel()
        self._log = EventLog()

        leave_btn = QPushButton("Leave Game")
        leave_btn.setObjectName("dangerButton")
        leave_btn.clicked.connect(self._confirm_leave)

        # Tables | hand and buttons | log
        grid = QGridLayout(self)
        grid.setContentsMargins(10, 10, 10, 10)
        grid.addWidget(self._players, 0, 0)
        grid.addWidget(leave_btn, 1, 0)
        grid.addWidget(self._hand, 0, 1, 2, 1)
        grid.addWidget(self._log, 0, 2, 2, 1)
        grid.setColumnStretch(0, 3)
        grid.setColumnStretch(1, 3)
        grid.setColumnStretch(2, 2)

        self._hand.move_requested.connect(self.move_requested.emit)
        self._hand.end_turn.connect(self.end_turn_requested.emit)

    def _confirm_leave(self) -> None:
        answer = QMessageBox.question(
            self,
            "Leave Game",
            "Leave this game and return to the menu?",
        )
        if answer == QMessageBox.StandardButton.Yes:
            self.leave_game_requested.emit()

    def update_game_state(self, state: GameState, view_seat: int, can_act: bool) -> None:
        """Redraw everything from a new state."""
        self._players.update_players(state, view_seat)
        self._hand.update_state(state, view_seat, can_act)
        self._log.set_logs(state.logs)

        if state.winner and state.winner != self._announced_winner:
            self._announced_winner = state.winner
            QMessageBox.information(self, "Game Over", f"{state.winner} wins the game!")

    def add_system_message(self, message: str) -> None:
        self._log.add_system_message(message)

    def add_error_message(self, message: str) -> None:
        self._log.add_error_message(message)

    def clear(self) -> None:
        """Reset the screen."""
        self._hand.clear()
        self._log.clear()
        self._announced_winner = None
