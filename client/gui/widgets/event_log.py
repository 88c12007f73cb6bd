"""
Event log widget.

Local status lines (timestamped) sit above the game's own log, which the
state already keeps newest first.
"""

from datetime import datetime
from html import escape
from typing import Sequence

from PyQt6.QtWidgets import QGroupBox, QTextEdit, QVBoxLayout
from PyQt6.QtGui import QFont

from client.gui.styles import ERROR_COLOR, LOG_COLOR, SYSTEM_COLOR, TIMESTAMP_COLOR, TURN_COLOR


def _span(text: str, color: str) -> str:
    return f'<span style="color: {color};">{escape(text)}</span>'


class EventLog(QGroupBox):

    def __init__(self, parent=None):
        super().__init__("Game Log", parent)

        self._game_lines: tuple[str, ...] = ()
        self._local_lines: list[str] = []

        self._view = QTextEdit()
        self._view.setReadOnly(True)
        self._view.setFont(QFont("Consolas", 9))

        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.addWidget(self._view)

    def set_logs(self, logs: Sequence[str]) -> None:
        logs = tuple(logs)
        if logs != self._game_lines:
            self._game_lines = logs
            self._render()

    def add_system_message(self, text: str) -> None:
        self._push_local(text, SYSTEM_COLOR)

    def add_error_message(self, text: str) -> None:
        self._push_local(text, ERROR_COLOR)

    def _push_local(self, text: str, color: str) -> None:
        stamp = datetime.now().strftime("%H:%M:%S")
        self._local_lines.insert(0, f"{_span(f'[{stamp}]', TIMESTAMP_COLOR)} {_span(text, color)}")
        self._render()

    def _render(self) -> None:
        game = [
            _span(line, TURN_COLOR if line.startswith("Turn change:") else LOG_COLOR)
            for line in self._game_lines
        ]
        self._view.setHtml("<br>".join(self._local_lines + game))

    def clear(self) -> None:
        self._game_lines = ()
        self._local_lines.clear()
        self._view.clear()
