"""
Menu screen for choosing a game mode.
"""

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel,
    QPushButton, QLineEdit, QGroupBox, QMessageBox
)
from PyQt6.QtCore import Qt, pyqtSignal

from client.gui.styles import LOBBY_STYLESHEET
from shared.constants import ROOM_CODE_LENGTH


class LobbyScreen(QWidget):
    """
    Menu with the four game modes.

    Signals:
        vs_ai_requested: Play against the computer
        local_requested: Two players on this device
        host_requested: Open a room for a second device
        join_requested: Join a room (room_code)
    """

    vs_ai_requested = pyqtSignal()
    local_requested = pyqtSignal()
    host_requested = pyqtSignal()
    join_requested = pyqtSignal(str)  # room_code

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("lobbyWidget")
        self.setStyleSheet(LOBBY_STYLESHEET)

        layout = QVBoxLayout(self)
        layout.setSpacing(20)
        layout.setContentsMargins(40, 40, 40, 40)

        title = QLabel("MONOPOLY DEAL")
        title.setObjectName("titleLabel")
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(title)

        subtitle = QLabel("Collect three complete sets to win")
        subtitle.setObjectName("subtitleLabel")
        subtitle.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(subtitle)

        layout.addSpacing(20)

        # Single-device modes
        local_group = QGroupBox("Play on this device")
        local_layout = QHBoxLayout(local_group)

        self._vs_ai_btn = QPushButton("VS AI")
        self._vs_ai_btn.setObjectName("actionButton")
        self._vs_ai_btn.clicked.connect(self.vs_ai_requested.emit)
        local_layout.addWidget(self._vs_ai_btn)

        self._local_btn = QPushButton("Local 2 Player")
        self._local_btn.clicked.connect(self.local_requested.emit)
        local_layout.addWidget(self._local_btn)

        layout.addWidget(local_group)

        # Two-device modes
        online_group = QGroupBox("Play with a second device")
        online_layout = QVBoxLayout(online_group)

        self._host_btn = QPushButton("Host Game")
        self._host_btn.clicked.connect(self.host_requested.emit)
        online_layout.addWidget(self._host_btn)

        join_row = QHBoxLayout()
        self._code_input = QLineEdit()
        self._code_input.setPlaceholderText("Room code...")
        self._code_input.setMaxLength(ROOM_CODE_LENGTH)
        self._code_input.returnPressed.connect(self._on_join)
        join_row.addWidget(self._code_input)

        self._join_btn = QPushButton("Join")
        self._join_btn.clicked.connect(self._on_join)
        join_row.addWidget(self._join_btn)
        online_layout.addLayout(join_row)

        self._room_code_label = QLabel("")
        self._room_code_label.setObjectName("roomCodeLabel")
        self._room_code_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        online_layout.addWidget(self._room_code_label)

        layout.addWidget(online_group)

        layout.addStretch()

        self._status_label = QLabel("Choose a game mode")
        self._status_label.setStyleSheet("color: #7F8C8D;")
        self._status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._status_label)

    def _on_join(self) -> None:
        code = self._code_input.text().strip().upper()
        if len(code) != ROOM_CODE_LENGTH:
            QMessageBox.warning(self, "Error", f"Room codes are {ROOM_CODE_LENGTH} characters")
            return
        self.join_requested.emit(code)

    # Public methods for updating state

    def show_room_code(self, room_code: str) -> None:
        self._room_code_label.setText(f"Room code: {room_code}")

    def set_status(self, text: str) -> None:
        """Set the status message."""
        self._status_label.setText(text)

    def set_busy(self, busy: bool) -> None:
        """Disable the mode buttons while hosting or connecting."""
        for widget in (self._vs_ai_btn, self._local_btn, self._host_btn,
                       self._join_btn, self._code_input):
            widget.setEnabled(not busy)
        if not busy:
            self._room_code_label.setText("")
