"""
Action panel widget.

Shows the viewed player's hand and the move buttons for the selected card.
"""

from typing import Optional

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel,
    QPushButton, QGroupBox, QListWidget, QListWidgetItem
)
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QFont, QBrush

from client.gui.styles import card_color
from engine import Card
from shared.enums import GamePhase, MoveKind


class ActionPanel(QWidget):
    """
    Hand list with Bank / Property / Play / End Turn buttons.

    Clicking the selected card again clears the selection.
    """

    move_requested = pyqtSignal(str, str)  # move kind, card_id
    end_turn = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)

        self._selected_id: Optional[str] = None
        self._cards: dict[str, Card] = {}
        self._can_act = False

        layout = QVBoxLayout(self)
        layout.setSpacing(12)

        self._phase_label = QLabel("Waiting for game...")
        self._phase_label.setFont(QFont("Arial", 12, QFont.Weight.Bold))
        self._phase_label.setStyleSheet("color: #F1C40F;")
        self._phase_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._phase_label)

        hand_group = QGroupBox("Hand")
        hand_layout = QVBoxLayout(hand_group)
        self._hand_list = QListWidget()
        self._hand_list.itemClicked.connect(self._on_item_clicked)
        hand_layout.addWidget(self._hand_list)

        self._detail_label = QLabel("")
        self._detail_label.setWordWrap(True)
        hand_layout.addWidget(self._detail_label)
        layout.addWidget(hand_group, 1)

        action_group = QGroupBox("Actions")
        action_layout = QVBoxLayout(action_group)

        row = QHBoxLayout()
        self._bank_btn = QPushButton("Bank")
        self._bank_btn.clicked.connect(lambda: self._emit_move(MoveKind.BANK))
        row.addWidget(self._bank_btn)

        self._property_btn = QPushButton("Property")
        self._property_btn.clicked.connect(lambda: self._emit_move(MoveKind.PROPERTY))
        row.addWidget(self._property_btn)

        self._play_btn = QPushButton("Play")
        self._play_btn.clicked.connect(lambda: self._emit_move(MoveKind.ACTION_PLAY))
        row.addWidget(self._play_btn)
        action_layout.addLayout(row)

        self._end_turn_btn = QPushButton("End Turn")
        self._end_turn_btn.setObjectName("actionButton")
        self._end_turn_btn.clicked.connect(self.end_turn.emit)
        action_layout.addWidget(self._end_turn_btn)

        layout.addWidget(action_group)
        self._update_buttons()

    @property
    def selected_card_id(self) -> Optional[str]:
        return self._selected_id

    def update_state(self, state, view_seat: int, can_act: bool) -> None:
        """Refresh the hand and button availability."""
        player = state.players[view_seat]
        self._can_act = can_act and state.phase == GamePhase.PLAY_PHASE and not state.winner

        if state.winner:
            self._phase_label.setText(f"{state.winner} wins!")
        elif state.phase == GamePhase.START_TURN:
            self._phase_label.setText(f"{state.active_player.name} is drawing...")
        elif can_act:
            self._phase_label.setText(f"Your turn: {state.actions_remaining} actions left")
        else:
            self._phase_label.setText(f"{state.active_player.name}'s turn")

        self._cards = {card.id: card for card in player.hand}
        if self._selected_id not in self._cards:
            self._selected_id = None

        self._hand_list.clear()
        for card in player.hand:
            item = QListWidgetItem(f"{card.name} ({card.value}M)")
            item.setData(Qt.ItemDataRole.UserRole, card.id)
            item.setForeground(QBrush(card_color(card)))
            self._hand_list.addItem(item)
            if card.id == self._selected_id:
                item.setSelected(True)

        self._update_buttons()

    def _on_item_clicked(self, item: QListWidgetItem) -> None:
        card_id = item.data(Qt.ItemDataRole.UserRole)
        if card_id == self._selected_id:
            self._selected_id = None
            self._hand_list.clearSelection()
        else:
            self._selected_id = card_id
        self._update_buttons()

    def _emit_move(self, kind: MoveKind) -> None:
        if self._selected_id is not None:
            card_id, self._selected_id = self._selected_id, None
            self.move_requested.emit(kind.value, card_id)

    def _update_buttons(self) -> None:
        card = self._cards.get(self._selected_id) if self._selected_id else None
        self._detail_label.setText(card.description or "" if card else "")

        self._bank_btn.setEnabled(self._can_act and card is not None)
        self._property_btn.setEnabled(self._can_act and card is not None and card.is_placeable)
        self._play_btn.setEnabled(self._can_act and card is not None and card.is_playable_action)
        self._end_turn_btn.setEnabled(self._can_act)

    def clear(self) -> None:
        """Reset the panel."""
        self._hand_list.clear()
        self._cards = {}
        self._selected_id = None
        self._can_act = False
        self._phase_label.setText("Waiting for game...")
        self._update_buttons()
