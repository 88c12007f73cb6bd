"""
Table view for both players: bank, property sets and hand size.
"""

from PyQt6.QtWidgets import QGroupBox, QLabel, QVBoxLayout, QWidget
from PyQt6.QtGui import QFont

from client.gui.styles import PROPERTY_COLORS
from engine import GameState, Player
from shared.constants import SETS_TO_WIN


def _set_line(prop_set) -> QLabel:
    names = ", ".join(card.name for card in prop_set.cards)
    done = " ✓" if prop_set.is_complete else ""
    label = QLabel(
        f"{prop_set.color.value} {len(prop_set.cards)}/{prop_set.required_size}{done}  {names}"
    )
    label.setWordWrap(True)
    swatch = PROPERTY_COLORS[prop_set.color].name()
    label.setStyleSheet(f"border-left: 8px solid {swatch}; padding-left: 6px;")
    return label


class PlayerCard(QGroupBox):
    """One player's side of the table."""

    def __init__(self, parent=None):
        super().__init__(parent)

        self._summary = QLabel()
        self._summary.setFont(QFont("Arial", 11, QFont.Weight.Bold))

        self._sets = QVBoxLayout()
        self._sets.setSpacing(3)

        layout = QVBoxLayout(self)
        layout.addWidget(self._summary)
        layout.addLayout(self._sets)

    def update_player(self, player: Player, is_current: bool, is_self: bool) -> None:
        title = f"{player.name} (You)" if is_self else player.name
        if is_current:
            title += "  • playing"
        self.setTitle(title)

        self._summary.setText(
            f"Bank {player.bank_total}M in {len(player.bank)} cards   "
            f"Hand {len(player.hand)}   "
            f"Sets {player.complete_sets}/{SETS_TO_WIN}"
        )

        while self._sets.count():
            widget = self._sets.takeAt(0).widget()
            if widget is not None:
                widget.deleteLater()

        if player.properties:
            for prop_set in player.properties:
                self._sets.addWidget(_set_line(prop_set))
        else:
            self._sets.addWidget(QLabel("No properties yet"))

        self.setStyleSheet("QGroupBox { border-color: #F5D547; }" if is_current else "")


class PlayerPanel(QWidget):
    """Opponent on top, the viewed player underneath."""

    def __init__(self, parent=None):
        super().__init__(parent)

        self._opponent = PlayerCard()
        self._own = PlayerCard()

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._opponent)
        layout.addWidget(self._own)
        layout.addStretch()

    def update_players(self, state: GameState, view_seat: int) -> None:
        other = 1 - view_seat
        self._opponent.update_player(
            state.players[other], state.active_player_index == other, is_self=False
        )
        self._own.update_player(
            state.players[view_seat], state.active_player_index == view_seat, is_self=True
        )
