"""
Colors and Qt stylesheets for the Monopoly Deal GUI.

The table uses a dark felt palette; card colors follow the printed deck.
"""

from PyQt6.QtGui import QColor

from shared.enums import CardType, PropertyColor

PROPERTY_COLORS = {
    PropertyColor.BROWN: QColor("#8B5A2B"),
    PropertyColor.LIGHT_BLUE: QColor("#A6D8F0"),
    PropertyColor.PINK: QColor("#E06AA8"),
    PropertyColor.ORANGE: QColor("#F29B30"),
    PropertyColor.RED: QColor("#D83A34"),
    PropertyColor.YELLOW: QColor("#F5D547"),
    PropertyColor.GREEN: QColor("#3AA655"),
    PropertyColor.DARK_BLUE: QColor("#3556C8"),
    PropertyColor.RAILROAD: QColor("#9A9A9A"),
    PropertyColor.UTILITY: QColor("#CFE3C8"),
    PropertyColor.ANY: QColor("#B58CE0"),
}

# Non-property cards in the hand
CARD_TYPE_COLORS = {
    CardType.MONEY: QColor("#9BD67E"),
    CardType.ACTION: QColor("#7FB8F0"),
    CardType.RENT: QColor("#F0B77F"),
}

FALLBACK_CARD_COLOR = QColor("#C8C8C8")

LOG_COLOR = "#E8EFE9"
SYSTEM_COLOR = "#7FB8F0"
ERROR_COLOR = "#F07F7F"
TURN_COLOR = "#F5D547"
TIMESTAMP_COLOR = "#8FA596"


def card_color(card) -> QColor:
    """Color used to draw a card in the hand or on the table."""
    if card.color is not None:
        return PROPERTY_COLORS.get(card.color, PROPERTY_COLORS[PropertyColor.ANY])
    return CARD_TYPE_COLORS.get(card.card_type, FALLBACK_CARD_COLOR)


_FELT = "#1E4D36"
_FELT_DARK = "#143826"
_TRIM = "#C9A646"

MAIN_STYLESHEET = f"""
QMainWindow, QWidget#centralWidget {{
    background-color: {_FELT};
}}
QLabel {{
    color: #F4F1E6;
}}
QGroupBox {{
    color: #F4F1E6;
    font-weight: bold;
    border: 1px solid {_TRIM};
    border-radius: 6px;
    margin-top: 14px;
    padding: 6px;
}}
QGroupBox::title {{
    subcontrol-origin: margin;
    left: 8px;
}}
QPushButton {{
    background-color: #2F6F4E;
    color: #F4F1E6;
    border: 1px solid {_TRIM};
    border-radius: 5px;
    padding: 6px 14px;
}}
QPushButton:hover {{
    background-color: #3C8A61;
}}
QPushButton:disabled {{
    background-color: #2A3F33;
    color: #7F9386;
    border-color: #4A5E52;
}}
QPushButton#actionButton {{
    background-color: {_TRIM};
    color: {_FELT_DARK};
    font-weight: bold;
    padding: 10px 20px;
}}
QPushButton#dangerButton {{
    background-color: #8E2F2B;
}}
QListWidget, QTextEdit {{
    background-color: {_FELT_DARK};
    color: #F4F1E6;
    border: 1px solid #2F6F4E;
}}
QListWidget::item {{
    padding: 5px;
}}
QListWidget::item:selected {{
    background-color: #2F6F4E;
    border-left: 3px solid {_TRIM};
}}
QLineEdit {{
    padding: 6px;
    border: 1px solid {_TRIM};
    border-radius: 4px;
    font-size: 16px;
}}
"""

LOBBY_STYLESHEET = f"""
QWidget#lobbyWidget {{
    background-color: {_FELT_DARK};
}}
QLabel#titleLabel {{
    color: {_TRIM};
    font-size: 34px;
    font-weight: bold;
}}
QLabel#subtitleLabel {{
    color: #B9CBBF;
    font-size: 15px;
}}
QLabel#roomCodeLabel {{
    color: #F4F1E6;
    font-size: 30px;
    letter-spacing: 6px;
}}
"""
