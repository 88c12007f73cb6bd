"""
Debt settlement between two players.
"""
import logging
from dataclasses import dataclass, replace
from typing import Tuple

from .ledger import first_non_empty_set, move_top_card
from .player import Player


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settlement:
    """Outcome of a settled debt."""
    payer: Player
    payee: Player
    logs: Tuple[str, ...]
    amount_paid: int
    shortfall: int

    @property
    def fully_paid(self) -> bool:
        return self.shortfall == 0


def settle_debt(
    payer: Player,
    payee: Player,
    amount: int,
    logs: Tuple[str, ...] = ()
) -> Settlement:
    """
    Discharge a debt, bank first, then properties.

    Cards are handed over whole at face value. If a card is worth more than
    what is still owed, the payee keeps the difference. A payer who runs out
    of bank and property cards simply stops paying.

    Args:
        payer: Player who owes
        payee: Player who is owed
        amount: Debt in millions
        logs: Game log (newest first); payment lines are prepended

    Returns:
        Settlement with both updated players and the extended log
    """
    remaining = amount
    paid = 0
    log = list(logs)

    # Bank payment
    while remaining > 0 and payer.bank:
        card = payer.bank[-1]
        payer = replace(payer, bank=payer.bank[:-1])
        payee = replace(payee, bank=payee.bank + (card,))
        remaining -= card.value
        paid += card.value
        log.insert(0, f"{payer.name} paid {card.name} ({card.value}M) from bank.")

    # Property payment
    while remaining > 0:
        set_index = first_non_empty_set(payer)
        if set_index == -1:
            break
        payer, payee, card = move_top_card(payer, payee, set_index)
        remaining -= card.value
        paid += card.value
        log.insert(0, f"{payer.name} surrendered {card.name} to settle debt.")

    shortfall = max(remaining, 0)
    if shortfall:
        logger.debug(f"{payer.name} could not cover {shortfall}M of {amount}M owed to {payee.name}")

    return Settlement(
        payer=payer,
        payee=payee,
        logs=tuple(log),
        amount_paid=paid,
        shortfall=shortfall,
    )
