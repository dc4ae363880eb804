"""Economy — the gold balance collaborator of the progression store.

The store only needs the :class:`EconomyPort` contract; :class:`Wallet`
is the in-process implementation used by the game and the tests.
"""

from __future__ import annotations

import logging
from typing import Protocol

log = logging.getLogger(__name__)


class EconomyPort(Protocol):
    """Balance operations the progression store relies on."""

    def get_balance(self) -> int: ...

    def set_balance(self, amount: int) -> None: ...

    def add_money(self, amount: int) -> None: ...

    def try_spend_money(self, amount: int) -> bool: ...


class Wallet:
    """Holds the player's gold.

    Args:
        balance: Starting balance; negative values are raised to 0.
    """

    def __init__(self, balance: int = 0) -> None:
        self._balance = max(0, int(balance))

    def get_balance(self) -> int:
        return self._balance

    def set_balance(self, amount: int) -> None:
        self._balance = max(0, int(amount))

    def add_money(self, amount: int) -> None:
        """Add *amount* gold. Non-positive amounts are ignored."""
        if amount <= 0:
            return
        self._balance += int(amount)

    def try_spend_money(self, amount: int) -> bool:
        """Spend *amount* gold if the balance covers it. Never spends partially."""
        if amount < 0:
            return False
        if amount > self._balance:
            log.info("Not enough gold (need %d, have %d)", amount, self._balance)
            return False
        self._balance -= int(amount)
        return True
