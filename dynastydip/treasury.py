"""
The player's gold lives in the host's resource ledger. The diplomacy core only
talks to it through the ``Treasury`` protocol below.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class Treasury(Protocol):
    @property
    def gold(self) -> float: ...

    def credit_gold(self, amount: float) -> None: ...

    def debit_gold(self, amount: float) -> bool: ...


class GoldLedger:
    """Minimal in-process treasury used by the CLI runner and the HTTP host."""

    def __init__(self, gold: float = 0) -> None:
        self._gold = float(gold)

    @property
    def gold(self) -> float:
        return self._gold

    def credit_gold(self, amount: float) -> None:
        if amount < 0:
            raise ValueError(f"Cannot credit a negative amount ({amount}).")
        self._gold += amount
        logger.debug("Treasury credited %.1f gold (balance %.1f)", amount, self._gold)

    def debit_gold(self, amount: float) -> bool:
        if amount < 0:
            raise ValueError(f"Cannot debit a negative amount ({amount}).")
        if amount > self._gold:
            return False
        self._gold -= amount
        logger.debug("Treasury debited %.1f gold (balance %.1f)", amount, self._gold)
        return True
