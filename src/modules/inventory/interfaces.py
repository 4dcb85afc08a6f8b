"""Inventory ledger contract (Dependency Inversion Principle).

The order submission flow depends on this abstraction so the storage
engine behind stock counters can change without touching it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List

from modules.inventory.dtos import AppliedDecrement, StockDecrement


class IStockLedger(ABC):
    @abstractmethod
    def apply_decrements(self, items: Iterable[StockDecrement]) -> List[AppliedDecrement]:
        """Apply every decrement as one atomic unit.

        Each line sets ``stock = max(0, stock - quantity)``.  Results are
        returned in the same order as ``items``.

        Raises:
            StockItemNotFound: a product does not exist or was deleted.
            PersistenceUnavailable: the store is unreachable or timed out.
        """
