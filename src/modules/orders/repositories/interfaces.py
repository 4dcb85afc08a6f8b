"""Order store interface.

Orders are append-only and read back by order number or as a
newest-first page, so this contract stands alone instead of extending
the generic repositories: one insert operation and the history reads.
The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from modules.orders.dtos import NewOrderDTO
    from modules.orders.models import Order


class IOrderRepository(ABC):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def append(self, data: NewOrderDTO) -> Order:
        """Insert an order with its lines and outbox events atomically.

        Raises:
            DuplicateOrderNumber: the order number is already stored.
        """

    @abstractmethod
    def list_recent(self, limit: int, offset: int = 0) -> List[Order]:
        """Return orders newest first, ``limit`` at a time from ``offset``."""

    @abstractmethod
    def count(self) -> int:
        """Total number of stored orders."""

    @abstractmethod
    def get_by_number(self, order_number: str) -> Optional[Order]:
        """Retrieve an order (with its lines) by order number."""
