"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderConfirmed(DomainEvent):
    """Raised when an order and its stock decrement have been committed.

    Drives invoice rendering and notification after commit.
    """

    order_number: str = ""
