"""Inventory domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import PersistenceUnavailable


class StockItemNotFound(Exception):
    """A decrement referenced a product that does not exist or was deleted."""

    def __init__(self, product_id: str) -> None:
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found.")


class StockContention(PersistenceUnavailable):
    """A stock row kept changing under us and the write never landed."""
