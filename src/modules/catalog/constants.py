"""Catalog constants and the derived stock status.

Status is a pure function of stock and is never stored.
"""

from django.db import models

LOW_STOCK_THRESHOLD = 20


class StockStatus(models.TextChoices):
    IN_STOCK = "In Stock", "In Stock"
    LOW_STOCK = "Low Stock", "Low Stock"
    OUT_OF_STOCK = "Out of Stock", "Out of Stock"


def stock_status_for(stock: int) -> StockStatus:
    """Return the display status for a stock level."""
    if stock <= 0:
        return StockStatus.OUT_OF_STOCK
    if stock < LOW_STOCK_THRESHOLD:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK
