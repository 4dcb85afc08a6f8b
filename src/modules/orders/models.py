"""Order and OrderItem models.

Orders form an append-only log:
- Once inserted, an order (and its lines) is never updated or deleted by
  the application; ``save()`` on a stored row and ``delete()`` raise
  ``OrderImmutable``.
- Line items denormalize product name and strength so later catalog
  edits or deletions do not change history.
- ``quantity`` on a line is the quantity the stock ledger actually
  applied; ``requested_quantity`` keeps what the customer asked for.
"""

from __future__ import annotations

from typing import Any

import structlog
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.orders.exceptions import OrderImmutable
from shared.domain.events import DomainEventMixin

logger = structlog.get_logger(__name__)


class AppendOnlyModel(BaseModel):
    """Abstract model whose rows can be inserted but never changed."""

    class Meta:
        abstract = True

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self._state.adding:
            raise OrderImmutable(f"{self._meta.label} {self.pk} is append-only.")
        kwargs["force_insert"] = True
        super().save(*args, **kwargs)

    def delete(self, using=None, keep_parents=False):
        raise OrderImmutable(f"{self._meta.label} {self.pk} cannot be deleted.")


class Order(DomainEventMixin, AppendOnlyModel):
    """Order aggregate root, addressed externally by ``order_number``."""

    order_number: models.CharField = models.CharField(
        max_length=40, unique=True, editable=False
    )
    customer_name: models.CharField = models.CharField(max_length=255)
    store_name: models.CharField = models.CharField(max_length=255)
    email: models.EmailField = models.EmailField()
    phone: models.CharField = models.CharField(max_length=40)
    submitted_at: models.DateTimeField = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "orders"
        ordering = ["-submitted_at", "-order_number"]
        indexes = [
            models.Index(
                fields=["-submitted_at", "-order_number"],
                name="orders_submitted_idx",
            ),
        ]

    def __str__(self) -> str:
        return self.order_number


class OrderItem(AppendOnlyModel):
    """One cart line as committed.

    ``product`` uses PROTECT: catalog deletion is a soft delete, so the
    referenced row always survives.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product: models.ForeignKey = models.ForeignKey(
        "catalog.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    position: models.PositiveSmallIntegerField = models.PositiveSmallIntegerField()
    product_name: models.CharField = models.CharField(max_length=255)
    strength: models.CharField = models.CharField(max_length=60, blank=True, default="")
    quantity: models.PositiveIntegerField = models.PositiveIntegerField()
    requested_quantity: models.PositiveIntegerField = models.PositiveIntegerField()

    class Meta:
        db_table = "order_items"
        ordering = ["order", "position"]
        constraints = [
            models.UniqueConstraint(
                fields=["order", "position"],
                name="order_items_order_position_uniq",
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__lte=models.F("requested_quantity")),
                name="order_items_applied_lte_requested",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.product_name} ({self.strength}) x{self.quantity}"
