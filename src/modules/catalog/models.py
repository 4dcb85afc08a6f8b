"""Catalog product model.

Products are identified by a readable ``<category-slug>-<n>`` key that is
assigned once at creation and never reused, even after a soft delete, so
historical order lines keep pointing at a single product.
"""

from __future__ import annotations

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.catalog.constants import StockStatus, stock_status_for
from modules.core.models import SoftDeleteModel

logger = structlog.get_logger(__name__)


class Product(SoftDeleteModel):
    """Sellable catalog item with a live stock counter.

    ``stock`` is only ever decremented through the inventory ledger;
    ``multiple_of`` is the ordering granularity (pack size).
    """

    id = models.CharField(primary_key=True, max_length=80, editable=False)
    name = models.CharField(max_length=255)
    category = models.CharField(max_length=120, db_index=True)
    strength = models.CharField(max_length=60, blank=True, default="")
    stock = models.PositiveIntegerField(default=0)
    multiple_of = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
    )

    class Meta:
        db_table = "products"
        ordering = ["category", "name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(multiple_of__gte=1),
                name="products_multiple_of_positive",
            ),
        ]

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def stock_status(self) -> StockStatus:
        return stock_status_for(self.stock)

    @property
    def is_orderable(self) -> bool:
        return not self.is_deleted and self.stock > 0

    def accepts_quantity(self, quantity: int) -> bool:
        """``True`` when ``quantity`` is a positive multiple of the pack size."""
        return quantity > 0 and quantity % self.multiple_of == 0

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.multiple_of is not None and self.multiple_of < 1:
            raise ValidationError({"multiple_of": "Pack size must be at least 1."})
        if not (self.category or "").strip():
            raise ValidationError({"category": "Category must not be empty."})

    def __str__(self) -> str:
        return f"{self.id} - {self.name}"
