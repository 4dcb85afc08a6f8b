"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Missing products are reported as ``None`` (or absence from a mapping);
the Service Layer decides how to translate that into a domain error.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

import structlog
from django.db import transaction
from django.utils.text import slugify

from modules.catalog.models import Product
from modules.catalog.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

DEFAULT_ID_PREFIX = "product"


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        return Product.objects.alive().filter(pk=id).first()

    def get_for_update(self, id: str) -> Optional[Product]:
        return Product.objects.alive().select_for_update().filter(pk=id).first()

    def get_many(self, ids: Iterable[str]) -> Dict[str, Product]:
        wanted = {str(i) for i in ids}
        if not wanted:
            return {}
        return {p.id: p for p in Product.objects.alive().filter(pk__in=wanted)}

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        """List live products with optional Django ORM look-ups.

        Examples of valid filters::

            {"category": "Analgesics"}
            {"name__icontains": "para"}
        """
        queryset = Product.objects.alive()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_categories(self) -> List[str]:
        return list(
            Product.objects.alive()
            .order_by("category")
            .values_list("category", flat=True)
            .distinct()
        )

    def next_identifier(self, category: str) -> str:
        prefix = slugify(category) or DEFAULT_ID_PREFIX
        # Soft-deleted rows count too: identifiers are never reused.
        existing = Product.objects.filter(pk__startswith=f"{prefix}-").values_list(
            "pk", flat=True
        )
        highest = -1
        for pk in existing:
            suffix = pk[len(prefix) + 1 :]
            if suffix.isdigit():
                highest = max(highest, int(suffix))
        return f"{prefix}-{highest + 1}"

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product.

        New products are force-inserted so an identifier clash surfaces as
        ``IntegrityError`` instead of silently updating the existing row.
        """
        entity.save(force_insert=entity._state.adding)
        logger.info("product.saved", product_id=entity.id, category=entity.category)
        return entity

    @transaction.atomic
    def save_fields(self, entity: Product, fields: Sequence[str]) -> Product:
        """Update only ``fields``; every other column keeps its stored value."""
        entity.save(update_fields=list(fields))
        logger.info("product.saved", product_id=entity.id, fields=sorted(fields))
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Soft-delete a product by ID.

        Returns ``False`` when no live product has the given ID.
        """
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        logger.info("product.soft_deleted", product_id=id)
        return True
