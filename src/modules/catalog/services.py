"""Catalog service layer (Use Cases).

Orchestrates catalog reads for the storefront and product maintenance for
administrators, delegating persistence to the injected
``IProductRepository``.

Rules enforced here:
- Identifiers are allocated from the category and never change.
- Edits lock the row and write only the supplied fields, so stock moves
  only through the ledger unless an edit sets it.
- Deleting a product hides it from the catalog; order history keeps it.
- Stock is never negative and the pack size is at least 1 (DTO).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import IntegrityError, transaction

from modules.catalog.exceptions import ProductAlreadyExists, ProductNotFound
from modules.catalog.models import Product

if TYPE_CHECKING:
    from modules.catalog.dtos import CreateProductDTO, UpdateProductDTO
    from modules.catalog.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class CatalogService:
    """Application service for catalog use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        """Create a product under a freshly allocated identifier.

        Raises:
            ProductAlreadyExists: if a concurrent create took the identifier.
        """
        product = Product(
            id=self._repo.next_identifier(dto.category),
            name=dto.name,
            category=dto.category,
            strength=dto.strength,
            stock=dto.stock,
            multiple_of=dto.multiple_of,
        )
        try:
            product = self._repo.save(product)
        except IntegrityError as exc:
            logger.warning("product.identifier_clash", product_id=product.id)
            raise ProductAlreadyExists(
                f"Product '{product.id}' already exists; retry the request."
            ) from exc
        logger.info("product.created", product_id=product.id, stock=product.stock)
        return product

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """Apply the supplied fields to a live product.

        Raises:
            ProductNotFound: if the product does not exist or was deleted.
        """
        product = self._repo.get_for_update(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")

        changes = dto.changes()
        if not changes:
            return product
        for field, value in changes.items():
            setattr(product, field, value)

        product = self._repo.save_fields(product, list(changes))
        logger.info("product.updated", product_id=id, fields=sorted(changes))
        return product

    @transaction.atomic
    def delete_product(self, id: str) -> None:
        """Soft-delete a product.

        Raises:
            ProductNotFound: if the product does not exist or was deleted.
        """
        if not self._repo.delete(id):
            raise ProductNotFound(f"Product {id} not found.")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        return self._repo.list(filters)

    def get_product(self, id: str) -> Product:
        """Retrieve a single live product.

        Raises:
            ProductNotFound: if the product does not exist or was deleted.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

    def list_categories(self) -> List[str]:
        return self._repo.list_categories()
