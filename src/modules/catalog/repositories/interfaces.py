"""Product repository interface.

Extends ``IRepository[Product]`` with the look-ups the storefront and the
order submission flow need: batched reads, the category index and
identifier allocation.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Sequence

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.catalog.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for catalog products.

    Every read returns live products only; soft-deleted rows are visible
    to ``next_identifier`` alone, so identifiers are never reissued.
    """

    @abstractmethod
    def get_for_update(self, id: str) -> Optional["Product"]:
        """Return a live product with its row locked until the transaction ends."""

    @abstractmethod
    def save_fields(self, entity: "Product", fields: Sequence[str]) -> "Product":
        """Write only ``fields`` of an existing product."""

    @abstractmethod
    def get_many(self, ids: Iterable[str]) -> Dict[str, "Product"]:
        """Return live products keyed by id; unknown ids are simply absent."""

    @abstractmethod
    def list_categories(self) -> List[str]:
        """Distinct categories of live products, sorted ascending."""

    @abstractmethod
    def next_identifier(self, category: str) -> str:
        """Allocate the next ``<category-slug>-<n>`` identifier."""
