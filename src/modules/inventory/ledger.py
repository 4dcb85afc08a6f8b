"""Django ORM stock ledger.

Lines are processed in product-id order so two carts touching the same
products always lock them in the same sequence.  Each line locks its
row (``SELECT ... FOR UPDATE``) and then writes with a compare-and-set on
the value it read; on backends where row locks are a no-op (SQLite) the
compare-and-set still guarantees no decrement is lost.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

import structlog
from django.db import InterfaceError, OperationalError, transaction
from django.utils import timezone

from modules.catalog.models import Product
from modules.core.exceptions import PersistenceUnavailable
from modules.inventory.dtos import AppliedDecrement, StockDecrement
from modules.inventory.exceptions import StockContention, StockItemNotFound
from modules.inventory.interfaces import IStockLedger

logger = structlog.get_logger(__name__)

MAX_WRITE_ATTEMPTS = 10


class DjangoStockLedger(IStockLedger):
    """``IStockLedger`` backed by the ``products.stock`` column."""

    def __init__(self, max_attempts: int = MAX_WRITE_ATTEMPTS) -> None:
        self._max_attempts = max_attempts

    def apply_decrements(self, items: Iterable[StockDecrement]) -> List[AppliedDecrement]:
        lines = list(items)
        if not lines:
            return []

        order = sorted(range(len(lines)), key=lambda i: lines[i].product_id)
        results: List[Optional[AppliedDecrement]] = [None] * len(lines)
        try:
            with transaction.atomic():
                for index in order:
                    results[index] = self._apply(lines[index])
        except (OperationalError, InterfaceError) as exc:
            logger.warning("inventory.store_unavailable", error=str(exc))
            raise PersistenceUnavailable("Stock store unavailable.") from exc
        return results

    def _apply(self, line: StockDecrement) -> AppliedDecrement:
        alive = Product.objects.alive().filter(pk=line.product_id)
        for attempt in range(1, self._max_attempts + 1):
            current = alive.select_for_update().values_list("stock", flat=True).first()
            if current is None:
                raise StockItemNotFound(line.product_id)

            remaining = max(0, current - line.quantity)
            written = alive.filter(stock=current).update(
                stock=remaining, updated_at=timezone.now()
            )
            if written:
                result = AppliedDecrement(
                    product_id=line.product_id,
                    requested=line.quantity,
                    applied=current - remaining,
                    stock_before=current,
                    stock_after=remaining,
                )
                logger.info(
                    "inventory.decrement_applied",
                    product_id=line.product_id,
                    requested=result.requested,
                    applied=result.applied,
                    stock_after=remaining,
                    clamped=result.clamped,
                )
                return result
            logger.debug(
                "inventory.decrement_retry",
                product_id=line.product_id,
                attempt=attempt,
            )

        logger.warning("inventory.contention", product_id=line.product_id)
        raise StockContention(
            f"Stock for {line.product_id} changed {self._max_attempts} times in a row."
        )
