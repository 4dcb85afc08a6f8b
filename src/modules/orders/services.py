"""Order service layer (Use Cases).

``OrderSubmissionService`` is the submission workflow:

1. Validate the cart against the live catalog (no stock is reserved).
2. Generate an order number.
3. Commit the stock decrements and the order append as one
   ``transaction.atomic()`` unit; the order records the *applied*
   quantities, which may be lower than requested when stock ran short.
4. Return the confirmation.
5. After commit, publish ``OrderConfirmed`` so the invoice dispatcher can
   run.  Nothing that happens there changes the returned result.

``OrderHistoryService`` serves the admin read side.
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional, Tuple

import structlog
from django.db import DatabaseError, InterfaceError, OperationalError, transaction
from django.utils import timezone
from pydantic import ValidationError as PydanticValidationError

from modules.core.exceptions import PersistenceUnavailable
from modules.inventory.dtos import StockDecrement
from modules.inventory.exceptions import StockItemNotFound
from modules.orders.constants import ORDER_HISTORY_MAX_LIMIT, SubmissionStatus
from modules.orders.dtos import (
    NewOrderDTO,
    NewOrderLineDTO,
    SubmissionLineDTO,
    SubmissionResult,
    SubmitOrderDTO,
    validation_errors,
)
from modules.orders.events import OrderConfirmed
from modules.orders.exceptions import (
    CommitFailed,
    DuplicateOrderNumber,
    OrderNotFound,
    ValidationFailed,
)
from modules.orders.order_numbers import generate_order_number
from shared.infrastructure.bus import event_bus as default_event_bus

if TYPE_CHECKING:
    from modules.catalog.models import Product
    from modules.catalog.repositories.interfaces import IProductRepository
    from modules.inventory.interfaces import IStockLedger
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)


class OrderSubmissionService:
    """Application service for order submission.

    Receives its collaborators via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        stock_ledger: IStockLedger,
        event_bus: Optional[IEventBus] = None,
        order_numbers: Callable[[], str] = generate_order_number,
    ) -> None:
        self._order_repo = order_repository
        self._product_repo = product_repository
        self._ledger = stock_ledger
        self._event_bus = event_bus or default_event_bus
        self._order_numbers = order_numbers

    def submit_order(self, data: Mapping[str, Any] | SubmitOrderDTO) -> SubmissionResult:
        """Validate, commit and confirm one order.

        Raises:
            ValidationFailed: bad customer details or cart; nothing changed.
            CommitFailed: the decrement or append failed; rolled back.
            PersistenceUnavailable: the store is down or timed out; rolled back.
        """
        dto = self._parse(data)
        log = logger.bind(line_count=len(dto.items))
        log.info("order.submission_started")

        products = self._check_catalog(dto)
        order_number = self._order_numbers()
        log = log.bind(order_number=order_number)

        try:
            with transaction.atomic():
                applied = self._ledger.apply_decrements(
                    StockDecrement(product_id=line.product_id, quantity=line.quantity)
                    for line in dto.items
                )
                order = self._order_repo.append(
                    NewOrderDTO(
                        order_number=order_number,
                        customer_name=dto.customer_name,
                        store_name=dto.store_name,
                        email=dto.email,
                        phone=dto.phone,
                        submitted_at=timezone.now(),
                        lines=[
                            NewOrderLineDTO(
                                product_id=result.product_id,
                                product_name=products[result.product_id].name,
                                strength=products[result.product_id].strength,
                                quantity=result.applied,
                                requested_quantity=result.requested,
                            )
                            for result in applied
                        ],
                    )
                )
                transaction.on_commit(
                    partial(
                        self._publish,
                        OrderConfirmed(aggregate_id=order.id, order_number=order_number),
                    ),
                    robust=True,
                )
        except PersistenceUnavailable:
            log.warning("order.persistence_unavailable")
            raise
        except (OperationalError, InterfaceError) as exc:
            log.warning("order.persistence_unavailable", error=str(exc))
            raise PersistenceUnavailable("Order store unavailable.") from exc
        except (DuplicateOrderNumber, StockItemNotFound, DatabaseError) as exc:
            log.error("order.commit_failed", error=str(exc), error_type=type(exc).__name__)
            raise CommitFailed(f"Order could not be committed: {exc}") from exc

        lines = [
            SubmissionLineDTO(
                product_id=result.product_id,
                requested=result.requested,
                applied=result.applied,
                stock_after=result.stock_after,
            )
            for result in applied
        ]
        submission = SubmissionResult(
            order_number=order_number,
            status=SubmissionStatus.CONFIRMED,
            lines=lines,
            order=order,
        )
        log.info("order.confirmed", clamped=submission.clamped)
        return submission

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _parse(self, data: Mapping[str, Any] | SubmitOrderDTO) -> SubmitOrderDTO:
        if isinstance(data, SubmitOrderDTO):
            return data
        try:
            return SubmitOrderDTO.model_validate(data)
        except PydanticValidationError as exc:
            errors = validation_errors(exc)
            logger.info("order.validation_failed", fields=sorted(errors))
            raise ValidationFailed(errors) from exc

    def _check_catalog(self, dto: SubmitOrderDTO) -> Dict[str, Product]:
        """Check every line against the live catalog.

        Reads current state without locking it; a line that races with
        another order is resolved by the ledger's clamp.
        """
        products = self._product_repo.get_many(line.product_id for line in dto.items)
        errors: Dict[str, List[str]] = {}
        for index, line in enumerate(dto.items):
            product = products.get(line.product_id)
            if product is None:
                errors[f"items.{index}.product_id"] = [
                    f"Unknown product '{line.product_id}'."
                ]
            elif product.stock == 0:
                errors[f"items.{index}.product_id"] = [f"{product.name} is out of stock."]
            elif not product.accepts_quantity(line.quantity):
                errors[f"items.{index}.quantity"] = [
                    f"Quantity for {product.name} must be a multiple of "
                    f"{product.multiple_of}."
                ]
        if errors:
            logger.info("order.validation_failed", fields=sorted(errors))
            raise ValidationFailed(errors)
        return products

    def _publish(self, event: OrderConfirmed) -> None:
        """Hand the confirmed order to the dispatcher; never raises."""
        try:
            self._event_bus.publish(event)
        except Exception:
            logger.exception("order.dispatch_failed", order_number=event.order_number)
        else:
            logger.info("order.dispatch_requested", order_number=event.order_number)


class OrderHistoryService:
    """Read side of the order store for administrators."""

    def __init__(self, order_repository: IOrderRepository) -> None:
        self._order_repo = order_repository

    def list_orders(self, limit: int, offset: int = 0) -> Tuple[List[Order], int]:
        """Return one page of orders, newest first, and the total count."""
        limit = max(0, min(limit, ORDER_HISTORY_MAX_LIMIT))
        offset = max(0, offset)
        return self._order_repo.list_recent(limit, offset), self._order_repo.count()

    def get_order(self, order_number: str) -> Order:
        """Retrieve an order and its lines by order number.

        Raises:
            OrderNotFound: no order has this number.
        """
        order = self._order_repo.get_by_number(order_number)
        if not order:
            raise OrderNotFound(f"Order {order_number} not found.")
        return order
