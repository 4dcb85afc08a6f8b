"""Django ORM implementation of the order store.

``append`` inserts the order, its lines and the outbox rows for its
domain events in one ``transaction.atomic()`` block, so an order is
never visible without the events that drive its invoice.
"""

from __future__ import annotations

from typing import List, Optional

import structlog
from django.db import IntegrityError, transaction

from modules.core.models import OutboxEvent
from modules.orders.constants import OUTBOX_TOPIC
from modules.orders.dtos import NewOrderDTO
from modules.orders.events import OrderConfirmed
from modules.orders.exceptions import DuplicateOrderNumber
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete order store backed by Django ORM."""

    # ------------------------------------------------------------------
    # Append
    # ------------------------------------------------------------------

    def append(self, data: NewOrderDTO) -> Order:
        log = logger.bind(order_number=data.order_number)
        if Order.objects.filter(order_number=data.order_number).exists():
            log.warning("order.duplicate_number")
            raise DuplicateOrderNumber(f"Order {data.order_number} already exists.")

        try:
            with transaction.atomic():
                order = Order(
                    order_number=data.order_number,
                    customer_name=data.customer_name,
                    store_name=data.store_name,
                    email=data.email,
                    phone=data.phone,
                    submitted_at=data.submitted_at,
                )
                order.save()
                OrderItem.objects.bulk_create(
                    OrderItem(
                        order=order,
                        position=position,
                        product_id=line.product_id,
                        product_name=line.product_name,
                        strength=line.strength,
                        quantity=line.quantity,
                        requested_quantity=line.requested_quantity,
                    )
                    for position, line in enumerate(data.lines)
                )
                order.add_domain_event(
                    OrderConfirmed(aggregate_id=order.id, order_number=order.order_number)
                )
                event_count = self._write_outbox(order)
        except IntegrityError as exc:
            if Order.objects.filter(order_number=data.order_number).exists():
                log.warning("order.duplicate_number", source="constraint")
                raise DuplicateOrderNumber(
                    f"Order {data.order_number} already exists."
                ) from exc
            raise

        log.info("order.appended", line_count=len(data.lines), event_count=event_count)
        return order

    def _write_outbox(self, order: Order) -> int:
        events = order.domain_events
        OutboxEvent.objects.bulk_create(
            OutboxEvent(
                event_type=event.event_name,
                aggregate_id=str(event.aggregate_id),
                payload=event.to_payload(),
                topic=OUTBOX_TOPIC,
            )
            for event in events
        )
        order.clear_domain_events()
        return len(events)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_number(self, order_number: str) -> Optional[Order]:
        return (
            Order.objects.prefetch_related("items")
            .filter(order_number=order_number)
            .first()
        )

    def list_recent(self, limit: int, offset: int = 0) -> List[Order]:
        queryset = Order.objects.prefetch_related("items").order_by(
            "-submitted_at", "-order_number"
        )
        return list(queryset[offset : offset + limit])

    def count(self) -> int:
        return Order.objects.count()
