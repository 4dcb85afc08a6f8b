"""Event handlers that start invoice dispatch."""

from __future__ import annotations

import structlog
from kombu.exceptions import OperationalError as BrokerUnavailable

from modules.invoices.tasks import dispatch_order_invoice
from modules.orders.events import OrderConfirmed
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderConfirmedHandler(IEventHandler[OrderConfirmed]):
    """Queue invoice dispatch for a newly confirmed order.

    If the broker is down the outbox row stays ``PENDING`` and the
    ``redeliver_invoices`` command picks it up later.
    """

    def handle(self, event: OrderConfirmed) -> None:
        try:
            dispatch_order_invoice.delay(event.order_number)
        except BrokerUnavailable as exc:
            logger.warning(
                "invoice.enqueue_failed",
                order_number=event.order_number,
                error=str(exc),
            )
            return
        logger.info("invoice.enqueued", order_number=event.order_number)


order_confirmed_handler = OrderConfirmedHandler()
