"""Celery tasks for invoice dispatch."""

import structlog
from celery import shared_task

from modules.invoices.services import build_dispatcher

logger = structlog.get_logger(__name__)


@shared_task(name="invoices.dispatch_order_invoice")
def dispatch_order_invoice(order_number: str, force: bool = False) -> dict:
    """Render, store and email the invoice for a confirmed order.

    Delivery failures are recorded on the order's outbox row rather than
    raised, so the task only fails on unexpected errors.
    """
    outcome = build_dispatcher().dispatch(order_number, force=force)
    logger.info(
        "invoice.task_completed",
        order_number=order_number,
        outbox_status=outcome.outbox_status,
    )
    return outcome.model_dump(mode="json")
