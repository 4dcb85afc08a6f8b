"""Invoice rendering, retention, delivery and dispatch.

``InvoiceDispatcher.dispatch`` is the unit of work run after an order is
confirmed: render the invoice, write it to storage, email it, then record
the outcome on the order's outbox row.  Every step is safe to repeat:

- Rendering is a pure function of the stored order.
- Storage overwrites ``<prefix>/<order_number>.html``.
- An outbox row already marked ``PUBLISHED`` is not re-sent unless forced.
"""

from __future__ import annotations

import smtplib
from typing import TYPE_CHECKING, List, Optional

import structlog
from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import Storage, default_storage
from django.core.mail import EmailMessage
from django.template.loader import render_to_string

from modules.core.models import EventStatus, OutboxEvent
from modules.invoices.constants import (
    EMAIL_BODY_TEMPLATE,
    EMAIL_SUBJECT,
    INVOICE_TEMPLATE,
    OUTBOX_EVENT_TYPE,
    DeliveryStatus,
)
from modules.invoices.dtos import DeliveryResult, DispatchOutcome, InvoiceDocument
from modules.orders.exceptions import OrderNotFound
from modules.orders.repositories.django_repository import OrderDjangoRepository

if TYPE_CHECKING:
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


def _context(order: Order) -> dict:
    return {
        "order": order,
        "items": list(order.items.all()),
        "submitted_at": order.submitted_at.isoformat(),
    }


class InvoiceRenderer:
    def render(self, order: Order) -> InvoiceDocument:
        content = render_to_string(INVOICE_TEMPLATE, _context(order))
        return InvoiceDocument(order_number=order.order_number, content=content)


class InvoiceArchive:
    """Keeps the latest rendering of each invoice in a Django storage."""

    def __init__(self, storage: Optional[Storage] = None, prefix: Optional[str] = None) -> None:
        self._storage = storage or default_storage
        self._prefix = prefix or settings.INVOICE_STORAGE_PREFIX

    def path_for(self, order_number: str) -> str:
        return f"{self._prefix}/{order_number}.html"

    def store(self, document: InvoiceDocument) -> str:
        path = self.path_for(document.order_number)
        # Storage.save() renames on collision; delete first to overwrite.
        if self._storage.exists(path):
            self._storage.delete(path)
        saved = self._storage.save(path, ContentFile(document.content.encode("utf-8")))
        logger.info("invoice.stored", order_number=document.order_number, path=saved)
        return saved

    def load(self, order_number: str) -> Optional[str]:
        path = self.path_for(order_number)
        if not self._storage.exists(path):
            return None
        with self._storage.open(path, "rb") as fh:
            return fh.read().decode("utf-8")


class InvoiceDeliverer:
    """Emails an invoice to the customer and the operator mailbox."""

    def is_configured(self) -> bool:
        return bool(settings.EMAIL_HOST_USER and settings.EMAIL_HOST_PASSWORD)

    def recipients_for(self, order: Order) -> List[str]:
        recipients = [order.email]
        operator = settings.INVOICE_OPERATOR_EMAIL
        if operator and operator not in recipients:
            recipients.append(operator)
        return recipients

    def deliver(self, document: InvoiceDocument, order: Order) -> DeliveryResult:
        recipients = self.recipients_for(order)
        log = logger.bind(order_number=order.order_number)

        if not self.is_configured():
            log.info("invoice.delivery_skipped", reason="email_not_configured")
            return DeliveryResult(
                status=DeliveryStatus.SKIPPED,
                recipients=recipients,
                error="Email credentials are not configured.",
            )

        message = EmailMessage(
            subject=EMAIL_SUBJECT.format(order_number=order.order_number),
            body=render_to_string(
                EMAIL_BODY_TEMPLATE,
                {**_context(order), "signature": settings.INVOICE_EMAIL_SIGNATURE},
            ),
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=recipients,
        )
        message.attach(document.filename, document.content, document.content_type)

        try:
            message.send(fail_silently=False)
        except (smtplib.SMTPException, OSError) as exc:
            log.error("invoice.delivery_failed", error=str(exc), error_type=type(exc).__name__)
            return DeliveryResult(
                status=DeliveryStatus.FAILED,
                recipients=recipients,
                error=f"{type(exc).__name__}: {exc}",
            )

        log.info("invoice.delivered", recipient_count=len(recipients))
        return DeliveryResult(status=DeliveryStatus.SENT, recipients=recipients)


class InvoiceDispatcher:
    """Render, retain and deliver the invoice for one confirmed order.

    Collaborators are injected (DIP); defaults are the Django-backed ones.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        renderer: Optional[InvoiceRenderer] = None,
        archive: Optional[InvoiceArchive] = None,
        deliverer: Optional[InvoiceDeliverer] = None,
    ) -> None:
        self._order_repo = order_repository
        self._renderer = renderer or InvoiceRenderer()
        self._archive = archive or InvoiceArchive()
        self._deliverer = deliverer or InvoiceDeliverer()

    def dispatch(self, order_number: str, force: bool = False) -> DispatchOutcome:
        """Run the invoice pipeline for ``order_number``.

        Raises:
            OrderNotFound: no order has this number.
        """
        log = logger.bind(order_number=order_number, force=force)
        order = self._order_repo.get_by_number(order_number)
        if not order:
            raise OrderNotFound(f"Order {order_number} not found.")

        event = self._outbox_event(order)
        if event is None:
            log.warning("invoice.outbox_event_missing")
        elif event.status == EventStatus.PUBLISHED and not force:
            log.info("invoice.already_delivered")
            return DispatchOutcome(
                order_number=order_number,
                invoice_path=self._archive.path_for(order_number),
                outbox_status=event.status,
            )

        document = self._renderer.render(order)
        try:
            path = self._archive.store(document)
        except OSError as exc:
            log.error("invoice.storage_failed", error=str(exc))
            result = DeliveryResult(
                status=DeliveryStatus.FAILED,
                recipients=self._deliverer.recipients_for(order),
                error=f"Invoice storage failed: {exc}",
            )
            return self._record(order_number, event, result, path=None)

        result = self._deliverer.deliver(document, order)
        return self._record(order_number, event, result, path=path)

    def _outbox_event(self, order: Order) -> Optional[OutboxEvent]:
        return (
            OutboxEvent.objects.filter(
                aggregate_id=str(order.id), event_type=OUTBOX_EVENT_TYPE
            )
            .order_by("created_at")
            .first()
        )

    def _record(
        self,
        order_number: str,
        event: Optional[OutboxEvent],
        result: DeliveryResult,
        path: Optional[str],
    ) -> DispatchOutcome:
        if event is not None:
            if result.status == DeliveryStatus.SENT:
                event.mark_as_published()
            elif result.status == DeliveryStatus.SKIPPED:
                event.mark_as_skipped(result.error or "")
            else:
                event.mark_as_failed(result.error or "")

        logger.info(
            "invoice.dispatched",
            order_number=order_number,
            delivery_status=result.status,
            outbox_status=event.status if event else None,
        )
        return DispatchOutcome(
            order_number=order_number,
            invoice_path=path,
            delivery=result,
            outbox_status=event.status if event else None,
        )


def build_dispatcher() -> InvoiceDispatcher:
    return InvoiceDispatcher(order_repository=OrderDjangoRepository())
