"""Invoice DTOs (immutable Pydantic v2 models)."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from modules.invoices.constants import INVOICE_CONTENT_TYPE, DeliveryStatus


class InvoiceDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_number: str
    content: str
    content_type: str = INVOICE_CONTENT_TYPE

    @property
    def filename(self) -> str:
        return f"{self.order_number}.html"


class DeliveryResult(BaseModel):
    """Outcome of one delivery attempt; ``error`` explains SKIPPED / FAILED."""

    model_config = ConfigDict(frozen=True)

    status: DeliveryStatus
    recipients: List[str]
    error: Optional[str] = None


class DispatchOutcome(BaseModel):
    """What ``InvoiceDispatcher.dispatch`` did for one order.

    ``delivery`` is ``None`` when the invoice had already been delivered
    and the run was not forced.
    """

    model_config = ConfigDict(frozen=True)

    order_number: str
    invoice_path: Optional[str] = None
    delivery: Optional[DeliveryResult] = None
    outbox_status: Optional[str] = None

    @property
    def already_delivered(self) -> bool:
        return self.delivery is None
