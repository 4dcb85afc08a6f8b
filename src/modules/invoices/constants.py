"""Invoice dispatch constants."""

from django.db import models


class DeliveryStatus(models.TextChoices):
    SENT = "SENT", "Sent"
    SKIPPED = "SKIPPED", "Skipped"
    FAILED = "FAILED", "Failed"


INVOICE_CONTENT_TYPE = "text/html"
INVOICE_TEMPLATE = "invoices/invoice.html"
EMAIL_BODY_TEMPLATE = "invoices/email_body.txt"
EMAIL_SUBJECT = "Order Confirmation - {order_number}"

OUTBOX_EVENT_TYPE = "OrderConfirmed"
