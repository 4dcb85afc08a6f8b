"""Order domain constants."""

from django.db import models


class SubmissionStatus(models.TextChoices):
    CONFIRMED = "CONFIRMED", "Confirmed"
    REJECTED = "REJECTED", "Rejected"


ORDER_NUMBER_PREFIX = "ORD"

OUTBOX_TOPIC = "orders"

# Hard ceiling on one page of order history.
ORDER_HISTORY_MAX_LIMIT = 1000
