from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from modules.core.models import RETRYABLE_STATES, OutboxEvent
from modules.invoices.constants import OUTBOX_EVENT_TYPE
from modules.invoices.services import build_dispatcher
from modules.orders.exceptions import OrderNotFound


class Command(BaseCommand):
    help = "Re-run invoice dispatch for orders whose invoice was not delivered."

    def add_arguments(self, parser):
        parser.add_argument("--order", help="Only this order number.")
        parser.add_argument(
            "--force",
            action="store_true",
            help="Re-send even if the invoice was already delivered.",
        )
        parser.add_argument(
            "--limit",
            type=int,
            default=100,
            help="Maximum number of pending or failed orders to process.",
        )

    def handle(self, *args, **options):
        order_numbers = self._select(options["order"], options["limit"])
        if not order_numbers:
            self.stdout.write("Nothing to redeliver.")
            return

        dispatcher = build_dispatcher()
        counts: dict[str, int] = {}
        for order_number in order_numbers:
            try:
                outcome = dispatcher.dispatch(order_number, force=options["force"])
            except OrderNotFound as exc:
                if options["order"]:
                    raise CommandError(str(exc)) from exc
                self.stderr.write(f"{order_number}: not found")
                continue
            status = str(outcome.delivery.status) if outcome.delivery else "ALREADY_DELIVERED"
            counts[status] = counts.get(status, 0) + 1
            self.stdout.write(f"{order_number}: {status}")

        summary = ", ".join(f"{key.lower()}={value}" for key, value in sorted(counts.items()))
        self.stdout.write(self.style.SUCCESS(f"Redelivery completed: {summary}"))

    def _select(self, order_number: str | None, limit: int) -> list[str]:
        if order_number:
            return [order_number]
        events = OutboxEvent.objects.filter(
            event_type=OUTBOX_EVENT_TYPE,
            status__in=RETRYABLE_STATES,
        ).order_by("created_at")[:limit]
        return [event.payload["order_number"] for event in events]
