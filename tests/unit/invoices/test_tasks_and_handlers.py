from unittest.mock import patch

from kombu.exceptions import OperationalError as BrokerUnavailable

from modules.core.models import EventStatus, OutboxEvent
from modules.invoices.handlers import OrderConfirmedHandler, order_confirmed_handler
from modules.invoices.tasks import dispatch_order_invoice
from modules.orders.events import OrderConfirmed
from shared.infrastructure.bus import event_bus


class TestDispatchTask:
    def test_runs_dispatch_and_returns_outcome(self, confirmed_order):
        result = dispatch_order_invoice.delay(confirmed_order.order_number).get()

        assert result["order_number"] == confirmed_order.order_number
        assert result["delivery"]["status"] == "SKIPPED"
        assert result["outbox_status"] == "SKIPPED"


class TestOrderConfirmedHandler:
    def test_subscribed_on_startup(self):
        assert order_confirmed_handler in event_bus.handlers_for(OrderConfirmed)

    def test_enqueues_dispatch(self, confirmed_order):
        event = OrderConfirmed(
            aggregate_id=confirmed_order.id, order_number=confirmed_order.order_number
        )

        with patch("modules.invoices.handlers.dispatch_order_invoice.delay") as delay:
            OrderConfirmedHandler().handle(event)

        delay.assert_called_once_with(confirmed_order.order_number)

    def test_broker_outage_leaves_event_pending(self, confirmed_order):
        event = OrderConfirmed(
            aggregate_id=confirmed_order.id, order_number=confirmed_order.order_number
        )

        with patch(
            "modules.invoices.handlers.dispatch_order_invoice.delay",
            side_effect=BrokerUnavailable("connection refused"),
        ):
            OrderConfirmedHandler().handle(event)

        outbox = OutboxEvent.objects.get(aggregate_id=str(confirmed_order.id))
        assert outbox.status == EventStatus.PENDING
