"""Unit tests for domain event primitives and the in-memory bus."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

import pytest

from modules.orders.events import OrderConfirmed
from modules.orders.models import Order
from shared.infrastructure.bus import InMemoryEventBus

pytestmark = pytest.mark.unit


class _Recorder:
    def __init__(self):
        self.events = []

    def handle(self, event):
        self.events.append(event)


def test_order_registers_and_clears_domain_events():
    order = Order(order_number="ORD-1-000-AAAA")
    assert order.domain_events == []

    event = OrderConfirmed(aggregate_id=order.id, order_number=order.order_number)
    order.add_domain_event(event)

    assert order.domain_events == [event]
    assert event.event_name == "OrderConfirmed"

    order.clear_domain_events()
    assert order.domain_events == []


def test_payload_is_json_safe():
    aggregate_id = uuid4()
    payload = OrderConfirmed(aggregate_id=aggregate_id, order_number="ORD-1").to_payload()

    assert payload["aggregate_id"] == str(aggregate_id)
    assert payload["order_number"] == "ORD-1"
    assert payload["event_name"] == "OrderConfirmed"
    UUID(payload["event_id"])
    datetime.fromisoformat(payload["occurred_on"])


class TestInMemoryEventBus:
    def test_publish_reaches_subscribers_of_that_type_only(self):
        bus = InMemoryEventBus()
        recorder = _Recorder()
        bus.subscribe(OrderConfirmed, recorder)
        bus.subscribe(OrderConfirmed, recorder)

        event = OrderConfirmed(aggregate_id=uuid4(), order_number="ORD-1")
        bus.publish(event)

        assert recorder.events == [event]
        assert bus.handlers_for(OrderConfirmed) == [recorder]

    def test_unsubscribe(self):
        bus = InMemoryEventBus()
        recorder = _Recorder()
        bus.subscribe(OrderConfirmed, recorder)
        bus.unsubscribe(OrderConfirmed, recorder)

        bus.publish(OrderConfirmed(aggregate_id=uuid4()))

        assert recorder.events == []

    def test_handler_errors_propagate(self):
        bus = InMemoryEventBus()

        class _Broken:
            def handle(self, event):
                raise RuntimeError("boom")

        bus.subscribe(OrderConfirmed, _Broken())
        with pytest.raises(RuntimeError):
            bus.publish(OrderConfirmed(aggregate_id=uuid4()))
