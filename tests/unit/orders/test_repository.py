from datetime import timedelta

import pytest
from django.utils import timezone

from modules.core.models import EventStatus, OutboxEvent
from modules.orders.dtos import NewOrderDTO, NewOrderLineDTO
from modules.orders.exceptions import DuplicateOrderNumber
from modules.orders.models import Order
from modules.orders.repositories import OrderDjangoRepository


def _new_order(number, submitted_at=None, quantity=2):
    return NewOrderDTO(
        order_number=number,
        customer_name="Jane Buyer",
        store_name="Corner Pharmacy",
        email="jane@example.com",
        phone="555",
        submitted_at=submitted_at or timezone.now(),
        lines=[
            NewOrderLineDTO(
                product_id="analgesics-0",
                product_name="Paracetamol",
                strength="500mg",
                quantity=quantity,
                requested_quantity=quantity,
            )
        ],
    )


class TestOrderDjangoRepository:
    @pytest.fixture(autouse=True)
    def _catalog(self, make_product):
        make_product(id="analgesics-0")

    def setup_method(self):
        self.repo = OrderDjangoRepository()

    def test_append_stores_order_lines_and_outbox_event(self):
        order = self.repo.append(_new_order("ORD-1"))

        stored = self.repo.get_by_number("ORD-1")
        assert stored.pk == order.pk
        assert [(i.position, i.product_id, i.quantity) for i in stored.items.all()] == [
            (0, "analgesics-0", 2)
        ]

        event = OutboxEvent.objects.get(aggregate_id=str(order.id))
        assert event.event_type == "OrderConfirmed"
        assert event.topic == "orders"
        assert event.status == EventStatus.PENDING
        assert event.payload["order_number"] == "ORD-1"
        assert order.domain_events == []

    def test_duplicate_number_is_rejected(self):
        self.repo.append(_new_order("ORD-1"))

        with pytest.raises(DuplicateOrderNumber):
            self.repo.append(_new_order("ORD-1"))

        assert Order.objects.count() == 1
        assert OutboxEvent.objects.count() == 1

    def test_list_recent_is_newest_first_with_offset(self):
        now = timezone.now()
        for index in range(3):
            self.repo.append(_new_order(f"ORD-{index}", submitted_at=now + timedelta(seconds=index)))

        assert [o.order_number for o in self.repo.list_recent(10)] == ["ORD-2", "ORD-1", "ORD-0"]
        assert [o.order_number for o in self.repo.list_recent(1, offset=1)] == ["ORD-1"]
        assert self.repo.list_recent(5, offset=3) == []
        assert self.repo.count() == 3

    def test_get_missing(self):
        assert self.repo.get_by_number("ORD-missing") is None

    def test_store_exposes_no_generic_reads(self):
        assert not hasattr(self.repo, "get_by_id")
        assert not hasattr(self.repo, "list")
