import pytest

from modules.orders.exceptions import OrderImmutable
from modules.orders.models import Order, OrderItem


@pytest.fixture()
def stored_order(make_product):
    make_product(id="analgesics-0")
    order = Order(
        order_number="ORD-1700000000000-000-AAAA",
        customer_name="Jane Buyer",
        store_name="Corner Pharmacy",
        email="jane@example.com",
        phone="555",
    )
    order.save()
    OrderItem(
        order=order,
        product_id="analgesics-0",
        position=0,
        product_name="Paracetamol",
        strength="500mg",
        quantity=3,
        requested_quantity=5,
    ).save()
    return order


class TestAppendOnlyOrders:
    def test_stored_order_cannot_be_updated(self, stored_order):
        stored_order.customer_name = "Someone Else"
        with pytest.raises(OrderImmutable):
            stored_order.save()
        assert Order.objects.get(pk=stored_order.pk).customer_name == "Jane Buyer"

    def test_stored_order_cannot_be_deleted(self, stored_order):
        with pytest.raises(OrderImmutable):
            stored_order.delete()
        assert Order.objects.filter(pk=stored_order.pk).exists()

    def test_stored_line_cannot_be_updated(self, stored_order):
        item = stored_order.items.get()
        item.quantity = 1
        with pytest.raises(OrderImmutable):
            item.save()

    def test_line_keeps_requested_quantity(self, stored_order):
        item = stored_order.items.get()
        assert (item.quantity, item.requested_quantity) == (3, 5)
        assert str(item) == "Paracetamol (500mg) x3"

    def test_str_is_order_number(self, stored_order):
        assert str(stored_order) == "ORD-1700000000000-000-AAAA"
