import pytest
from django.utils import timezone

from modules.orders.dtos import NewOrderDTO, NewOrderLineDTO
from modules.orders.repositories import OrderDjangoRepository


@pytest.fixture()
def confirmed_order(make_product):
    """An appended order with one line and its pending outbox row."""
    make_product(id="analgesics-0", name="Paracetamol", strength="500mg")
    make_product(id="vitamins-0", name="Vitamin C", strength="1000mg", category="Vitamins")
    return OrderDjangoRepository().append(
        NewOrderDTO(
            order_number="ORD-1700000000000-000-AAAA",
            customer_name="Jane Buyer",
            store_name="Corner Pharmacy",
            email="jane@example.com",
            phone="+1 555 0100",
            submitted_at=timezone.now(),
            lines=[
                NewOrderLineDTO(
                    product_id="analgesics-0",
                    product_name="Paracetamol",
                    strength="500mg",
                    quantity=10,
                    requested_quantity=10,
                ),
                NewOrderLineDTO(
                    product_id="vitamins-0",
                    product_name="Vitamin C",
                    strength="1000mg",
                    quantity=2,
                    requested_quantity=4,
                ),
            ],
        )
    )


@pytest.fixture()
def email_configured(settings):
    settings.EMAIL_HOST_USER = "shop@example.com"
    settings.EMAIL_HOST_PASSWORD = "app-password"
