"""Concurrent submissions against one database.

Each worker thread gets its own connection and commits for real, so these
tests use a transactional database.
"""

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest
from django.db import connection

from modules.catalog.models import Product
from modules.catalog.repositories import ProductDjangoRepository
from modules.inventory.dtos import StockDecrement
from modules.inventory.ledger import DjangoStockLedger
from modules.orders.exceptions import ValidationFailed
from modules.orders.models import Order, OrderItem
from modules.orders.repositories import OrderDjangoRepository
from modules.orders.services import OrderSubmissionService

pytestmark = [pytest.mark.integration, pytest.mark.django_db(transaction=True)]

WORKERS = 8


def _in_thread(fn):
    def run(*args):
        try:
            return fn(*args)
        finally:
            connection.close()

    return run


class TestConcurrentLedger:
    def test_no_decrement_is_lost(self, make_product):
        make_product(id="p1", stock=1000)
        ledger = DjangoStockLedger()

        @_in_thread
        def take(_):
            return ledger.apply_decrements([StockDecrement(product_id="p1", quantity=3)])[0]

        with ThreadPoolExecutor(max_workers=WORKERS) as pool:
            results = list(pool.map(take, range(40)))

        assert sum(r.applied for r in results) == 120
        assert Product.objects.get(pk="p1").stock == 1000 - 120

    def test_oversubscription_clamps_to_zero(self, make_product):
        make_product(id="p1", stock=10)
        ledger = DjangoStockLedger()

        @_in_thread
        def take(_):
            return ledger.apply_decrements([StockDecrement(product_id="p1", quantity=3)])[0]

        with ThreadPoolExecutor(max_workers=WORKERS) as pool:
            results = list(pool.map(take, range(10)))

        assert sum(r.applied for r in results) == 10
        assert Product.objects.get(pk="p1").stock == 0
        assert all(r.stock_after >= 0 for r in results)


class TestConcurrentSubmissions:
    def test_orders_never_oversell(self, make_product, order_payload):
        make_product(id="p1", stock=30)
        make_product(id="p2", stock=30, name="Ibuprofen")
        service = OrderSubmissionService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
            stock_ledger=DjangoStockLedger(),
            event_bus=MagicMock(),
        )

        @_in_thread
        def submit(index):
            lines = [("p1", 4), ("p2", 4)] if index % 2 else [("p2", 4), ("p1", 4)]
            try:
                return service.submit_order(order_payload(*lines))
            except ValidationFailed:
                return None

        with ThreadPoolExecutor(max_workers=WORKERS) as pool:
            results = list(pool.map(submit, range(20)))

        confirmed = [r for r in results if r is not None]
        numbers = [r.order_number for r in confirmed]
        assert len(set(numbers)) == len(numbers)
        assert Order.objects.count() == len(confirmed)

        for product_id in ("p1", "p2"):
            applied = sum(
                line.applied for r in confirmed for line in r.lines if line.product_id == product_id
            )
            stored = sum(
                OrderItem.objects.filter(product_id=product_id).values_list("quantity", flat=True)
            )
            assert applied == stored == 30
            assert Product.objects.get(pk=product_id).stock == 0
