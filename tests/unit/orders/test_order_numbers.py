import re
from concurrent.futures import ThreadPoolExecutor

from modules.orders.order_numbers import OrderNumberGenerator, generate_order_number

ORDER_NUMBER = re.compile(r"^ORD-\d{13}-\d{3}-[0-9A-F]{4}$")


class TestOrderNumberGenerator:
    def test_format(self):
        assert ORDER_NUMBER.match(generate_order_number())

    def test_same_millisecond_bumps_sequence(self):
        generator = OrderNumberGenerator(clock=lambda: 1700000000000, suffix=lambda: "AAAA")

        assert generator.next() == "ORD-1700000000000-000-AAAA"
        assert generator.next() == "ORD-1700000000000-001-AAAA"

    def test_new_millisecond_resets_sequence(self):
        ticks = iter([1700000000000, 1700000000000, 1700000000001])
        generator = OrderNumberGenerator(clock=lambda: next(ticks), suffix=lambda: "AAAA")

        generator.next()
        generator.next()
        assert generator.next() == "ORD-1700000000001-000-AAAA"

    def test_clock_stepping_back_never_repeats(self):
        ticks = iter([1700000000005, 1700000000001, 1700000000002])
        generator = OrderNumberGenerator(clock=lambda: next(ticks), suffix=lambda: "AAAA")

        numbers = [generator.next() for _ in range(3)]

        assert numbers == [
            "ORD-1700000000005-000-AAAA",
            "ORD-1700000000005-001-AAAA",
            "ORD-1700000000005-002-AAAA",
        ]

    def test_unique_across_threads(self):
        generator = OrderNumberGenerator(clock=lambda: 1700000000000, suffix=lambda: "AAAA")

        with ThreadPoolExecutor(max_workers=8) as pool:
            numbers = list(pool.map(lambda _: generator.next(), range(500)))

        assert len(set(numbers)) == 500
