import pytest
from django.core.exceptions import ValidationError

from modules.catalog.constants import LOW_STOCK_THRESHOLD, StockStatus, stock_status_for
from modules.catalog.models import Product


class TestStockStatus:
    @pytest.mark.parametrize(
        "stock,expected",
        [
            (0, StockStatus.OUT_OF_STOCK),
            (1, StockStatus.LOW_STOCK),
            (LOW_STOCK_THRESHOLD - 1, StockStatus.LOW_STOCK),
            (LOW_STOCK_THRESHOLD, StockStatus.IN_STOCK),
            (500, StockStatus.IN_STOCK),
        ],
    )
    def test_status_is_derived_from_stock(self, stock, expected):
        assert stock_status_for(stock) == expected

    def test_product_exposes_status(self, make_product):
        product = make_product(stock=3)
        assert product.stock_status == StockStatus.LOW_STOCK


class TestProductRules:
    def test_accepts_multiples_of_pack_size(self):
        product = Product(id="x-0", name="X", category="X", multiple_of=5)
        assert product.accepts_quantity(5)
        assert product.accepts_quantity(15)
        assert not product.accepts_quantity(7)
        assert not product.accepts_quantity(0)

    def test_pack_size_of_one_accepts_anything_positive(self):
        product = Product(id="x-0", name="X", category="X", multiple_of=1)
        assert product.accepts_quantity(1)
        assert product.accepts_quantity(13)

    def test_orderable_requires_stock_and_live_row(self, make_product):
        product = make_product(stock=1)
        assert product.is_orderable

        product.delete()
        assert not product.is_orderable

    def test_out_of_stock_is_not_orderable(self, make_product):
        assert not make_product(stock=0).is_orderable

    def test_clean_rejects_blank_category(self):
        product = Product(id="x-0", name="X", category="  ", multiple_of=1)
        with pytest.raises(ValidationError) as exc_info:
            product.clean()
        assert "category" in exc_info.value.message_dict

    def test_clean_rejects_zero_pack_size(self):
        product = Product(id="x-0", name="X", category="X", multiple_of=0)
        with pytest.raises(ValidationError) as exc_info:
            product.clean()
        assert "multiple_of" in exc_info.value.message_dict

    def test_str(self):
        product = Product(id="analgesics-3", name="Ibuprofen", category="Analgesics")
        assert str(product) == "analgesics-3 - Ibuprofen"
