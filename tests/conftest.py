import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from modules.catalog.models import Product


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _media_root(settings, tmp_path):
    """Keep rendered invoices out of the working tree."""
    settings.MEDIA_ROOT = str(tmp_path / "media")


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def admin_user():
    return get_user_model().objects.create_user(
        username="admin", password="admin-pass-123", is_staff=True
    )


@pytest.fixture()
def auth_client(admin_user):
    """APIClient with a force-authenticated administrator."""
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def make_product():
    """Factory for persisted catalog products."""

    def _make(id="analgesics-0", **overrides) -> Product:
        defaults = {
            "name": "Paracetamol",
            "category": "Analgesics",
            "strength": "500mg",
            "stock": 100,
            "multiple_of": 1,
        }
        defaults.update(overrides)
        product = Product(id=id, **defaults)
        product.save(force_insert=True)
        return product

    return _make


@pytest.fixture()
def order_payload():
    """Factory for a valid submission payload in the storefront's shape."""

    def _payload(*lines, **overrides) -> dict:
        data = {
            "customerName": "Jane Buyer",
            "storeName": "Corner Pharmacy",
            "email": "jane@example.com",
            "phone": "+1 555 0100",
            "items": [{"id": product_id, "quantity": quantity} for product_id, quantity in lines],
        }
        data.update(overrides)
        return data

    return _payload
