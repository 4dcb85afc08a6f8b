"""Integration tests for the standard error envelope."""

import pytest

pytestmark = pytest.mark.integration


def _assert_envelope(data, error_type):
    assert data["type"] == error_type
    assert isinstance(data["errors"], list)
    assert data["errors"]
    for entry in data["errors"]:
        assert set(entry) == {"code", "detail", "attr"}


class TestStandardizedErrors:
    def test_auth_error(self, api_client):
        response = api_client.get("/api/v1/orders/")
        assert response.status_code == 401
        _assert_envelope(response.json(), "client_error")

    def test_malformed_json(self, api_client):
        response = api_client.post(
            "/api/v1/orders/", data="{", content_type="application/json"
        )
        assert response.status_code == 400
        _assert_envelope(response.json(), "client_error")

    def test_order_validation_errors_carry_field_paths(self, api_client, order_payload):
        payload = order_payload(("missing-0", 0), email="not-an-email")
        response = api_client.post("/api/v1/orders/", payload, format="json")

        assert response.status_code == 400
        data = response.json()
        _assert_envelope(data, "validation_error")
        attrs = {entry["attr"] for entry in data["errors"]}
        assert {"email", "items.0.quantity"} <= attrs

    def test_product_validation_errors(self, auth_client):
        response = auth_client.post(
            "/api/v1/products/", {"name": "", "category": "X", "stock": -1}, format="json"
        )
        assert response.status_code == 400
        data = response.json()
        _assert_envelope(data, "validation_error")
        attrs = {entry["attr"] for entry in data["errors"]}
        assert {"name", "stock"} <= attrs
