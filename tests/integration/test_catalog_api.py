import pytest

from modules.catalog.models import Product

pytestmark = pytest.mark.integration

PRODUCTS_URL = "/api/v1/products/"


class TestPublicCatalog:
    def test_lists_live_products_unpaginated(self, api_client, make_product):
        make_product(id="analgesics-0", stock=100)
        make_product(id="analgesics-1", name="Aspirin", stock=5, multiple_of=5)
        make_product(id="analgesics-2", name="Gone").delete()

        response = api_client.get(PRODUCTS_URL)

        assert response.status_code == 200
        by_id = {p["id"]: p for p in response.json()}
        assert set(by_id) == {"analgesics-0", "analgesics-1"}
        assert by_id["analgesics-1"] == {
            "id": "analgesics-1",
            "name": "Aspirin",
            "category": "Analgesics",
            "strength": "500mg",
            "stock": 5,
            "multipleOf": 5,
            "status": "Low Stock",
        }

    def test_filters_by_category_and_stock(self, api_client, make_product):
        make_product(id="analgesics-0", stock=0)
        make_product(id="vitamins-0", category="Vitamins", name="C", stock=30)

        response = api_client.get(PRODUCTS_URL, {"category": "vitamins"})
        assert [p["id"] for p in response.json()] == ["vitamins-0"]

        response = api_client.get(PRODUCTS_URL, {"in_stock": "false"})
        assert [p["id"] for p in response.json()] == ["analgesics-0"]

    def test_retrieve(self, api_client, make_product):
        make_product(id="analgesics-0", stock=0)

        response = api_client.get(f"{PRODUCTS_URL}analgesics-0/")

        assert response.status_code == 200
        assert response.json()["status"] == "Out of Stock"

    def test_retrieve_missing(self, api_client):
        response = api_client.get(f"{PRODUCTS_URL}nope-0/")

        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "not_found"

    def test_categories(self, api_client, make_product):
        make_product(id="vitamins-0", category="Vitamins", name="C")
        make_product(id="analgesics-0")

        response = api_client.get("/api/v1/categories/")

        assert response.status_code == 200
        assert response.json() == ["Analgesics", "Vitamins"]


class TestCatalogAdministration:
    def test_mutations_require_authentication(self, api_client, make_product):
        make_product(id="analgesics-0")

        assert api_client.post(PRODUCTS_URL, {}, format="json").status_code == 401
        assert api_client.patch(f"{PRODUCTS_URL}analgesics-0/", {}, format="json").status_code == 401
        assert api_client.delete(f"{PRODUCTS_URL}analgesics-0/").status_code == 401

    def test_create(self, auth_client):
        response = auth_client.post(
            PRODUCTS_URL,
            {"name": "Ibuprofen", "category": "Analgesics", "strength": "400mg", "stock": 50, "multipleOf": 10},
            format="json",
        )

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == "analgesics-0"
        assert data["multipleOf"] == 10
        assert data["status"] == "In Stock"

    def test_update(self, auth_client, make_product):
        make_product(id="analgesics-0", stock=100)

        response = auth_client.patch(
            f"{PRODUCTS_URL}analgesics-0/", {"stock": 0}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["status"] == "Out of Stock"
        assert Product.objects.get(pk="analgesics-0").stock == 0

    def test_update_rejects_negative_stock(self, auth_client, make_product):
        make_product(id="analgesics-0")

        response = auth_client.patch(
            f"{PRODUCTS_URL}analgesics-0/", {"stock": -1}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "stock"

    def test_delete_hides_product(self, auth_client, api_client, make_product):
        make_product(id="analgesics-0")

        assert auth_client.delete(f"{PRODUCTS_URL}analgesics-0/").status_code == 204
        assert api_client.get(f"{PRODUCTS_URL}analgesics-0/").status_code == 404
        assert auth_client.delete(f"{PRODUCTS_URL}analgesics-0/").status_code == 404
