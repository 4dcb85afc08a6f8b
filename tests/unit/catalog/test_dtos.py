import pytest
from pydantic import ValidationError

from modules.catalog.dtos import CreateProductDTO, UpdateProductDTO


class TestCreateProductDTO:
    def test_accepts_camel_case_pack_size(self):
        dto = CreateProductDTO.model_validate(
            {"name": " Ibuprofen ", "category": "Analgesics", "stock": 10, "multipleOf": 5}
        )
        assert dto.name == "Ibuprofen"
        assert dto.multiple_of == 5

    def test_defaults(self):
        dto = CreateProductDTO(name="Ibuprofen", category="Analgesics")
        assert dto.stock == 0
        assert dto.multiple_of == 1
        assert dto.strength == ""

    @pytest.mark.parametrize(
        "payload,field",
        [
            ({"name": "", "category": "A"}, "name"),
            ({"name": "N", "category": "   "}, "category"),
            ({"name": "N", "category": "A", "stock": -1}, "stock"),
            ({"name": "N", "category": "A", "multipleOf": 0}, "multipleOf"),
        ],
    )
    def test_rejects_invalid_fields(self, payload, field):
        with pytest.raises(ValidationError) as exc_info:
            CreateProductDTO.model_validate(payload)
        locs = {error["loc"][0] for error in exc_info.value.errors()}
        assert field in locs

    def test_is_frozen(self):
        dto = CreateProductDTO(name="N", category="A")
        with pytest.raises(ValidationError):
            dto.name = "Other"


class TestUpdateProductDTO:
    def test_changes_only_include_supplied_fields(self):
        dto = UpdateProductDTO.model_validate({"stock": 0, "multipleOf": 2})
        assert dto.changes() == {"stock": 0, "multiple_of": 2}

    def test_rejects_blank_name(self):
        with pytest.raises(ValidationError):
            UpdateProductDTO(name=" ")
