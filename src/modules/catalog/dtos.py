"""Catalog DTOs for the Service Layer.

Pydantic v2 contracts between the API layer and ``CatalogService``.
DTOs are immutable (``frozen=True``) and accept both the camelCase keys
used by the storefront and snake_case field names.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Must not be empty.")
    return value


class CreateProductDTO(BaseModel):
    """Input for product creation.

    ``stock`` may be zero (listed but unorderable); ``multiple_of``
    must be at least 1.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    category: str
    strength: str = ""
    stock: int = Field(default=0, ge=0)
    multiple_of: int = Field(default=1, ge=1, alias="multipleOf")

    @field_validator("name", "category")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("strength")
    @classmethod
    def strip_strength(cls, v: str) -> str:
        return v.strip()


class UpdateProductDTO(BaseModel):
    """Input for partial product updates; ``None`` means unchanged."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str | None = None
    category: str | None = None
    strength: str | None = None
    stock: int | None = Field(default=None, ge=0)
    multiple_of: int | None = Field(default=None, ge=1, alias="multipleOf")

    @field_validator("name", "category")
    @classmethod
    def must_not_be_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _strip_required(v)

    def changes(self) -> dict:
        """Return only the fields explicitly supplied."""
        return self.model_dump(exclude_none=True)
