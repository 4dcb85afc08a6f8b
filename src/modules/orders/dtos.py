"""Order DTOs for the Service Layer.

Pydantic v2 contracts between the API layer and the order services.
DTOs are immutable (``frozen=True``).

- ``CartLineDTO`` / ``SubmitOrderDTO``: submission input.  Accept the
  storefront's camelCase keys as well as snake_case field names.
- ``NewOrderLineDTO`` / ``NewOrderDTO``: what the order store appends,
  carrying the quantities the stock ledger actually applied.
- ``SubmissionLineDTO`` / ``SubmissionResult``: the confirmed outcome.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from modules.orders.constants import SubmissionStatus

if TYPE_CHECKING:
    from pydantic import ValidationError


def _required_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("This field may not be blank.")
    return value


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CartLineDTO(BaseModel):
    """One requested cart line.

    The storefront sends the product as ``id``; ``productId`` and
    ``product_id`` are accepted too.  Any display fields it echoes back
    (name, strength) are ignored: those are read from the catalog.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    product_id: str = Field(
        validation_alias=AliasChoices("product_id", "productId", "id"),
    )
    quantity: int

    @field_validator("product_id")
    @classmethod
    def product_id_must_not_be_blank(cls, v: str) -> str:
        return _required_text(v)

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be a positive integer.")
        return v


class SubmitOrderDTO(BaseModel):
    """Customer details plus a non-empty cart with distinct products."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    customer_name: str = Field(alias="customerName")
    store_name: str = Field(alias="storeName")
    email: str
    phone: str
    items: List[CartLineDTO]

    @field_validator("customer_name", "store_name", "phone")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        return _required_text(v)

    @field_validator("email")
    @classmethod
    def email_must_be_valid(cls, v: str) -> str:
        v = _required_text(v)
        try:
            validate_email(v)
        except DjangoValidationError as exc:
            raise ValueError("Enter a valid email address.") from exc
        return v

    @field_validator("items")
    @classmethod
    def cart_must_be_valid(cls, v: List[CartLineDTO]) -> List[CartLineDTO]:
        if not v:
            raise ValueError("Cart must contain at least one item.")
        product_ids = [line.product_id for line in v]
        if len(product_ids) != len(set(product_ids)):
            raise ValueError("Each product may appear only once per order.")
        return v


def validation_errors(exc: ValidationError) -> Dict[str, List[str]]:
    """Map a pydantic ``ValidationError`` to ``{field_path: [messages]}``."""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors(include_url=False):
        path = ".".join(str(part) for part in error["loc"]) or "non_field_errors"
        if error["type"] == "value_error":
            message = str(error["ctx"]["error"])
        else:
            message = error["msg"]
        errors.setdefault(path, []).append(message)
    return errors


# ---------------------------------------------------------------------------
# Store DTOs
# ---------------------------------------------------------------------------


class NewOrderLineDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: str
    product_name: str
    strength: str
    quantity: int = Field(ge=0)
    requested_quantity: int = Field(ge=1)


class NewOrderDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_number: str
    customer_name: str
    store_name: str
    email: str
    phone: str
    submitted_at: datetime
    lines: List[NewOrderLineDTO]


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class SubmissionLineDTO(BaseModel):
    """Requested versus applied quantity for one committed line."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    requested: int
    applied: int
    stock_after: int

    @property
    def clamped(self) -> bool:
        return self.applied < self.requested


class SubmissionResult(BaseModel):
    """Outcome of a confirmed submission.

    Rejections are raised as exceptions, so ``status`` is always
    ``CONFIRMED`` on a returned result.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    order_number: str
    status: SubmissionStatus
    lines: List[SubmissionLineDTO]
    order: Any = Field(default=None, exclude=True)

    @property
    def clamped(self) -> bool:
        return any(line.clamped for line in self.lines)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")

