"""Inventory ledger DTOs (immutable Pydantic v2 models)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class StockDecrement(BaseModel):
    """A request to take ``quantity`` units from one product."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    quantity: int = Field(ge=1)


class AppliedDecrement(BaseModel):
    """What a decrement actually did.

    ``applied`` is less than ``requested`` when stock ran short; the
    counter is clamped at zero rather than rejected.
    """

    model_config = ConfigDict(frozen=True)

    product_id: str
    requested: int
    applied: int
    stock_before: int
    stock_after: int

    @property
    def clamped(self) -> bool:
        return self.applied < self.requested
