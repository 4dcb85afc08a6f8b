"""Order domain exceptions.

Raised by the Service Layer and the order store.  The API layer (Views)
catches these and translates them into HTTP responses:

- ``ValidationFailed`` -> 400, never retried.
- ``CommitFailed`` -> 409, surfaced and never retried automatically.
- ``PersistenceUnavailable`` -> 503, the whole submission may be retried.
"""

from __future__ import annotations

from typing import Dict, List

from modules.core.exceptions import PersistenceUnavailable

__all__ = [
    "CommitFailed",
    "DuplicateOrderNumber",
    "OrderImmutable",
    "OrderNotFound",
    "PersistenceUnavailable",
    "ValidationFailed",
]


class ValidationFailed(Exception):
    """The cart or customer details were rejected.

    ``errors`` maps a field path (``email``, ``items.0.quantity``) to the
    messages for that field.
    """

    def __init__(self, errors: Dict[str, List[str]]) -> None:
        self.errors = errors
        super().__init__("Order validation failed.")


class CommitFailed(Exception):
    """The stock decrement or order append failed; nothing was committed."""


class DuplicateOrderNumber(Exception):
    """An order with the same number is already stored."""


class OrderNotFound(Exception):
    """The requested order does not exist."""


class OrderImmutable(Exception):
    """A persisted order was about to be modified or deleted."""
