"""Generic repository interfaces (Dependency Inversion Principle).

``IReadRepository[T]`` is the read-only contract; ``IRepository[T]`` adds
mutation.  Service-layer code
depends on these abstractions, never on Django ORM directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, Sequence, TypeVar

T = TypeVar("T")


class IReadRepository(ABC, Generic[T]):
    """Read-only repository contract.

    Type parameter ``T`` represents the domain entity managed by the
    repository (e.g. ``Product``).
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by its identifier."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> Sequence[T]:
        """List entities with optional filters."""


class IRepository(IReadRepository[T]):
    """Read/write repository contract."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an entity."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Remove an entity by ID (soft or hard delete)."""
