"""Generic repository interfaces (Dependency Inversion Principle).

Service-layer code depends on these abstractions, never on the Django
ORM directly.  Every catalog row is owned by a user, so the owner-scoped
look-up is part of the base contract: a row owned by someone else is
indistinguishable from a missing row.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the domain entity managed by the
    repository (e.g. ``Product``, ``AdTitle``).
    """

    @abstractmethod
    def get_owned(self, id: str, user_id: str) -> Optional[T]:
        """Retrieve an entity by primary key, scoped to its owner.

        Returns ``None`` for missing, foreign or malformed ids.
        """

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an entity and publish its events."""
