from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from modules.preferences.models import UserPreference


class IPreferenceRepository(ABC):
    @abstractmethod
    def get(self, user_id: str, key: str) -> Optional["UserPreference"]:
        """Preference by normalised key, or ``None``."""

    @abstractmethod
    def list_for_user(self, user_id: str, prefix: Optional[str] = None) -> List["UserPreference"]:
        """Preferences ordered by key, optionally filtered by key prefix."""

    @abstractmethod
    def save(self, entity: "UserPreference") -> "UserPreference":
        """Insert or update a preference."""

    @abstractmethod
    def delete(self, entity: "UserPreference") -> None:
        """Remove one preference."""

    @abstractmethod
    def delete_by_prefix(self, user_id: str, prefix: str) -> List[str]:
        """Remove every preference whose key starts with ``prefix``; returns the keys."""
