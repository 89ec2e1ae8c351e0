"""User preference service layer.

Keys are normalised (trim, lower-case, whitespace -> ``_``) before any
look-up, so ``"Modal Stock"`` and ``"modal_stock"`` address the same row.
Values are JSON objects or arrays; anything else is stored as ``{}``.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

import structlog
from django.db import transaction

from modules.core.conf import ServiceSettings
from modules.core.normalization import clean_text, normalize_key
from modules.preferences.events import (
    PreferenceCreated,
    PreferenceDeleted,
    PreferencesReset,
    PreferenceUpdated,
)
from modules.preferences.exceptions import InvalidPreferenceKey, PreferenceNotFound
from modules.preferences.models import UserPreference
from modules.preferences.validators import validate_key
from shared.infrastructure.bus import event_bus

if TYPE_CHECKING:
    from modules.preferences.repositories.interfaces import IPreferenceRepository
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)


def _json_value(value: Any) -> Any:
    return value if isinstance(value, (dict, list)) else {}


class PreferenceService:
    def __init__(
        self,
        repository: IPreferenceRepository,
        settings: Optional[ServiceSettings] = None,
        bus: Optional[IEventBus] = None,
    ) -> None:
        self._repo = repository
        self._max_key_length = (settings or ServiceSettings()).max_preference_key_length
        self._bus = bus or event_bus

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_preferences(self, user_id: str, prefix: Optional[str] = None) -> Dict[str, Any]:
        prefix = clean_text(prefix).lower() or None
        return {pref.key: pref.value for pref in self._repo.list_for_user(user_id, prefix)}

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def put_preference(self, user_id: str, key: Any, value: Any) -> Tuple[str, Any]:
        """Create or replace a preference.

        Raises:
            InvalidPreferenceKey: empty key or longer than the limit.
        """
        normalized = self._normalized_key(key)
        value = _json_value(value)

        preference = self._repo.get(user_id, normalized)
        if preference is None:
            preference = UserPreference(user_id=user_id, key=normalized, value=value)
            preference.add_domain_event(
                PreferenceCreated(
                    aggregate_id=preference.id,
                    user_id=user_id,
                    diff={"before": None, "after": {"key": normalized, "value": value}},
                )
            )
        else:
            before = preference.value
            preference.value = value
            preference.add_domain_event(
                PreferenceUpdated(
                    aggregate_id=preference.id,
                    user_id=user_id,
                    diff={"before": {"value": before}, "after": {"value": value}},
                )
            )

        preference = self._repo.save(preference)
        logger.info("preference.saved", user_id=user_id, key=normalized)
        return preference.key, preference.value

    @transaction.atomic
    def delete_preference(self, user_id: str, key: Any) -> None:
        normalized = self._normalized_key(key)
        preference = self._repo.get(user_id, normalized)
        if preference is None:
            raise PreferenceNotFound(f"Preferência '{normalized}' não encontrada")
        preference.add_domain_event(
            PreferenceDeleted(
                aggregate_id=preference.id,
                user_id=user_id,
                diff={"before": {"key": normalized, "value": preference.value}, "after": None},
            )
        )
        self._repo.delete(preference)

    @transaction.atomic
    def reset_preferences(self, user_id: str, prefix: Any) -> int:
        """Delete every preference whose key starts with ``prefix``.

        Raises:
            InvalidPreferenceKey: missing / blank prefix.
        """
        prefix = clean_text(prefix).lower()
        if not prefix:
            raise InvalidPreferenceKey("prefix é obrigatório")

        keys = self._repo.delete_by_prefix(user_id, prefix)
        if keys:
            self._bus.publish(
                PreferencesReset(
                    aggregate_id=uuid.uuid4(),
                    user_id=user_id,
                    diff={
                        "action": "reset_preferences",
                        "prefix": prefix,
                        "count": len(keys),
                        "keys": keys,
                    },
                )
            )
        logger.info("preference.reset", user_id=user_id, prefix=prefix, count=len(keys))
        return len(keys)

    def _normalized_key(self, key: Any) -> str:
        result = validate_key(key, self._max_key_length)
        if not result.valid:
            raise InvalidPreferenceKey.from_result(result)
        return normalize_key(key)
