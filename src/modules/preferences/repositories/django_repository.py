"""Django ORM implementation of the preference repository."""

from __future__ import annotations

from typing import List, Optional

import structlog
from django.db import IntegrityError, transaction

from modules.preferences.models import UserPreference
from modules.preferences.repositories.interfaces import IPreferenceRepository
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)


class PreferenceDjangoRepository(IPreferenceRepository):
    def get(self, user_id: str, key: str) -> Optional[UserPreference]:
        return UserPreference.objects.filter(user_id=user_id, key=key).first()

    def list_for_user(self, user_id: str, prefix: Optional[str] = None) -> List[UserPreference]:
        queryset = UserPreference.objects.filter(user_id=user_id)
        if prefix:
            queryset = queryset.filter(key__istartswith=prefix)
        return list(queryset.order_by("key"))

    @transaction.atomic
    def save(self, entity: UserPreference) -> UserPreference:
        """Persist a preference.

        A concurrent insert of the same key loses against the unique
        constraint; the value is then written onto the winning row.
        """
        try:
            with transaction.atomic():
                entity.save()
        except IntegrityError:
            logger.info("preference.insert_conflict", user_id=entity.user_id, key=entity.key)
            existing = UserPreference.objects.select_for_update().get(
                user_id=entity.user_id, key=entity.key
            )
            existing.value = entity.value
            existing.save(update_fields=["value"])
            for event in entity.domain_events:
                existing.add_domain_event(event)
            entity.clear_domain_events()
            entity = existing

        event_bus.publish_all(entity.domain_events)
        entity.clear_domain_events()
        return entity

    @transaction.atomic
    def delete(self, entity: UserPreference) -> None:
        events = entity.domain_events
        entity.delete()
        event_bus.publish_all(events)
        entity.clear_domain_events()

    @transaction.atomic
    def delete_by_prefix(self, user_id: str, prefix: str) -> List[str]:
        queryset = UserPreference.objects.filter(user_id=user_id, key__istartswith=prefix)
        keys = list(queryset.order_by("key").values_list("key", flat=True))
        if keys:
            queryset.delete()
        return keys
