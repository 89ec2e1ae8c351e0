"""Domain events for user preferences."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class PreferenceCreated(DomainEvent):
    entity_type = "user_preference"
    action = "create"


@dataclass(frozen=True)
class PreferenceUpdated(DomainEvent):
    entity_type = "user_preference"
    action = "update"


@dataclass(frozen=True)
class PreferenceDeleted(DomainEvent):
    entity_type = "user_preference"
    action = "delete"


@dataclass(frozen=True)
class PreferencesReset(DomainEvent):
    """Bulk removal by prefix; ``aggregate_id`` identifies the reset itself."""

    entity_type = "user_preference"
    action = "update"
