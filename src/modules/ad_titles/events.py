"""Domain events for ad titles."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class AdTitleCreated(DomainEvent):
    entity_type = "ad_title"
    action = "create"


@dataclass(frozen=True)
class AdTitleUpdated(DomainEvent):
    entity_type = "ad_title"
    action = "update"


@dataclass(frozen=True)
class AdTitleDeleted(DomainEvent):
    entity_type = "ad_title"
    action = "delete"
