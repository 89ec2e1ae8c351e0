"""Domain events for notifications."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class NotificationOpened(DomainEvent):
    """A stock incident was opened."""

    entity_type = "notification"
    action = "create"


@dataclass(frozen=True)
class NotificationResolved(DomainEvent):
    """A stock incident was closed (``resolved_at`` set)."""

    entity_type = "notification"
    action = "update"
