"""Domain events primitives shared by the catalog modules.

Aggregates collect events in memory (``DomainEventMixin``); repositories
publish them on the in-process bus right after the write, inside the same
transaction, so subscribers (the audit trail) see exactly what was stored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar, Dict
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DomainEvent:
    """Base domain event (immutable).

    ``entity_type`` / ``action`` describe the event for the audit trail;
    events that leave them empty are not audited.
    """

    entity_type: ClassVar[str] = ""
    action: ClassVar[str] = ""

    aggregate_id: UUID
    user_id: str = ""
    diff: Dict[str, Any] = field(default_factory=dict)
    trace_id: str = ""
    event_id: UUID = field(default_factory=uuid4)
    occurred_on: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_name: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "event_name", self.__class__.__name__)


class DomainEventMixin:
    """Mixin for aggregate roots that collect domain events in memory."""

    _domain_events: list[DomainEvent]

    def add_domain_event(self, event: DomainEvent) -> None:
        if not hasattr(self, "_domain_events"):
            self._domain_events = []
        self._domain_events.append(event)

    def clear_domain_events(self) -> None:
        if hasattr(self, "_domain_events"):
            self._domain_events.clear()

    @property
    def domain_events(self) -> list[DomainEvent]:
        if not hasattr(self, "_domain_events"):
            self._domain_events = []
        return list(self._domain_events)
