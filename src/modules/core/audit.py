"""Best-effort audit trail.

``AuditService.record`` writes one ``AuditEvent`` row inside its own
savepoint.  Storage failures are logged and swallowed: an audit write
never fails the business operation that triggered it.

``AuditTrailHandler`` bridges the domain event bus to the service; it is
subscribed to ``DomainEvent`` in ``CoreConfig.ready()`` and therefore
receives every auditable event published by the repositories.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.db import DatabaseError, transaction

from modules.core.middleware import get_trace_id
from modules.core.models import AuditEvent
from shared.domain.bus import IEventHandler
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class AuditService:
    def record(
        self,
        *,
        user_id: str,
        entity_type: str,
        entity_id: str,
        action: str,
        diff: Optional[Dict[str, Any]] = None,
        trace_id: str = "",
    ) -> Optional[AuditEvent]:
        """Persist an audit row; returns ``None`` when the write failed."""
        trace_id = trace_id or get_trace_id()
        try:
            with transaction.atomic():
                event = AuditEvent.objects.create(
                    user_id=user_id,
                    entity_type=entity_type,
                    entity_id=entity_id,
                    action=action,
                    diff_json=diff or {},
                    trace_id=trace_id,
                )
        except DatabaseError as exc:
            logger.warning(
                "audit.write_failed",
                entity_type=entity_type,
                entity_id=entity_id,
                action=action,
                trace_id=trace_id,
                error=str(exc),
            )
            return None
        return event


class AuditTrailHandler(IEventHandler[DomainEvent]):
    def __init__(self, service: Optional[AuditService] = None) -> None:
        self._service = service or AuditService()

    def handle(self, event: DomainEvent) -> None:
        if not event.entity_type or not event.action:
            return
        self._service.record(
            user_id=event.user_id,
            entity_type=event.entity_type,
            entity_id=str(event.aggregate_id),
            action=event.action,
            diff=event.diff,
            trace_id=event.trace_id,
        )


audit_trail_handler = AuditTrailHandler()
