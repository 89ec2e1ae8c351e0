"""Celery tasks for the notifications module."""

import uuid

import structlog
from celery import shared_task

from modules.core.conf import get_service_settings
from modules.core.middleware import trace_id_var
from modules.notifications.repositories import NotificationDjangoRepository
from modules.notifications.services import StockIncidentService

logger = structlog.get_logger(__name__)


@shared_task(name="notifications.check_stock_minimums")
def check_stock_minimums():
    """Periodic stock-minimum check (scheduled by Celery beat)."""
    trace_id = str(uuid.uuid4())
    token = trace_id_var.set(trace_id)
    structlog.contextvars.bind_contextvars(trace_id=trace_id)
    try:
        service = StockIncidentService(
            repository=NotificationDjangoRepository(),
            settings=get_service_settings(),
        )
        summary = service.run_check()
        logger.info("check_stock_minimums.executed", **summary.as_dict())
        return {"created": summary.created, "resolved": summary.resolved, "traceId": trace_id}
    finally:
        structlog.contextvars.unbind_contextvars("trace_id")
        trace_id_var.reset(token)
