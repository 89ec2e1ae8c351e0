"""Event handlers reacting to catalog changes."""

from __future__ import annotations

from typing import Optional

import structlog

from modules.notifications.repositories import NotificationDjangoRepository
from modules.notifications.services import StockIncidentService
from modules.products.events import ProductVariantsRemoved
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class ProductVariantsRemovedHandler(IEventHandler[ProductVariantsRemoved]):
    """Resolves the stock incidents of variants dropped by an edit.

    The stock check only scans existing variants, so an incident left open
    for a deleted variant would never be closed.
    """

    def __init__(self, service: Optional[StockIncidentService] = None) -> None:
        self._service = service

    def handle(self, event: ProductVariantsRemoved) -> None:
        service = self._service or StockIncidentService(NotificationDjangoRepository())
        resolved = service.resolve_for_variants(event.user_id, event.diff.get("variantIds") or [])
        logger.info(
            "notifications.variants_removed_handled",
            product_id=str(event.aggregate_id),
            resolved=resolved,
        )


product_variants_removed_handler = ProductVariantsRemovedHandler()
