"""Notification service layer.

``StockIncidentService.run_check`` is the stock-minimum job: it walks
every simple product and every variant that has a minimum configured,
opening a ``STOCK_LOW`` incident when stock is at or below the minimum
and resolving the open one when stock is back above it.

Rows are processed sequentially in pages of ``stock_check_batch_size``.
Each row is its own unit of work, so a failure part-way leaves the
incidents already written in place and the next run picks up the rest.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Iterable, List, Optional

import structlog
from django.db import transaction
from django.utils import timezone

from modules.core.conf import ServiceSettings
from modules.notifications.events import NotificationOpened, NotificationResolved
from modules.notifications.models import Notification
from modules.notifications.stock_incidents import (
    NOTIFICATION_TYPE,
    build_dedupe_key,
    get_current_stock,
    get_min_stock,
    get_stock_scope,
    should_open_incident,
    should_resolve_incident,
)

if TYPE_CHECKING:
    from modules.notifications.repositories.interfaces import INotificationRepository

logger = structlog.get_logger(__name__)

CREATED = "created"
RESOLVED = "resolved"


@dataclass
class StockCheckSummary:
    created: int = 0
    resolved: int = 0
    scanned: int = 0

    def count(self, outcome: Optional[str]) -> None:
        self.scanned += 1
        if outcome == CREATED:
            self.created += 1
        elif outcome == RESOLVED:
            self.resolved += 1

    def as_dict(self) -> dict:
        return asdict(self)


class StockIncidentService:
    def __init__(
        self,
        repository: INotificationRepository,
        settings: Optional[ServiceSettings] = None,
    ) -> None:
        self._repo = repository
        self._settings = settings or ServiceSettings()

    def run_check(self) -> StockCheckSummary:
        batch_size = max(1, self._settings.stock_check_batch_size)
        summary = StockCheckSummary()
        log = logger.bind(batch_size=batch_size)
        log.info("stock_check.started")

        for page in self._repo.simple_product_pages(batch_size):
            for product in page:
                summary.count(
                    self._process(
                        product,
                        user_id=product.user_id,
                        product_id=product.id,
                    )
                )

        for page in self._repo.variant_pages(batch_size):
            for variant in page:
                summary.count(
                    self._process(
                        variant,
                        user_id=variant.product.user_id,
                        product_id=variant.product_id,
                        variant_id=variant.id,
                    )
                )

        log.info("stock_check.completed", **summary.as_dict())
        return summary

    @transaction.atomic
    def _process(
        self,
        row: Any,
        *,
        user_id: str,
        product_id: Any,
        variant_id: Any = None,
    ) -> Optional[str]:
        min_stock = get_min_stock(row)
        if min_stock is None:
            return None

        current_stock = get_current_stock(row)
        dedupe_key = build_dedupe_key(NOTIFICATION_TYPE, product_id, variant_id)
        stock_scope = get_stock_scope({"product_id": product_id, "variant_id": variant_id})

        if should_open_incident(current_stock, min_stock):
            if self._repo.find_active(user_id, dedupe_key):
                return None
            payload = {
                "currentStock": current_stock,
                "minStock": min_stock,
                "scope": stock_scope.split(":", 1)[0],
                "productId": str(product_id),
            }
            if variant_id:
                payload["variantId"] = str(variant_id)
            notification = Notification(
                user_id=user_id,
                type=NOTIFICATION_TYPE,
                product_id=product_id,
                variant_id=variant_id,
                payload=payload,
                dedupe_key=dedupe_key,
            )
            after = {"type": NOTIFICATION_TYPE, "productId": str(product_id)}
            if variant_id:
                after["variantId"] = str(variant_id)
            notification.add_domain_event(
                NotificationOpened(
                    aggregate_id=notification.id,
                    user_id=user_id,
                    diff={"before": None, "after": after},
                )
            )
            if not self._repo.open(notification):
                return None
            logger.info("stock_check.incident_opened", stock_scope=stock_scope, user_id=user_id)
            return CREATED

        if should_resolve_incident(current_stock, min_stock):
            active = self._repo.find_active(user_id, dedupe_key)
            if not active:
                return None
            self._close(active)
            logger.info("stock_check.incident_resolved", stock_scope=stock_scope, user_id=user_id)
            return RESOLVED

        return None

    @transaction.atomic
    def resolve_for_variants(self, user_id: str, variant_ids: Iterable[Any]) -> int:
        """Close the open incidents of variants that no longer exist."""
        resolved = 0
        for active in self._repo.active_for_variants(user_id, variant_ids):
            self._close(active)
            resolved += 1
        if resolved:
            logger.info("stock_check.removed_variants_resolved", user_id=user_id, count=resolved)
        return resolved

    def _close(self, active: Notification) -> None:
        active.resolved_at = timezone.now()
        active.add_domain_event(
            NotificationResolved(
                aggregate_id=active.id,
                user_id=active.user_id,
                diff={"before": {"resolved_at": None}, "after": {"resolved_at": active.resolved_at}},
            )
        )
        self._repo.resolve(active)


class NotificationService:
    def __init__(self, repository: INotificationRepository) -> None:
        self._repo = repository

    def list_notifications(
        self, user_id: str, *, unread: bool = False, active: bool = False, limit: int = 50
    ) -> List[Notification]:
        return self._repo.list_for_user(user_id, unread=unread, active=active, limit=limit)

    @transaction.atomic
    def mark_read(self, user_id: str, ids: Optional[Iterable[str]] = None) -> int:
        """Mark the given notifications (or all unread ones) as read."""
        count = self._repo.mark_read(user_id, ids)
        logger.info("notifications.marked_read", user_id=user_id, count=count, all=ids is None)
        return count
