"""Django ORM implementation of the notification repository.

The stock-check scan pages through rows by primary key (keyset
pagination), so memory stays bounded by ``batch_size`` however large the
catalog is.
"""

from __future__ import annotations

import uuid
from typing import Any, Iterable, Iterator, List, Optional

import structlog
from django.db import IntegrityError, models, transaction
from django.utils import timezone

from modules.notifications.models import Notification
from modules.notifications.repositories.interfaces import INotificationRepository
from modules.products.constants import ProductFormat
from modules.products.models import Product, ProductVariant
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)

STOCK_FIELDS = ("stock_quantity", "stock_real", "min_stock_quantity", "stock_minimum")

HAS_MINIMUM = models.Q(min_stock_quantity__isnull=False) | models.Q(stock_minimum__isnull=False)


def _pages(queryset: models.QuerySet, batch_size: int) -> Iterator[list]:
    last_id = None
    while True:
        page = queryset if last_id is None else queryset.filter(id__gt=last_id)
        rows = list(page.order_by("id")[:batch_size])
        if not rows:
            return
        yield rows
        if len(rows) < batch_size:
            return
        last_id = rows[-1].id


def _valid_uuids(ids: Iterable[str]) -> List[uuid.UUID]:
    parsed = []
    for raw in ids:
        try:
            parsed.append(uuid.UUID(str(raw)))
        except ValueError:
            continue
    return parsed


class NotificationDjangoRepository(INotificationRepository):
    # ------------------------------------------------------------------
    # Stock-check scan
    # ------------------------------------------------------------------

    def simple_product_pages(self, batch_size: int) -> Iterator[List[Product]]:
        queryset = (
            Product.objects.alive()
            .filter(HAS_MINIMUM, format=ProductFormat.SIMPLE)
            .only("id", "user_id", *STOCK_FIELDS)
        )
        return _pages(queryset, batch_size)

    def variant_pages(self, batch_size: int) -> Iterator[List[ProductVariant]]:
        queryset = (
            ProductVariant.objects.filter(HAS_MINIMUM, product__deleted_at__isnull=True)
            .select_related("product")
            .only("id", "product_id", "product__user_id", *STOCK_FIELDS)
        )
        return _pages(queryset, batch_size)

    # ------------------------------------------------------------------
    # Incidents
    # ------------------------------------------------------------------

    def find_active(self, user_id: str, dedupe_key: str) -> Optional[Notification]:
        return Notification.objects.filter(
            user_id=user_id,
            dedupe_key=dedupe_key,
            resolved_at__isnull=True,
        ).first()

    def active_for_variants(self, user_id: str, variant_ids: Iterable[Any]) -> List[Notification]:
        return list(
            Notification.objects.filter(
                user_id=user_id,
                variant_id__in=_valid_uuids(variant_ids),
                resolved_at__isnull=True,
            )
        )

    @transaction.atomic
    def open(self, notification: Notification) -> bool:
        try:
            with transaction.atomic():
                notification.save()
        except IntegrityError:
            logger.info(
                "notification.already_open",
                user_id=notification.user_id,
                dedupe_key=notification.dedupe_key,
            )
            notification.clear_domain_events()
            return False

        event_bus.publish_all(notification.domain_events)
        notification.clear_domain_events()
        return True

    @transaction.atomic
    def resolve(self, notification: Notification) -> Notification:
        notification.save(update_fields=["resolved_at"])
        event_bus.publish_all(notification.domain_events)
        notification.clear_domain_events()
        return notification

    # ------------------------------------------------------------------
    # Inbox
    # ------------------------------------------------------------------

    def list_for_user(
        self, user_id: str, *, unread: bool, active: bool, limit: int
    ) -> List[Notification]:
        queryset = Notification.objects.filter(user_id=user_id)
        if unread:
            queryset = queryset.filter(read_at__isnull=True)
        if active:
            queryset = queryset.filter(resolved_at__isnull=True)
        return list(queryset.order_by("-created_at")[:limit])

    def mark_read(self, user_id: str, ids: Optional[Iterable[str]] = None) -> int:
        queryset = Notification.objects.filter(user_id=user_id, read_at__isnull=True)
        if ids is not None:
            queryset = queryset.filter(id__in=_valid_uuids(ids))
        return queryset.update(read_at=timezone.now(), updated_at=timezone.now())
