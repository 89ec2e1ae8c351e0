"""Django ORM implementation of the ad title repository."""

from __future__ import annotations

from typing import Any, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from modules.ad_titles.exceptions import TitleAlreadyExists
from modules.ad_titles.models import AdTitle
from modules.ad_titles.repositories.interfaces import IAdTitleRepository
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)


class AdTitleDjangoRepository(IAdTitleRepository):
    def get_owned(self, id: str, user_id: str) -> Optional[AdTitle]:
        try:
            return AdTitle.objects.filter(id=id, user_id=user_id).first()
        except (ValueError, ValidationError):
            return None

    def list_for_product(
        self, user_id: str, product_id: Any, active_only: bool = False
    ) -> List[AdTitle]:
        queryset = AdTitle.objects.filter(user_id=user_id, product_id=product_id)
        if active_only:
            queryset = queryset.filter(is_active=True)
        return list(queryset.order_by("created_at"))

    def count_for_product(
        self, user_id: str, product_id: Any, exclude_id: Optional[Any] = None
    ) -> int:
        queryset = AdTitle.objects.filter(user_id=user_id, product_id=product_id)
        if exclude_id:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.count()

    def exists_with_key(
        self,
        user_id: str,
        product_id: Any,
        title_key: str,
        exclude_id: Optional[Any] = None,
    ) -> bool:
        queryset = AdTitle.objects.filter(
            user_id=user_id,
            product_id=product_id,
            title_normalized=title_key,
        )
        if exclude_id:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()

    @transaction.atomic
    def save(self, entity: AdTitle) -> AdTitle:
        """Persist a title; a duplicate key raises ``TitleAlreadyExists``."""
        try:
            with transaction.atomic():
                entity.save()
        except IntegrityError as exc:
            logger.warning(
                "ad_title.duplicate_conflict",
                product_id=str(entity.product_id),
                title_key=entity.title_normalized,
            )
            raise TitleAlreadyExists(
                details={"title": entity.title, "scope": "database"}
            ) from exc

        event_bus.publish_all(entity.domain_events)
        entity.clear_domain_events()
        return entity

    @transaction.atomic
    def delete(self, entity: AdTitle) -> None:
        events = entity.domain_events
        entity.delete()
        event_bus.publish_all(events)
        entity.clear_domain_events()
