"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Look-ups follow the Null Object pattern (``None`` for missing, foreign or
malformed ids).  Writes run inside a savepoint so that a unique-constraint
violation can be translated into ``SkuAlreadyExists`` without poisoning
the caller's transaction; the events collected on the aggregate are
published on the bus right after a successful write.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import structlog
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from modules.products.constants import ProductFormat
from modules.products.events import ProductVariantsRemoved
from modules.products.exceptions import SkuAlreadyExists
from modules.products.models import Product, ProductImageLink, ProductSku, ProductVariant
from modules.products.repositories.interfaces import IProductRepository
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_owned(self, id: str, user_id: str) -> Optional[Product]:
        try:
            return Product.objects.alive().filter(id=id, user_id=user_id).first()
        except (ValueError, ValidationError):
            return None

    def list_owned(self, user_id: str, filters: Optional[Dict[str, Any]] = None):
        queryset = Product.objects.alive().filter(user_id=user_id)
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def get_variants(self, product_id: Any) -> List[ProductVariant]:
        return list(
            ProductVariant.objects.filter(product_id=product_id).order_by(
                "sort_order", "created_at"
            )
        )

    def get_image_links(self, product_id: Any) -> List[ProductImageLink]:
        return list(ProductImageLink.objects.filter(product_id=product_id))

    # ------------------------------------------------------------------
    # SKU look-ups
    # ------------------------------------------------------------------

    def simple_product_skus(
        self, user_id: str, exclude_product_id: Optional[str] = None
    ) -> Iterable[Tuple[str, Any]]:
        queryset = Product.objects.alive().filter(
            user_id=user_id,
            format=ProductFormat.SIMPLE,
            sku__isnull=False,
        )
        if exclude_product_id:
            queryset = queryset.exclude(id=exclude_product_id)
        return queryset.values_list("sku", "id").iterator()

    def variant_skus(
        self, user_id: str, exclude_product_id: Optional[str] = None
    ) -> Iterable[Tuple[str, Any]]:
        queryset = ProductVariant.objects.filter(
            product__user_id=user_id,
            product__deleted_at__isnull=True,
        )
        if exclude_product_id:
            queryset = queryset.exclude(product_id=exclude_product_id)
        return queryset.values_list("sku", "product_id").iterator()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Product, update_fields: Optional[Sequence[str]] = None) -> Product:
        """Persist a product; a SKU constraint hit raises ``SkuAlreadyExists``."""
        try:
            with transaction.atomic():
                entity.save(update_fields=update_fields)
        except IntegrityError as exc:
            logger.warning("product.sku_conflict", sku=entity.sku, error=str(exc))
            raise self._sku_conflict(entity.user_id, entity.sku) from exc

        events = entity.domain_events
        event_bus.publish_all(events)
        entity.clear_domain_events()

        logger.info(
            "product.saved",
            product_id=str(entity.id),
            sku=entity.sku,
            event_count=len(events),
        )
        return entity

    @transaction.atomic
    def sync_variants(
        self, product: Product, variants: List[Dict[str, Any]]
    ) -> List[ProductVariant]:
        """Make the product's variants match ``variants`` (request order).

        A payload variant updates the existing row with the same ``id``
        or, failing that, the same SKU, so variant ids stay stable across
        edits.  Unmatched payload variants are inserted and unmatched rows
        deleted; ``ProductVariantsRemoved`` is published for the latter.
        """
        existing = list(ProductVariant.objects.filter(product=product))
        for variant in existing:
            variant.product = product
        by_id = {str(variant.id): variant for variant in existing}
        by_sku = {variant.sku: variant for variant in existing if variant.sku}

        plan: List[Tuple[Optional[ProductVariant], Dict[str, Any]]] = []
        matched_ids = set()
        for data in variants:
            data = dict(data)
            wanted_id = data.pop("id", None)
            current = by_id.get(str(wanted_id)) if wanted_id else None
            if current is None and data.get("sku"):
                current = by_sku.get(data["sku"])
            if current is not None and current.id in matched_ids:
                current = None
            if current is not None:
                matched_ids.add(current.id)
            plan.append((current, data))

        removed = [variant for variant in existing if variant.id not in matched_ids]
        if removed:
            ProductVariant.objects.filter(id__in=[variant.id for variant in removed]).delete()
            event_bus.publish(
                ProductVariantsRemoved(
                    aggregate_id=product.id,
                    user_id=product.user_id,
                    diff={"variantIds": [str(variant.id) for variant in removed]},
                )
            )

        # Release SKUs moving between kept variants before claiming them again.
        for current, data in plan:
            if current is not None and current.sku and current.sku != data.get("sku"):
                current.sku = None
                current.save(update_fields=["sku"])

        stored: List[ProductVariant] = []
        for current, data in plan:
            variant = current or ProductVariant(product=product)
            for field, value in data.items():
                setattr(variant, field, value)
            try:
                with transaction.atomic():
                    variant.save()
            except IntegrityError as exc:
                logger.warning(
                    "product.variant_sku_conflict", product_id=str(product.id), sku=variant.sku
                )
                raise self._sku_conflict(product.user_id, variant.sku) from exc
            stored.append(variant)

        logger.info(
            "product.variants_synced",
            product_id=str(product.id),
            count=len(stored),
            removed=len(removed),
        )
        return stored

    @transaction.atomic
    def archive(self, product: Product) -> None:
        product.delete()
        event_bus.publish_all(product.domain_events)
        product.clear_domain_events()
        logger.info("product.archived", product_id=str(product.id))

    @staticmethod
    def _sku_conflict(user_id: str, sku: Optional[str]) -> SkuAlreadyExists:
        details: Dict[str, Any] = {"sku": sku, "scope": "database"}
        holder = (
            ProductSku.objects.filter(user_id=user_id, sku=sku)
            .values_list("product_id", flat=True)
            .first()
        )
        if holder is not None:
            details["collisionProductId"] = str(holder)
        return SkuAlreadyExists(f"SKU '{sku}' já cadastrado", details=details)
