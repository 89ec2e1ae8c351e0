"""SKU uniqueness validator.

A SKU must be unique across the seller's simple products *and* every
variant of every one of the seller's products.

Check order:
1. Collect candidates (the product SKU for ``simple``, each variant SKU
   for ``variants``); a repeat inside the payload fails immediately with
   scope ``payload``, before any database read.
2. Scan the seller's simple-product SKUs, then variant SKUs, skipping the
   product being edited; the first hit fails with scope ``database``.

This is an advisory pre-check producing a friendly error.  The unique
constraints on ``products`` / ``product_variants`` remain the source of
truth under concurrent writes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional, Sequence

import structlog

from modules.core.normalization import normalize_sku
from modules.products.constants import ProductFormat
from modules.products.status_machine import product_format
from shared.domain.results import ErrorCode, ValidationResult

if TYPE_CHECKING:
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


def _duplicate(sku: str, scope: str, **extra: Any) -> ValidationResult:
    return ValidationResult.fail(
        ErrorCode.SKU_DUPLICATE,
        f"SKU '{sku}' já está em uso",
        {"sku": sku, "scope": scope, **extra},
    )


class SkuUniquenessValidator:
    """Checks candidate SKUs against the payload and the seller's catalog."""

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    def validate(
        self,
        product: Any,
        variants: Sequence[Any],
        *,
        user_id: str,
        exclude_product_id: Optional[str] = None,
    ) -> ValidationResult:
        candidates: List[str] = []

        if product_format(product) == ProductFormat.VARIANTS:
            seen: set[str] = set()
            for variant in variants:
                sku = normalize_sku(getattr(variant, "sku", None))
                if not sku:
                    continue
                if sku in seen:
                    logger.info("sku.duplicate_in_payload", sku=sku)
                    return _duplicate(sku, "payload")
                seen.add(sku)
                candidates.append(sku)
        else:
            sku = normalize_sku(getattr(product, "sku", None))
            if sku:
                candidates.append(sku)

        if not candidates:
            return ValidationResult.ok()

        wanted = set(candidates)
        exclude = str(exclude_product_id) if exclude_product_id else None

        for existing_sku, owner_product_id in self._repo.simple_product_skus(user_id, exclude):
            if normalize_sku(existing_sku) in wanted:
                return self._collision(existing_sku, owner_product_id)

        for existing_sku, owner_product_id in self._repo.variant_skus(user_id, exclude):
            if normalize_sku(existing_sku) in wanted:
                return self._collision(existing_sku, owner_product_id)

        return ValidationResult.ok()

    @staticmethod
    def _collision(sku: str, product_id: Any) -> ValidationResult:
        logger.info("sku.duplicate_in_catalog", sku=sku, collision_product_id=str(product_id))
        return _duplicate(normalize_sku(sku), "database", collisionProductId=str(product_id))
