"""Product service layer (Use Cases).

Orchestrates the catalog rules for the Product aggregate, delegating
persistence to the injected ``IProductRepository``.

Validation chain for an upsert (nothing is written before it passes):
1. create -> status forced to ``draft``;
   edit   -> owned product must exist, then the format lock
   (``variants`` never reverts to ``simple``) is checked first;
2. edit only -> required fields (skipped for drafts);
3. SKU uniqueness (payload, then the seller's catalog);
4. edit only -> status transition, and ready requirements when the
   target status is ``ready``.

Validators return ``ValidationResult``; this layer turns a failed result
into the matching domain exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Tuple

import structlog
from django.db import transaction

from modules.products.constants import ProductFormat, ProductStatus, UpsertMode
from modules.products.events import (
    ProductArchived,
    ProductCreated,
    ProductStatusChanged,
    ProductUpdated,
)
from modules.products.exceptions import ProductNotFound, ProductRuleViolation, SkuAlreadyExists
from modules.products.health import ProductHealthReport, evaluate_product_health
from modules.products.models import Product
from modules.products.sku_validator import SkuUniquenessValidator
from modules.products.status_machine import (
    validate_format_transition,
    validate_ready_requirements,
    validate_required_fields,
    validate_status_transition,
)
from shared.domain.results import ValidationResult

if TYPE_CHECKING:
    from modules.ad_titles.repositories.interfaces import IAdTitleRepository
    from modules.products.dtos import ChangeStatusDTO, UpsertProductDTO, VariantPayloadDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class UpsertOutcome:
    product: Product
    created: bool

    @property
    def message(self) -> str:
        return "Produto criado com sucesso" if self.created else "Produto atualizado com sucesso"


def _raise_unless_valid(result: ValidationResult, error_class=ProductRuleViolation) -> None:
    if not result.valid:
        raise error_class.from_result(result)


def _diff(product: Product, changes: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    before: Dict[str, Any] = {}
    after: Dict[str, Any] = {}
    for field, value in changes.items():
        current = getattr(product, field)
        if current != value:
            before[field] = current
            after[field] = value
    return before, after


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` (and, for health reports, an
    ``IAdTitleRepository``) via constructor injection (DIP).
    """

    def __init__(
        self,
        repository: IProductRepository,
        ad_title_repository: Optional[IAdTitleRepository] = None,
    ) -> None:
        self._repo = repository
        self._ad_titles = ad_title_repository
        self._sku_validator = SkuUniquenessValidator(repository)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def upsert_product(self, dto: UpsertProductDTO, user_id: str) -> UpsertOutcome:
        """Create or edit a product and its variants.

        Raises:
            ProductNotFound: edit of a missing / foreign product.
            ProductRuleViolation: format lock, required fields, status
                transition or ready requirements.
            SkuAlreadyExists: SKU collision (payload or catalog).
        """
        log = logger.bind(user_id=user_id, mode=str(dto.mode), product_id=dto.product_id)
        payload = dto.product
        variants = list(dto.variants) if payload.is_variants else []

        if dto.mode == UpsertMode.CREATE:
            _raise_unless_valid(
                self._sku_validator.validate(payload, variants, user_id=user_id),
                SkuAlreadyExists,
            )
            product = Product(
                user_id=user_id,
                status=ProductStatus.DRAFT,
                **payload.storage_fields(),
            )
            product.add_domain_event(
                ProductCreated(
                    aggregate_id=product.id,
                    user_id=user_id,
                    diff={"before": None, "after": {"product_name": product.product_name, "sku": product.sku}},
                )
            )
            product = self._repo.save(product)
            self._store_variants(product, variants)
            log.info("product.created", product_id=str(product.id))
            return UpsertOutcome(product=product, created=True)

        product = self._repo.get_owned(dto.product_id, user_id)
        if not product:
            log.warning("product.not_found")
            raise ProductNotFound(f"Produto {dto.product_id} não encontrado")

        _raise_unless_valid(validate_format_transition(product.format, payload.format))

        next_status = payload.status or product.status
        _raise_unless_valid(
            validate_required_fields(payload, is_draft=next_status == ProductStatus.DRAFT)
        )
        _raise_unless_valid(
            self._sku_validator.validate(
                payload, variants, user_id=user_id, exclude_product_id=str(product.id)
            ),
            SkuAlreadyExists,
        )
        _raise_unless_valid(validate_status_transition(product.status, next_status))
        if next_status == ProductStatus.READY:
            _raise_unless_valid(validate_ready_requirements(payload, variants))

        changes = {**payload.storage_fields(), "status": next_status}
        before, after = _diff(product, changes)
        previous_status = product.status
        for field, value in changes.items():
            setattr(product, field, value)

        product.add_domain_event(
            ProductUpdated(
                aggregate_id=product.id,
                user_id=user_id,
                diff={"before": before, "after": after},
            )
        )
        if previous_status != next_status:
            product.add_domain_event(
                ProductStatusChanged(
                    aggregate_id=product.id,
                    user_id=user_id,
                    diff={"before": {"status": previous_status}, "after": {"status": next_status}},
                )
            )
        product = self._repo.save(product)
        self._store_variants(product, variants)
        log.info("product.updated", changed_fields=sorted(after))
        return UpsertOutcome(product=product, created=False)

    @transaction.atomic
    def change_status(self, dto: ChangeStatusDTO, user_id: str) -> Product:
        """Move a product through the status state machine.

        Raises:
            ProductNotFound: missing / foreign product.
            ProductRuleViolation: ``INVALID_STATUS_TRANSITION`` or
                ``PRODUCT_NOT_READY``.
        """
        product = self._repo.get_owned(dto.product_id, user_id)
        if not product:
            raise ProductNotFound(f"Produto {dto.product_id} não encontrado")

        log = logger.bind(
            product_id=str(product.id),
            current_status=product.status,
            new_status=dto.status,
        )

        result = validate_status_transition(product.status, dto.status)
        if not result.valid:
            log.warning("product.invalid_transition")
            raise ProductRuleViolation.from_result(result)

        if dto.status == ProductStatus.READY:
            variants = (
                self._repo.get_variants(product.id)
                if product.format == ProductFormat.VARIANTS
                else []
            )
            result = validate_ready_requirements(product, variants)
            if not result.valid:
                log.warning("product.not_ready", missing=result.details.get("missingFields"))
                raise ProductRuleViolation.from_result(result)

        if product.status == dto.status:
            return product

        previous_status = product.status
        product.status = dto.status
        product.add_domain_event(
            ProductStatusChanged(
                aggregate_id=product.id,
                user_id=user_id,
                diff={"before": {"status": previous_status}, "after": {"status": dto.status}},
            )
        )
        product = self._repo.save(product, update_fields=["status"])
        log.info("product.status_changed")
        return product

    @transaction.atomic
    def archive_product(self, product_id: str, user_id: str) -> None:
        """Soft-delete a product.

        Raises:
            ProductNotFound: missing / foreign product.
        """
        product = self._repo.get_owned(product_id, user_id)
        if not product:
            raise ProductNotFound(f"Produto {product_id} não encontrado")
        product.add_domain_event(
            ProductArchived(aggregate_id=product.id, user_id=user_id)
        )
        self._repo.archive(product)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, user_id: str, filters: Optional[Dict[str, Any]] = None):
        return self._repo.list_owned(user_id, filters)

    def get_product(self, product_id: str, user_id: str) -> Product:
        product = self._repo.get_owned(product_id, user_id)
        if not product:
            raise ProductNotFound(f"Produto {product_id} não encontrado")
        return product

    def get_variants(self, product: Product) -> List[Any]:
        return self._repo.get_variants(product.id)

    def get_health(self, product_id: str, user_id: str) -> Tuple[Product, ProductHealthReport]:
        """Evaluate a product's publish readiness (read-only).

        Only active ad titles are considered.
        """
        product = self.get_product(product_id, user_id)
        variants = (
            self._repo.get_variants(product.id)
            if product.format == ProductFormat.VARIANTS
            else []
        )
        ad_titles = (
            self._ad_titles.list_for_product(user_id, product.id, active_only=True)
            if self._ad_titles is not None
            else []
        )
        image_links = self._repo.get_image_links(product.id)
        report = evaluate_product_health(product, variants, ad_titles, image_links)
        logger.info(
            "product.health_evaluated",
            product_id=str(product.id),
            blocking=report.blocking_codes,
            ready_to_publish=report.ready_to_publish,
        )
        return product, report

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _store_variants(self, product: Product, variants: Sequence[VariantPayloadDTO]) -> None:
        if product.format != ProductFormat.VARIANTS:
            return
        self._repo.sync_variants(product, [v.model_dump() for v in variants])
