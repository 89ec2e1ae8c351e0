"""Ad title service layer (Use Cases).

Every operation first checks that the product (or title) belongs to the
caller; foreign rows are reported as not found.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

import structlog
from django.db import transaction

from modules.ad_titles.events import AdTitleCreated, AdTitleDeleted, AdTitleUpdated
from modules.ad_titles.exceptions import AdTitleNotFound, AdTitleRuleViolation, TitleAlreadyExists
from modules.ad_titles.models import AdTitle
from modules.ad_titles.validators import AdTitleValidator, validate_title_not_empty
from modules.core.conf import ServiceSettings
from modules.core.normalization import normalize_title_key
from modules.products.exceptions import ProductNotFound

if TYPE_CHECKING:
    from modules.ad_titles.dtos import CreateAdTitleDTO, UpdateAdTitleDTO
    from modules.ad_titles.repositories.interfaces import IAdTitleRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class AdTitleService:
    def __init__(
        self,
        repository: IAdTitleRepository,
        product_repository: IProductRepository,
        settings: Optional[ServiceSettings] = None,
    ) -> None:
        settings = settings or ServiceSettings()
        self._repo = repository
        self._product_repo = product_repository
        self._validator = AdTitleValidator(
            repository, max_titles=settings.max_ad_titles_per_product
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_title(self, dto: CreateAdTitleDTO, user_id: str) -> AdTitle:
        """Add a title to an owned product.

        Raises:
            ProductNotFound: missing / foreign product.
            AdTitleRuleViolation: ``TITLE_EMPTY`` or ``MAX_TITLES_REACHED``.
            TitleAlreadyExists: the normalised title is already used.
        """
        product = self._product_repo.get_owned(dto.product_id, user_id)
        if not product:
            raise ProductNotFound(f"Produto {dto.product_id} não encontrado")

        result = validate_title_not_empty(dto.title)
        if not result.valid:
            raise AdTitleRuleViolation.from_result(result)

        result = self._validator.validate_new_title_limit(user_id, product.id)
        if not result.valid:
            logger.info("ad_title.limit_reached", product_id=str(product.id), **result.details)
            raise AdTitleRuleViolation.from_result(result)

        title_key = normalize_title_key(dto.title)
        result = self._validator.validate_title_not_duplicate(user_id, product.id, title_key)
        if not result.valid:
            raise TitleAlreadyExists.from_result(result)

        ad_title = AdTitle(
            user_id=user_id,
            product=product,
            title=dto.title,
            title_normalized=title_key,
        )
        ad_title.add_domain_event(
            AdTitleCreated(
                aggregate_id=ad_title.id,
                user_id=user_id,
                diff={"before": None, "after": {"title": dto.title, "product_id": str(product.id)}},
            )
        )
        ad_title = self._repo.save(ad_title)
        logger.info("ad_title.created", ad_title_id=str(ad_title.id), product_id=str(product.id))
        return ad_title

    @transaction.atomic
    def update_title(self, title_id: str, dto: UpdateAdTitleDTO, user_id: str) -> AdTitle:
        """Rename and/or (de)activate a title; the limit is not re-checked."""
        ad_title = self._get_owned(title_id, user_id)
        before = {"title": ad_title.title, "is_active": ad_title.is_active}

        if dto.title is not None:
            result = validate_title_not_empty(dto.title)
            if not result.valid:
                raise AdTitleRuleViolation.from_result(result)
            title_key = normalize_title_key(dto.title)
            result = self._validator.validate_title_not_duplicate(
                user_id, ad_title.product_id, title_key, exclude_id=ad_title.id
            )
            if not result.valid:
                raise TitleAlreadyExists.from_result(result)
            ad_title.title = dto.title
            ad_title.title_normalized = title_key

        if dto.is_active is not None:
            ad_title.is_active = dto.is_active

        ad_title.add_domain_event(
            AdTitleUpdated(
                aggregate_id=ad_title.id,
                user_id=user_id,
                diff={
                    "before": before,
                    "after": {"title": ad_title.title, "is_active": ad_title.is_active},
                },
            )
        )
        return self._repo.save(ad_title)

    @transaction.atomic
    def delete_title(self, title_id: str, user_id: str) -> None:
        ad_title = self._get_owned(title_id, user_id)
        ad_title.add_domain_event(
            AdTitleDeleted(
                aggregate_id=ad_title.id,
                user_id=user_id,
                diff={"before": {"title": ad_title.title}, "after": None},
            )
        )
        self._repo.delete(ad_title)
        logger.info("ad_title.deleted", ad_title_id=str(title_id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_titles(self, product_id: str, user_id: str) -> List[AdTitle]:
        product = self._product_repo.get_owned(product_id, user_id)
        if not product:
            raise ProductNotFound(f"Produto {product_id} não encontrado")
        return self._repo.list_for_product(user_id, product.id)

    def _get_owned(self, title_id: str, user_id: str) -> AdTitle:
        ad_title = self._repo.get_owned(title_id, user_id)
        if not ad_title:
            raise AdTitleNotFound(f"Título {title_id} não encontrado")
        return ad_title
