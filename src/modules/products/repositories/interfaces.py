"""Product repository interface.

Extends ``IRepository[Product]`` with the read-only look-ups used by the
SKU validator and the health evaluator, plus the variant synchronisation
used by upserts.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Tuple

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db import models

    from modules.products.models import Product, ProductImageLink, ProductVariant


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def list_owned(
        self, user_id: str, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Product]":
        """Alive products of ``user_id`` with optional ORM filters."""

    @abstractmethod
    def get_variants(self, product_id: Any) -> List["ProductVariant"]:
        """Variants of a product ordered by ``sort_order``."""

    @abstractmethod
    def get_image_links(self, product_id: Any) -> List["ProductImageLink"]:
        """Image links of a product ordered by ``sort_order``."""

    @abstractmethod
    def simple_product_skus(
        self, user_id: str, exclude_product_id: Optional[str] = None
    ) -> Iterable[Tuple[str, Any]]:
        """``(sku, product_id)`` of the user's simple products that have a SKU."""

    @abstractmethod
    def variant_skus(
        self, user_id: str, exclude_product_id: Optional[str] = None
    ) -> Iterable[Tuple[str, Any]]:
        """``(sku, product_id)`` of every variant of the user's products."""

    @abstractmethod
    def sync_variants(
        self, product: "Product", variants: List[Dict[str, Any]]
    ) -> List["ProductVariant"]:
        """Make the product's variants match ``variants``, keeping matched ids."""

    @abstractmethod
    def archive(self, product: "Product") -> None:
        """Soft-delete a product."""
