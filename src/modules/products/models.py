"""Product catalog models.

Business rules implemented at the storage layer:
- ``format`` is monotonic (simple -> variants only); enforced by the
  service layer on every upsert.
- SKU uniqueness per owner across simple products and every variant:
  ``ProductSku`` holds one row per SKU in use, unique on
  ``(user_id, sku)``, kept in step with product and variant writes by
  ``modules.products.signals``.  The partial unique index on alive simple
  products and the per-product variant index back it up.  These
  constraints are the authoritative guard; the SKU validator is a friendly
  pre-check.
- Numeric columns are nullable: invalid or empty input is stored as NULL.
- Products are archived (``deleted_at``), never hard-deleted.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel, SoftDeleteModel, SoftDeleteQuerySet
from modules.products.constants import ProductFormat, ProductStatus
from shared.domain.events import DomainEventMixin


def _money() -> models.DecimalField:
    return models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)


def _measure() -> models.DecimalField:
    return models.DecimalField(max_digits=10, decimal_places=3, null=True, blank=True)


class ProductQuerySet(SoftDeleteQuerySet):
    def delete(self) -> tuple[int, dict[str, int]]:
        """Bulk archive; the archived products release their SKUs."""
        ProductSku.objects.filter(product_id__in=self.alive().values("id")).delete()
        return super().delete()


class Product(DomainEventMixin, SoftDeleteModel):
    """Product aggregate root, owned by exactly one seller.

    ``min_stock_quantity`` / ``stock_real`` are legacy aliases of
    ``stock_minimum`` / ``stock_quantity`` kept for rows written by older
    clients; readers prefer the first non-null value.
    """

    user_id = models.CharField(max_length=255, db_index=True)
    product_name = models.CharField(max_length=255, blank=True, default="")
    sku = models.CharField(max_length=100, null=True, blank=True)
    format = models.CharField(
        max_length=20,
        choices=ProductFormat.choices,
        default=ProductFormat.SIMPLE,
    )
    status = models.CharField(
        max_length=20,
        choices=ProductStatus.choices,
        default=ProductStatus.DRAFT,
    )

    brand = models.CharField(max_length=120, blank=True, default="")
    model = models.CharField(max_length=120, blank=True, default="")
    gtin = models.CharField(max_length=14, blank=True, default="")
    ean = models.CharField(max_length=14, blank=True, default="")
    ncm = models.CharField(max_length=20, blank=True, default="")
    description = models.TextField(blank=True, default="")
    notes = models.TextField(blank=True, default="")
    seo_keywords = models.TextField(blank=True, default="")
    active = models.BooleanField(default=True)

    cost_price = _money()
    packaging_cost = _money()
    operational_cost = _money()

    stock_quantity = models.IntegerField(null=True, blank=True)
    stock_minimum = models.IntegerField(null=True, blank=True)
    min_stock_quantity = models.IntegerField(null=True, blank=True)
    stock_real = models.IntegerField(null=True, blank=True)

    width = _measure()
    height = _measure()
    length = _measure()
    weight = _measure()

    objects = ProductQuerySet.as_manager()

    class Meta:
        db_table = "products"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user_id", "status"], name="products_user_status_idx"),
            models.Index(fields=["format"], name="products_format_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["user_id", "sku"],
                condition=models.Q(sku__isnull=False, deleted_at__isnull=True),
                name="products_user_sku_uniq",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.sku or '-'} - {self.product_name}"


class ProductVariant(BaseModel):
    """Child SKU of a ``variants``-format product."""

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="variants",
    )
    sku = models.CharField(max_length=100, null=True, blank=True)
    attributes = models.JSONField(default=dict, blank=True)
    sort_order = models.PositiveIntegerField(default=0)
    cost_price = _money()
    stock_quantity = models.IntegerField(null=True, blank=True)
    stock_minimum = models.IntegerField(null=True, blank=True)
    min_stock_quantity = models.IntegerField(null=True, blank=True)
    stock_real = models.IntegerField(null=True, blank=True)

    class Meta:
        db_table = "product_variants"
        ordering = ["sort_order", "created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["product", "sku"],
                name="product_variants_product_sku_uniq",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.sku} ({self.product_id})"


class ProductImageLink(BaseModel):
    """Image attached to a product (storage handled elsewhere)."""

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="image_links",
    )
    user_id = models.CharField(max_length=255, db_index=True)
    image_url = models.URLField(max_length=1024)
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "product_image_links"
        ordering = ["sort_order", "created_at"]

    def __str__(self) -> str:
        return self.image_url


class ProductSku(BaseModel):
    """One SKU in use by a seller, held by a simple product or a variant.

    ``variant`` is NULL for the SKU of a simple product.  Rows are written
    in the same transaction as the product / variant that holds the SKU,
    so the ``(user_id, sku)`` constraint settles concurrent claims across
    products and formats.
    """

    user_id = models.CharField(max_length=255)
    sku = models.CharField(max_length=100)
    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="sku_claims",
    )
    variant = models.ForeignKey(
        ProductVariant,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="sku_claims",
    )

    class Meta:
        db_table = "product_skus"
        constraints = [
            models.UniqueConstraint(
                fields=["user_id", "sku"],
                name="product_skus_user_sku_uniq",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.sku} ({self.user_id})"
