"""Signals keeping the per-seller SKU registry (``ProductSku``) in step.

A claim is inserted in the same transaction as the product / variant
write; a claim already held by another product or variant makes the
insert fail with ``IntegrityError``, which the repository turns into
``SkuAlreadyExists``.  Deleting a variant cascades to its claim.
"""

from __future__ import annotations

from typing import Optional

from django.db.models.signals import post_save
from django.dispatch import receiver

from modules.products.constants import ProductFormat
from modules.products.models import Product, ProductSku, ProductVariant

_PRODUCT_SKU_FIELDS = frozenset({"sku", "format", "deleted_at"})


def _claim(user_id: str, sku: str, product_id, variant: Optional[ProductVariant]) -> None:
    held = ProductSku.objects.filter(product_id=product_id, variant=variant, sku=sku)
    if not held.exists():
        ProductSku.objects.create(user_id=user_id, sku=sku, product_id=product_id, variant=variant)


@receiver(post_save, sender=Product)
def _sync_product_sku(sender, instance: Product, update_fields=None, **kwargs) -> None:
    if update_fields is not None and not _PRODUCT_SKU_FIELDS.intersection(update_fields):
        return

    if instance.is_deleted:
        ProductSku.objects.filter(product=instance).delete()
        return

    own_claims = ProductSku.objects.filter(product=instance, variant__isnull=True)
    if instance.format != ProductFormat.SIMPLE or not instance.sku:
        own_claims.delete()
        return

    own_claims.exclude(sku=instance.sku).delete()
    _claim(instance.user_id, instance.sku, instance.id, None)


@receiver(post_save, sender=ProductVariant)
def _sync_variant_sku(sender, instance: ProductVariant, update_fields=None, **kwargs) -> None:
    if update_fields is not None and "sku" not in update_fields:
        return

    claims = ProductSku.objects.filter(variant=instance)
    if not instance.sku:
        claims.delete()
        return

    claims.exclude(sku=instance.sku).delete()
    _claim(instance.product.user_id, instance.sku, instance.product_id, instance)
