"""Product DRF serializers (output only).

Writes go through the Pydantic DTOs in ``dtos.py``; these serializers
only render the Interface layer responses.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product, ProductVariant


class ProductVariantSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductVariant
        fields = [
            "id",
            "sku",
            "attributes",
            "sort_order",
            "cost_price",
            "stock_quantity",
            "stock_minimum",
            "min_stock_quantity",
            "stock_real",
        ]
        read_only_fields = fields


class ProductSerializer(serializers.ModelSerializer):
    """Product with its variants (empty for ``simple`` products)."""

    variants = ProductVariantSerializer(many=True, read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "product_name",
            "sku",
            "format",
            "status",
            "brand",
            "model",
            "gtin",
            "ean",
            "ncm",
            "description",
            "notes",
            "seo_keywords",
            "active",
            "cost_price",
            "packaging_cost",
            "operational_cost",
            "stock_quantity",
            "stock_minimum",
            "min_stock_quantity",
            "stock_real",
            "width",
            "height",
            "length",
            "weight",
            "variants",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class HealthIssueSerializer(serializers.Serializer):
    code = serializers.CharField()
    message = serializers.CharField()
    field = serializers.CharField()
