"""Unit tests for the product health evaluator."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from modules.products.health import evaluate_product_health

pytestmark = pytest.mark.unit


def _product(**fields):
    defaults = {
        "product_name": "Monitor 27",
        "sku": "MON-27",
        "format": "simple",
        "status": "ready",
        "description": "",
        "stock_quantity": None,
        "stock_minimum": None,
        "min_stock_quantity": None,
        "stock_real": None,
    }
    defaults.update(fields)
    return SimpleNamespace(**defaults)


IMAGE = SimpleNamespace(image_url="https://img/1.jpg")
TITLE = SimpleNamespace(title="Monitor 27 Envio Imediato")


class TestBlocking:
    def test_simple_without_sku_and_images(self):
        report = evaluate_product_health(_product(sku=""), [], [TITLE], [])

        assert report.blocking_codes == ["SKU_REQUIRED", "IMAGES_REQUIRED"]
        assert report.ready_to_publish is False

    def test_variants_without_variations(self):
        report = evaluate_product_health(_product(format="variants", sku=None), [], [TITLE], [IMAGE])
        assert report.blocking_codes == ["VARIATIONS_REQUIRED"]

    def test_variant_without_sku(self):
        variants = [SimpleNamespace(sku="V-1"), SimpleNamespace(sku="  ")]
        report = evaluate_product_health(
            _product(format="variants", sku=None), variants, [TITLE], [IMAGE]
        )
        assert report.blocking_codes == ["VARIANT_SKU_REQUIRED"]

    def test_missing_name_and_bad_status(self):
        report = evaluate_product_health(
            _product(product_name=" ", status="archived"), [], [TITLE], [IMAGE]
        )
        assert report.blocking_codes == ["NAME_REQUIRED", "STATUS_INVALID"]

    def test_missing_status_defaults_to_draft(self):
        report = evaluate_product_health(_product(status=None), [], [TITLE], [IMAGE])
        assert report.blocking == []
        assert report.ready_to_publish is False


class TestReadyToPublish:
    def test_clean_ready_product(self):
        report = evaluate_product_health(_product(), [], [TITLE], [IMAGE])
        assert report.blocking == []
        assert report.warnings == []
        assert report.ready_to_publish is True

    def test_clean_draft_is_not_ready_to_publish(self):
        report = evaluate_product_health(_product(status="draft"), [], [TITLE], [IMAGE])
        assert report.ready_to_publish is False


class TestWarnings:
    def test_long_titles(self):
        long_title = SimpleNamespace(title="x" * 61)
        report = evaluate_product_health(
            _product(product_name="y" * 61), [], [TITLE, long_title], [IMAGE]
        )
        assert report.warning_codes == ["TITLE_TOO_LONG", "AD_TITLE_TOO_LONG"]
        assert "#2" in report.warnings[1].message

    def test_short_description(self):
        report = evaluate_product_health(_product(description="curta"), [], [TITLE], [IMAGE])
        assert report.warning_codes == ["DESCRIPTION_SHORT"]

    def test_empty_description_is_not_short(self):
        report = evaluate_product_health(_product(description=""), [], [TITLE], [IMAGE])
        assert "DESCRIPTION_SHORT" not in report.warning_codes

    def test_product_stock_at_minimum(self):
        report = evaluate_product_health(
            _product(stock_quantity=3, stock_minimum=3), [], [TITLE], [IMAGE]
        )
        assert report.warning_codes == ["STOCK_AT_OR_BELOW_MIN"]

    def test_stock_warning_needs_both_values(self):
        report = evaluate_product_health(_product(stock_minimum=3), [], [TITLE], [IMAGE])
        assert "STOCK_AT_OR_BELOW_MIN" not in report.warning_codes

    def test_only_first_low_variant_is_reported(self):
        variants = [
            SimpleNamespace(sku="V-1", attributes={"cor": "Azul"}, stock_quantity=9, stock_minimum=2),
            SimpleNamespace(sku="V-2", attributes={"cor": "Preta", "tamanho": "M"}, stock_quantity=1, stock_minimum=2),
            SimpleNamespace(sku="V-3", attributes={}, stock_quantity=0, stock_minimum=2),
        ]
        report = evaluate_product_health(
            _product(format="variants", sku=None), variants, [TITLE], [IMAGE]
        )
        assert report.warning_codes == ["VARIANT_STOCK_AT_OR_BELOW_MIN"]
        assert "Preta / M" in report.warnings[0].message

    def test_no_ad_titles(self):
        report = evaluate_product_health(_product(), [], [], [IMAGE])
        assert report.warning_codes == ["NO_AD_TITLES"]


class TestMeta:
    def test_counts(self):
        variants = [SimpleNamespace(sku="V-1"), SimpleNamespace(sku="V-2")]
        report = evaluate_product_health(
            _product(format="variants", sku=None), variants, [TITLE], [IMAGE, IMAGE]
        )
        assert report.meta() == {
            "format": "variants",
            "hasVariations": True,
            "titlesCount": 1,
            "imagesCount": 2,
            "variantsCount": 2,
        }
