"""Unit tests for product DTO normalisation."""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from modules.products.dtos import ChangeStatusDTO, ProductPayloadDTO, UpsertProductDTO

pytestmark = pytest.mark.unit


class TestProductPayloadDTO:
    def test_normalises_fields(self):
        dto = ProductPayloadDTO.model_validate(
            {
                "product_name": "  Monitor 27  ",
                "sku": "  mon   27 ",
                "format": "SIMPLE",
                "status": " Ready ",
                "gtin": "789-1234 5678",
                "cost_price": "12,50",
                "stock_quantity": "7",
            }
        )

        assert dto.product_name == "Monitor 27"
        assert dto.sku == "MON 27"
        assert dto.format == "simple"
        assert dto.status == "ready"
        assert dto.gtin == "78912345678"
        assert dto.cost_price == Decimal("12.50")
        assert dto.stock_quantity == 7

    def test_empty_values(self):
        dto = ProductPayloadDTO.model_validate(
            {"sku": "   ", "status": "", "format": None, "cost_price": "abc", "brand": 42}
        )

        assert dto.sku is None
        assert dto.status is None
        assert dto.format == "simple"
        assert dto.cost_price is None
        assert dto.brand == ""

    def test_legacy_name_is_accepted(self):
        dto = ProductPayloadDTO.model_validate({"name": "Mouse"})
        assert dto.product_name == "Mouse"

    def test_unknown_format_rejected(self):
        with pytest.raises(ValidationError):
            ProductPayloadDTO.model_validate({"format": "bundle"})

    @pytest.mark.parametrize("raw,expected", [("false", False), ("0", False), (None, True), (1, True)])
    def test_active_flag(self, raw, expected):
        assert ProductPayloadDTO.model_validate({"active": raw}).active is expected

    def test_storage_fields_exclude_status(self):
        dto = ProductPayloadDTO.model_validate({"product_name": "X", "status": "ready"})
        fields = dto.storage_fields()
        assert "status" not in fields
        assert fields["product_name"] == "X"

    def test_storage_fields_drop_sku_for_variants_format(self):
        dto = ProductPayloadDTO.model_validate({"format": "variants", "sku": "top-1"})
        assert dto.sku == "TOP-1"
        assert dto.storage_fields()["sku"] is None

    def test_is_frozen(self):
        dto = ProductPayloadDTO()
        with pytest.raises(ValidationError):
            dto.sku = "NEW"


class TestUpsertProductDTO:
    def test_defaults_to_create(self):
        dto = UpsertProductDTO.model_validate({"product": {"product_name": "X"}})
        assert dto.mode == "create"
        assert dto.variants == []

    def test_product_id_taken_from_product(self):
        dto = UpsertProductDTO.model_validate(
            {"mode": "EDIT", "product": {"id": "abc", "product_name": "X"}}
        )
        assert dto.mode == "edit"
        assert dto.product_id == "abc"

    def test_edit_requires_id(self):
        with pytest.raises(ValidationError):
            UpsertProductDTO.model_validate({"mode": "edit", "product": {}})

    def test_variant_positions_default_to_request_order(self):
        dto = UpsertProductDTO.model_validate(
            {
                "product": {"format": "variants"},
                "variants": [
                    {"sku": " cam-p ", "attributes": {"tamanho": "P"}},
                    {"sku": "cam-m", "sort_order": 9},
                    {"sku": "cam-g", "attributes": "bad"},
                ],
            }
        )
        assert [v.sku for v in dto.variants] == ["CAM-P", "CAM-M", "CAM-G"]
        assert [v.sort_order for v in dto.variants] == [0, 9, 2]
        assert dto.variants[2].attributes == {}

    def test_variant_id_is_optional_text(self):
        dto = UpsertProductDTO.model_validate(
            {
                "product": {"format": "variants"},
                "variants": [{"id": " 0190-abc ", "sku": "a"}, {"id": "", "sku": "b"}, {"sku": "c"}],
            }
        )
        assert [v.id for v in dto.variants] == ["0190-abc", None, None]

    def test_non_list_variants_ignored(self):
        dto = UpsertProductDTO.model_validate({"product": {}, "variants": "nope"})
        assert dto.variants == []


class TestChangeStatusDTO:
    def test_status_lowercased(self):
        dto = ChangeStatusDTO(product_id=" p-1 ", status="READY")
        assert dto.product_id == "p-1"
        assert dto.status == "ready"

    @pytest.mark.parametrize("field", ["product_id", "status"])
    def test_required(self, field):
        data = {"product_id": "p-1", "status": "ready", field: "  "}
        with pytest.raises(ValidationError):
            ChangeStatusDTO(**data)
