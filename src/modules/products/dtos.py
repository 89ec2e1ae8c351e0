"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.  DTOs are
immutable (``frozen=True``) and are where raw JSON is turned into the
canonical internal representation: every validator downstream receives
already-normalised values and never re-parses request data.

- ``ProductPayloadDTO``: product fields of an upsert request.
- ``VariantPayloadDTO``: one variant of an upsert request.
- ``UpsertProductDTO``: ``{product, mode, variants}`` envelope.
- ``ChangeStatusDTO``: ``{product_id, status}``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from modules.core.normalization import (
    clean_text,
    digits_only,
    normalize_sku,
    to_int,
    to_number,
)
from modules.products.constants import ProductFormat, UpsertMode

TEXT_FIELDS = (
    "product_name",
    "brand",
    "model",
    "ncm",
    "description",
    "notes",
    "seo_keywords",
)
DECIMAL_FIELDS = (
    "cost_price",
    "packaging_cost",
    "operational_cost",
    "width",
    "height",
    "length",
    "weight",
)
STOCK_FIELDS = ("stock_quantity", "stock_minimum", "min_stock_quantity", "stock_real")


def _optional_sku(value: Any) -> Optional[str]:
    return normalize_sku(value) or None


def _with_position(variant: Any, index: int) -> Dict[str, Any]:
    if not isinstance(variant, dict):
        return {"sort_order": index}
    if variant.get("sort_order") is None:
        return {**variant, "sort_order": index}
    return variant


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class ProductPayloadDTO(BaseModel):
    """Immutable, normalised product fields.

    Normalisation rules:
    - text fields are trimmed (non-strings become ``""``);
    - ``sku`` is trimmed, upper-cased and whitespace-collapsed
      (empty -> ``None``);
    - ``gtin`` / ``ean`` keep digits only;
    - ``format`` / ``status`` are lower-cased (``format`` defaults to
      ``simple``; an absent status stays ``None``);
    - numeric fields accept ``"12,50"`` and become ``None`` when invalid.
    """

    model_config = ConfigDict(frozen=True)

    product_name: str = ""
    sku: Optional[str] = None
    format: str = ProductFormat.SIMPLE.value
    status: Optional[str] = None
    brand: str = ""
    model: str = ""
    gtin: str = ""
    ean: str = ""
    ncm: str = ""
    description: str = ""
    notes: str = ""
    seo_keywords: str = ""
    active: bool = True

    cost_price: Optional[Decimal] = None
    packaging_cost: Optional[Decimal] = None
    operational_cost: Optional[Decimal] = None
    width: Optional[Decimal] = None
    height: Optional[Decimal] = None
    length: Optional[Decimal] = None
    weight: Optional[Decimal] = None

    stock_quantity: Optional[int] = None
    stock_minimum: Optional[int] = None
    min_stock_quantity: Optional[int] = None
    stock_real: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def accept_legacy_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("product_name") and data.get("name"):
            data = {**data, "product_name": data["name"]}
        return data

    @field_validator(*TEXT_FIELDS, mode="before")
    @classmethod
    def trim_text(cls, v: Any) -> str:
        return clean_text(v)

    @field_validator("sku", mode="before")
    @classmethod
    def canonical_sku(cls, v: Any) -> Optional[str]:
        return _optional_sku(v)

    @field_validator("gtin", "ean", mode="before")
    @classmethod
    def barcode_digits(cls, v: Any) -> str:
        return digits_only(v)

    @field_validator("format", mode="before")
    @classmethod
    def lower_format(cls, v: Any) -> str:
        return clean_text(v).lower() or ProductFormat.SIMPLE.value

    @field_validator("format")
    @classmethod
    def known_format(cls, v: str) -> str:
        if v not in ProductFormat.values:
            raise ValueError(f"Unknown product format '{v}'.")
        return v

    @field_validator("status", mode="before")
    @classmethod
    def lower_status(cls, v: Any) -> Optional[str]:
        return clean_text(v).lower() or None

    @field_validator("active", mode="before")
    @classmethod
    def truthy_active(cls, v: Any) -> bool:
        if v is None:
            return True
        if isinstance(v, str):
            return v.strip().lower() not in ("false", "0", "no", "")
        return bool(v)

    @field_validator(*DECIMAL_FIELDS, mode="before")
    @classmethod
    def coerce_decimal(cls, v: Any) -> Optional[Decimal]:
        return to_number(v)

    @field_validator(*STOCK_FIELDS, mode="before")
    @classmethod
    def coerce_int(cls, v: Any) -> Optional[int]:
        return to_int(v)

    @property
    def is_variants(self) -> bool:
        return self.format == ProductFormat.VARIANTS

    def storage_fields(self) -> Dict[str, Any]:
        """Fields written to ``Product`` (status is decided by the service).

        A ``variants`` product carries no SKU of its own.
        """
        fields = self.model_dump(exclude={"status"})
        if self.is_variants:
            fields["sku"] = None
        return fields


class VariantPayloadDTO(BaseModel):
    """Immutable, normalised variant of an upsert request.

    ``id`` names the stored variant this entry updates; without it the
    entry is matched by SKU.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    sku: Optional[str] = None
    attributes: Dict[str, Any] = {}
    sort_order: int = 0
    cost_price: Optional[Decimal] = None
    stock_quantity: Optional[int] = None
    stock_minimum: Optional[int] = None
    min_stock_quantity: Optional[int] = None
    stock_real: Optional[int] = None

    @field_validator("sku", mode="before")
    @classmethod
    def canonical_sku(cls, v: Any) -> Optional[str]:
        return _optional_sku(v)

    @field_validator("id", mode="before")
    @classmethod
    def id_text(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return clean_text(str(v)) or None

    @field_validator("attributes", mode="before")
    @classmethod
    def attributes_dict(cls, v: Any) -> Dict[str, Any]:
        return v if isinstance(v, dict) else {}

    @field_validator("cost_price", mode="before")
    @classmethod
    def coerce_decimal(cls, v: Any) -> Optional[Decimal]:
        return to_number(v)

    @field_validator(*STOCK_FIELDS, mode="before")
    @classmethod
    def coerce_int(cls, v: Any) -> Optional[int]:
        return to_int(v)


class UpsertProductDTO(BaseModel):
    """Immutable DTO for ``POST products/upsert/``.

    ``variants`` default their ``sort_order`` to their position in the
    request when the client does not send one.
    """

    model_config = ConfigDict(frozen=True)

    product: ProductPayloadDTO
    mode: UpsertMode = UpsertMode.CREATE
    product_id: Optional[str] = None
    variants: List[VariantPayloadDTO] = []

    @model_validator(mode="before")
    @classmethod
    def prepare(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        mode = clean_text(data.get("mode")).lower()
        data["mode"] = mode or UpsertMode.CREATE.value
        product = data.get("product")
        if isinstance(product, dict) and not data.get("product_id") and product.get("id"):
            data["product_id"] = str(product["id"])
        raw_variants = data.get("variants") or []
        if not isinstance(raw_variants, list):
            raw_variants = []
        data["variants"] = [
            _with_position(variant, index)
            for index, variant in enumerate(raw_variants)
        ]
        return data

    @model_validator(mode="after")
    def edit_requires_id(self) -> UpsertProductDTO:
        if self.mode == UpsertMode.EDIT and not self.product_id:
            raise ValueError("product.id is required when mode is 'edit'.")
        return self


class ChangeStatusDTO(BaseModel):
    """Immutable DTO for ``POST products/change-status/``."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    status: str

    @field_validator("product_id", "status", mode="before")
    @classmethod
    def required_text(cls, v: Any) -> str:
        text = clean_text(v) if isinstance(v, str) else ("" if v is None else str(v))
        if not text:
            raise ValueError("Field is required.")
        return text

    @field_validator("status")
    @classmethod
    def lower_status(cls, v: str) -> str:
        return v.lower()
