"""Product health evaluator.

Read-only aggregation producing the report shown next to the product
editor.  ``blocking`` items prevent publication; ``warnings`` are advice.
``ready_to_publish`` is true only when nothing blocks *and* the product
is already in ``ready``.
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from modules.core.normalization import clean_text, to_int
from modules.products.constants import (
    DESCRIPTION_MIN_CHARS,
    TITLE_MAX_CHARS,
    VALID_STATUSES,
    ProductFormat,
    ProductStatus,
)
from modules.products.status_machine import product_format


class HealthIssue(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    field: str


class ProductHealthReport(BaseModel):
    """Immutable health report for one product."""

    model_config = ConfigDict(frozen=True)

    ready_to_publish: bool
    blocking: List[HealthIssue]
    warnings: List[HealthIssue]
    format: str
    has_variations: bool
    titles_count: int
    images_count: int
    variants_count: int

    @property
    def blocking_codes(self) -> List[str]:
        return [issue.code for issue in self.blocking]

    @property
    def warning_codes(self) -> List[str]:
        return [issue.code for issue in self.warnings]

    def meta(self) -> dict:
        return {
            "format": self.format,
            "hasVariations": self.has_variations,
            "titlesCount": self.titles_count,
            "imagesCount": self.images_count,
            "variantsCount": self.variants_count,
        }


MESSAGES = {
    "NAME_REQUIRED": ("Nome do produto é obrigatório.", "product_name"),
    "SKU_REQUIRED": ("SKU é obrigatório no formato simples.", "sku"),
    "VARIATIONS_REQUIRED": ("Cadastre pelo menos uma variação.", "variants"),
    "VARIANT_SKU_REQUIRED": ("Todas as variações precisam de SKU.", "variants"),
    "STATUS_INVALID": ("Status do produto inválido.", "status"),
    "IMAGES_REQUIRED": ("Adicione pelo menos uma imagem para publicar.", "images"),
    "STOCK_AT_OR_BELOW_MIN": ("Estoque atual está igual ou abaixo do mínimo.", "stock"),
    "NO_AD_TITLES": ("Nenhum título alternativo cadastrado.", "ad_titles"),
}


def _issue(code: str) -> HealthIssue:
    message, field = MESSAGES[code]
    return HealthIssue(code=code, message=message, field=field)


def _first_present(row: Any, *names: str) -> Any:
    for name in names:
        value = getattr(row, name, None)
        if value is not None and value != "":
            return value
    return None


def _at_or_below_min(row: Any) -> bool:
    minimum = to_int(_first_present(row, "min_stock_quantity", "stock_minimum"))
    current = to_int(_first_present(row, "stock_quantity", "stock_real"))
    return minimum is not None and current is not None and current <= minimum


def _variant_label(variant: Any, position: int) -> str:
    attributes = getattr(variant, "attributes", None) or {}
    if isinstance(attributes, dict):
        label = " / ".join(str(v) for v in attributes.values())
        if label:
            return label
    return str(position)


def evaluate_product_health(
    product: Any,
    variants: Sequence[Any] = (),
    ad_titles: Sequence[Any] = (),
    image_links: Sequence[Any] = (),
) -> ProductHealthReport:
    blocking: List[HealthIssue] = []
    warnings: List[HealthIssue] = []

    fmt = product_format(product)
    status = clean_text(getattr(product, "status", None)).lower() or ProductStatus.DRAFT.value
    name = clean_text(getattr(product, "product_name", None)) or clean_text(
        getattr(product, "name", None)
    )

    # -- blocking ------------------------------------------------------
    if not name:
        blocking.append(_issue("NAME_REQUIRED"))

    if fmt == ProductFormat.SIMPLE:
        if not clean_text(getattr(product, "sku", None)):
            blocking.append(_issue("SKU_REQUIRED"))
    elif fmt == ProductFormat.VARIANTS:
        if not variants:
            blocking.append(_issue("VARIATIONS_REQUIRED"))
        elif any(not clean_text(getattr(v, "sku", None)) for v in variants):
            blocking.append(_issue("VARIANT_SKU_REQUIRED"))

    if status not in VALID_STATUSES:
        blocking.append(_issue("STATUS_INVALID"))

    if not image_links:
        blocking.append(_issue("IMAGES_REQUIRED"))

    # -- warnings ------------------------------------------------------
    if len(name) > TITLE_MAX_CHARS:
        warnings.append(
            HealthIssue(
                code="TITLE_TOO_LONG",
                message=f"Título principal com mais de {TITLE_MAX_CHARS} caracteres ({len(name)}).",
                field="product_name",
            )
        )

    for position, ad_title in enumerate(ad_titles, start=1):
        title = getattr(ad_title, "title", None) or ""
        if len(title) > TITLE_MAX_CHARS:
            warnings.append(
                HealthIssue(
                    code="AD_TITLE_TOO_LONG",
                    message=f"Título alternativo #{position} com mais de {TITLE_MAX_CHARS} caracteres.",
                    field="ad_titles",
                )
            )

    description = getattr(product, "description", None) or ""
    if 0 < len(description) < DESCRIPTION_MIN_CHARS:
        warnings.append(
            HealthIssue(
                code="DESCRIPTION_SHORT",
                message=(
                    f"Descrição muito curta ({len(description)} caracteres). "
                    f"Recomendado: {DESCRIPTION_MIN_CHARS}+."
                ),
                field="description",
            )
        )

    if _at_or_below_min(product):
        warnings.append(_issue("STOCK_AT_OR_BELOW_MIN"))

    if fmt == ProductFormat.VARIANTS:
        low: Optional[str] = next(
            (_variant_label(v, i) for i, v in enumerate(variants, start=1) if _at_or_below_min(v)),
            None,
        )
        if low is not None:
            warnings.append(
                HealthIssue(
                    code="VARIANT_STOCK_AT_OR_BELOW_MIN",
                    message=f'Variação "{low}" com estoque no mínimo.',
                    field="variants",
                )
            )

    if not ad_titles:
        warnings.append(_issue("NO_AD_TITLES"))

    return ProductHealthReport(
        ready_to_publish=not blocking and status == ProductStatus.READY,
        blocking=blocking,
        warnings=warnings,
        format=fmt,
        has_variations=fmt == ProductFormat.VARIANTS and bool(variants),
        titles_count=len(ad_titles),
        images_count=len(image_links),
        variants_count=len(variants),
    )
