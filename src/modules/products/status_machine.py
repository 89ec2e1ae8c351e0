"""Product status state machine and structural guards.

Transition table (``VALID_TRANSITIONS``)::

    draft     -> ready
    ready     -> draft, published
    published -> blocked
    blocked   -> ready

Rules:
- A self-transition is always a no-op success.
- Entering ``ready`` additionally requires the ready requirements
  (name, SKU or variants depending on format, positive cost price); all
  missing fields are reported together.
- ``format`` is monotonic: ``variants`` can never go back to ``simple``.

Nothing here persists: callers apply the transition, write the new
status and emit the audit event.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional, Sequence

from modules.core.normalization import clean_text, to_number
from modules.products.constants import (
    VALID_STATUSES,
    VALID_TRANSITIONS,
    ProductFormat,
    ProductStatus,
)
from shared.domain.results import ErrorCode, ValidationResult


def _lower(value: Any) -> str:
    return clean_text(value).lower()


def product_format(product: Any) -> str:
    return _lower(getattr(product, "format", None)) or ProductFormat.SIMPLE.value


def validate_status_transition(current: Optional[str], next_status: Optional[str]) -> ValidationResult:
    """Check ``current -> next_status`` against the transition table."""
    current = _lower(current) or ProductStatus.DRAFT.value
    next_status = _lower(next_status)
    details = {"currentStatus": current, "nextStatus": next_status}

    if current == next_status:
        return ValidationResult.ok()

    if next_status not in VALID_STATUSES:
        return ValidationResult.fail(
            ErrorCode.INVALID_STATUS_TRANSITION,
            f"Status inválido: '{next_status}'",
            details,
        )

    if next_status not in VALID_TRANSITIONS.get(current, set()):
        return ValidationResult.fail(
            ErrorCode.INVALID_STATUS_TRANSITION,
            f"Transição de '{current}' para '{next_status}' não permitida",
            details,
        )

    return ValidationResult.ok()


def _positive(value: Any) -> bool:
    number = value if isinstance(value, Decimal) else to_number(value)
    return number is not None and number > 0


def validate_ready_requirements(product: Any, variants: Sequence[Any]) -> ValidationResult:
    """Collect every field missing for the ``ready`` status."""
    missing: list[str] = []

    name = clean_text(getattr(product, "product_name", None)) or clean_text(
        getattr(product, "name", None)
    )
    if not name:
        missing.append("product_name")

    fmt = product_format(product)
    if fmt == ProductFormat.SIMPLE and not clean_text(getattr(product, "sku", None)):
        missing.append("sku")
    if fmt == ProductFormat.VARIANTS and not variants:
        missing.append("variants")

    if not _positive(getattr(product, "cost_price", None)):
        missing.append("cost_price")

    if missing:
        return ValidationResult.fail(
            ErrorCode.PRODUCT_NOT_READY,
            "Produto não atende aos requisitos para 'ready'",
            {"missingFields": missing},
        )
    return ValidationResult.ok()


def validate_format_transition(current_format: Optional[str], next_format: Optional[str]) -> ValidationResult:
    current = _lower(current_format) or ProductFormat.SIMPLE.value
    nxt = _lower(next_format) or ProductFormat.SIMPLE.value
    if current == ProductFormat.VARIANTS and nxt == ProductFormat.SIMPLE:
        return ValidationResult.fail(
            ErrorCode.FORMAT_LOCK_VARIATIONS,
            "Produto com variações não pode voltar a ser simples",
            {"currentFormat": current, "nextFormat": nxt},
        )
    return ValidationResult.ok()


def validate_required_fields(product: Any, is_draft: bool) -> ValidationResult:
    """Drafts may be saved incomplete; anything else needs name (and SKU if simple)."""
    if is_draft:
        return ValidationResult.ok()
    missing: list[str] = []
    if not clean_text(getattr(product, "product_name", None)):
        missing.append("product_name")
    if product_format(product) == ProductFormat.SIMPLE and not clean_text(
        getattr(product, "sku", None)
    ):
        missing.append("sku")
    if missing:
        return ValidationResult.fail(
            ErrorCode.INVALID_INPUT,
            "Campos obrigatórios ausentes",
            {"missingFields": missing},
        )
    return ValidationResult.ok()
