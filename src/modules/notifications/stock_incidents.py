"""Stock minimum incident rules.

Pure functions: no I/O.  An incident opens when the current stock is at
or below the configured minimum and resolves once it rises above it.
Rows carry the minimum as ``min_stock_quantity`` (preferred) or
``stock_minimum`` and the current stock as ``stock_quantity``
(preferred) or ``stock_real``.
"""

from __future__ import annotations

from typing import Any, Optional

from modules.core.normalization import to_int

NOTIFICATION_TYPE = "STOCK_LOW"


def _field(row: Any, name: str) -> Any:
    if isinstance(row, dict):
        return row.get(name)
    return getattr(row, name, None)


def _first_set(row: Any, *names: str) -> Any:
    for name in names:
        value = _field(row, name)
        if value is not None:
            return value
    return None


def _non_negative(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    number = to_int(value)
    if number is None or number < 0:
        return None
    return number


def get_min_stock(row: Any) -> Optional[int]:
    """Configured minimum, or ``None`` when absent / invalid / negative."""
    return _non_negative(_first_set(row, "min_stock_quantity", "stock_minimum"))


def get_current_stock(row: Any) -> int:
    """Current stock; absent / invalid / negative counts as 0."""
    current = _non_negative(_first_set(row, "stock_quantity", "stock_real"))
    return 0 if current is None else current


def should_open_incident(current_stock: Any, min_stock: Any) -> bool:
    minimum = _non_negative(min_stock)
    current = _non_negative(current_stock)
    if minimum is None or current is None:
        return False
    return current <= minimum


def should_resolve_incident(current_stock: Any, min_stock: Any) -> bool:
    minimum = _non_negative(min_stock)
    current = _non_negative(current_stock)
    if minimum is None or current is None:
        return False
    return current > minimum


def build_dedupe_key(
    type: str,
    product_id: Any,
    variant_id: Any = None,
    variant_key: Optional[str] = None,
) -> str:
    """``{type}:product={id}:variant={variant_id|variant_key|none}``"""
    variant_part = variant_id if variant_id is not None else variant_key
    if variant_part is None:
        variant_part = "none"
    return f"{type}:product={product_id}:variant={variant_part}"


def get_stock_scope(item: Any) -> str:
    if not item:
        return "unknown"
    variant_id = _field(item, "variant_id")
    if variant_id:
        return f"variant:{variant_id}"
    variant_key = _field(item, "variant_key")
    if variant_key:
        return f"variant_key:{variant_key}"
    product_id = _field(item, "product_id") or _field(item, "id")
    if product_id:
        return f"product:{product_id}"
    return "unknown"
