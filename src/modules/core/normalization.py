"""Canonicalisation helpers shared by every catalog module.

All functions are total: they never raise and map ``None`` or non-string
input to an empty value.  Validators only ever see the output of these
helpers, never raw request data.

- ``normalize_sku``: trim, uppercase, collapse whitespace runs.
- ``normalize_title``: trim, collapse whitespace (case preserved).
- ``normalize_title_key``: ``normalize_title`` + lowercase (uniqueness key).
- ``normalize_key``: preference keys (trim, lowercase, spaces -> ``_``).
- ``to_number`` / ``to_int``: lenient numeric coercion (``","`` decimals).
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

_WHITESPACE_RE = re.compile(r"\s+")
_NON_DIGIT_RE = re.compile(r"\D")


def clean_text(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip()


def collapse_whitespace(value: Any) -> str:
    return _WHITESPACE_RE.sub(" ", clean_text(value))


def normalize_sku(value: Any) -> str:
    return collapse_whitespace(value).upper()


def normalize_title(value: Any) -> str:
    return collapse_whitespace(value)


def normalize_title_key(value: Any) -> str:
    return normalize_title(value).lower()


def normalize_key(value: Any) -> str:
    return _WHITESPACE_RE.sub("_", clean_text(value).lower())


def digits_only(value: Any) -> str:
    """Strip everything but digits (GTIN / EAN barcodes)."""
    if value is None:
        return ""
    return _NON_DIGIT_RE.sub("", str(value))


def to_number(value: Any) -> Optional[Decimal]:
    """Coerce ``value`` to ``Decimal``; ``None`` when empty or not numeric.

    Accepts Brazilian-style decimal commas (``"12,50"``).
    """
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip().replace(",", ".")
    if not text:
        return None
    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    if not number.is_finite():
        return None
    return number


def to_int(value: Any) -> Optional[int]:
    """Coerce ``value`` to ``int`` (truncating decimals); ``None`` when invalid."""
    number = to_number(value)
    if number is None:
        return None
    return int(number)
