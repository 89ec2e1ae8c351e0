"""Validation result primitives and the API error taxonomy.

Domain validators never raise for expected business-rule violations;
they return a ``ValidationResult`` that the service layer inspects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_INPUT = "INVALID_INPUT"
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    TITLE_NOT_FOUND = "TITLE_NOT_FOUND"
    PREFERENCE_NOT_FOUND = "PREFERENCE_NOT_FOUND"
    SKU_DUPLICATE = "SKU_DUPLICATE"
    TITLE_DUPLICATE = "TITLE_DUPLICATE"
    MAX_TITLES_REACHED = "MAX_TITLES_REACHED"
    TITLE_EMPTY = "TITLE_EMPTY"
    KEY_INVALID = "KEY_INVALID"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    PRODUCT_NOT_READY = "PRODUCT_NOT_READY"
    FORMAT_LOCK_VARIATIONS = "FORMAT_LOCK_VARIATIONS"
    DB_ERROR = "DB_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    CONFIG_ERROR = "CONFIG_ERROR"

    def __str__(self) -> str:
        return self.value


HTTP_STATUS_BY_CODE: Dict[ErrorCode, int] = {
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.TITLE_EMPTY: 400,
    ErrorCode.KEY_INVALID: 400,
    ErrorCode.PRODUCT_NOT_FOUND: 404,
    ErrorCode.TITLE_NOT_FOUND: 404,
    ErrorCode.PREFERENCE_NOT_FOUND: 404,
    ErrorCode.SKU_DUPLICATE: 409,
    ErrorCode.TITLE_DUPLICATE: 409,
    ErrorCode.MAX_TITLES_REACHED: 409,
    ErrorCode.INVALID_STATUS_TRANSITION: 409,
    ErrorCode.PRODUCT_NOT_READY: 409,
    ErrorCode.FORMAT_LOCK_VARIATIONS: 409,
    ErrorCode.METHOD_NOT_ALLOWED: 405,
    ErrorCode.DB_ERROR: 500,
    ErrorCode.INTERNAL_ERROR: 500,
    ErrorCode.CONFIG_ERROR: 503,
}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a domain check (immutable)."""

    valid: bool
    code: Optional[ErrorCode] = None
    message: str = ""
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, **details: Any) -> ValidationResult:
        return cls(valid=True, details=details)

    @classmethod
    def fail(
        cls,
        code: ErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> ValidationResult:
        return cls(valid=False, code=code, message=message, details=details or {})

    def __bool__(self) -> bool:
        return self.valid
